"""Map absolute file lines onto GitHub diff positions."""

from __future__ import annotations

import logging
from typing import Mapping

from prcommenter_core.errors import InvalidTargetError
from prcommenter_core.patch import ChangeRange

logger = logging.getLogger(__name__)


def find_change_range(ranges: Mapping[str, ChangeRange], file_name: str, line: int) -> ChangeRange:
    """Return the ChangeRange covering file_name:line or raise InvalidTargetError."""
    change_range = ranges.get(file_name)
    if change_range is None or line not in change_range:
        raise InvalidTargetError(file_name, line)
    return change_range


def is_commentable(ranges: Mapping[str, ChangeRange], file_name: str, line: int) -> bool:
    change_range = ranges.get(file_name)
    return change_range is not None and line in change_range


def resolve_position(change_range: ChangeRange, line: int) -> int:
    """
    Return the diff position of ``line`` within the file's hunk.

    The @@ header is position 0, so the first line of the range is position 1.
    """
    if line not in change_range:
        raise InvalidTargetError(change_range.file_name, line)
    position = line - change_range.range_start + 1
    logger.debug("%s:%d resolves to diff position %d", change_range.file_name, line, position)
    return position

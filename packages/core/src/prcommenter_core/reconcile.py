"""Detect comments that were already posted on a previous run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from prcommenter_core.errors import DuplicateCommentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExistingComment:
    """A review comment already on the PR, as fetched from GitHub."""

    file_name: str
    body: str
    comment_id: int


@dataclass
class CandidateComment:
    """A line comment about to be posted.

    ``position`` and ``commit_ref`` come from the file's ChangeRange;
    ``start_line`` is only set for multi-line spans.
    """

    file_name: str
    body: str
    line: int
    commit_ref: str
    position: int
    start_line: int | None = field(default=None)

    def to_payload(self) -> dict:
        """Fields sent to GitHub's review-comment endpoint."""
        payload = {
            "path": self.file_name,
            "body": self.body,
            "commit_id": self.commit_ref,
            "line": self.line,
            "position": self.position,
        }
        if self.start_line is not None:
            payload["start_line"] = self.start_line
        return payload


def find_existing_comment(
    existing: list[ExistingComment],
    file_name: str,
    body: str,
    strict: bool = False,
) -> int | None:
    """Return the id of an existing comment with the same file and body, or None.

    Matching is exact on both fields. When several comments match, the last
    one wins (a warning is logged) unless ``strict`` is set, in which case
    DuplicateCommentError is raised.
    """
    matches = [c.comment_id for c in existing if c.file_name == file_name and c.body == body]
    if not matches:
        return None
    if len(matches) > 1:
        if strict:
            raise DuplicateCommentError(file_name, matches)
        logger.warning(
            "%d identical comments found on %s (ids %s); replacing %s",
            len(matches),
            file_name,
            matches,
            matches[-1],
        )
    return matches[-1]

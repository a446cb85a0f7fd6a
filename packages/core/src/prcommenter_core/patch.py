"""Turn a PR file's unified-diff patch into the line range a comment may target.

Only the first hunk of a patch is used. A file with several hunks is still
accepted, but ``hunk_count`` records how many were seen so callers can tell
that lines from later hunks will be rejected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from prcommenter_core.errors import PatchError, PatchSetupError, PatchUnresolvedError, RefUnresolvedError

logger = logging.getLogger(__name__)

# Matched at the start of the patch only. An omitted count means a one-line hunk.
_HUNK_HEADER_RE = re.compile(r"@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")
_ANY_HUNK_RE = re.compile(r"^@@ .* @@", re.MULTILINE)
_COMMIT_REF_RE = re.compile(r".+ref=(.+)")

# GitHub reports "removed"; some clients normalise it to "deleted".
_DELETED_STATUSES = {"removed", "deleted"}


@dataclass(frozen=True)
class ChangeRange:
    """Inclusive post-change line range of a file that may receive comments."""

    file_name: str
    range_start: int
    range_end: int
    commit_ref: str
    hunk_count: int = 1

    def __post_init__(self):
        if self.range_start > self.range_end:
            raise ValueError(f"{self.file_name}: range start {self.range_start} is after range end {self.range_end}")

    def __contains__(self, line: int) -> bool:
        return self.range_start <= line <= self.range_end

    @property
    def multi_hunk(self) -> bool:
        return self.hunk_count > 1


def parse_change_range(file_name: str, patch: str | None, contents_url: str | None, changes: int = 0) -> ChangeRange:
    """Parse one file's patch and contents URL into a ChangeRange.

    Raises PatchUnresolvedError when there is neither a hunk header nor any
    changed line, or when the first hunk adds no lines at all (``+N,0``), and
    RefUnresolvedError when the contents URL has no ``ref=``.
    """
    hunk_count = len(_ANY_HUNK_RE.findall(patch or ""))
    header = _HUNK_HEADER_RE.match(patch or "")
    if header:
        start = int(header.group(1))
        count = int(header.group(2)) if header.group(2) is not None else 1
        if count == 0:
            raise PatchUnresolvedError(file_name, "the first hunk only removes lines")
        range_start, range_end = start, start + count - 1
    elif (changes or 0) >= 1:
        # Renames and mode changes carry no hunk but still accept a comment.
        range_start, range_end = 1, 1
    else:
        raise PatchUnresolvedError(file_name)

    ref_match = _COMMIT_REF_RE.match(contents_url or "")
    if not ref_match:
        raise RefUnresolvedError(file_name)

    if hunk_count > 1:
        logger.warning(
            "%s has %d hunks; only lines %d-%d (the first hunk) can be commented on",
            file_name,
            hunk_count,
            range_start,
            range_end,
        )

    return ChangeRange(
        file_name=file_name,
        range_start=range_start,
        range_end=range_end,
        commit_ref=ref_match.group(1),
        hunk_count=max(hunk_count, 1),
    )


def load_change_ranges(files) -> dict[str, ChangeRange]:
    """Build the file name → ChangeRange map for every non-deleted PR file.

    Every file is parsed even after a failure so the raised PatchSetupError
    reports all broken files at once.
    """
    ranges: dict[str, ChangeRange] = {}
    errors: list[PatchError] = []

    for file in files:
        if file.status in _DELETED_STATUSES:
            logger.debug("Skipping deleted file %s", file.filename)
            continue
        try:
            ranges[file.filename] = parse_change_range(
                file.filename,
                file.patch,
                file.contents_url,
                file.changes,
            )
        except PatchError as e:
            errors.append(e)

    if errors:
        raise PatchSetupError(errors)
    return ranges

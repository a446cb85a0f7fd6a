"""Exception hierarchy for prcommenter.

Setup-time failures (bad patches, missing PR, missing token) derive from
SetupError and prevent a Commenter from being created at all. Write-time
failures are raised per call, one at a time.
"""

from __future__ import annotations


class CommenterError(Exception):
    """Base class for every error raised by prcommenter."""


# --------------------------------------------------------------------------- #
# Session setup                                                               #
# --------------------------------------------------------------------------- #


class SetupError(CommenterError):
    """The session could not be created (missing token, PR lookup or fetch failed)."""


class PullRequestNotFoundError(SetupError):
    def __init__(self, repo: str, pr_number: int):
        self.repo = repo
        self.pr_number = pr_number
        super().__init__(f"PR #{pr_number} does not exist in {repo}")


class PatchError(CommenterError):
    """A single file's change metadata could not be parsed."""

    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"{file_name}: {reason}")


class PatchUnresolvedError(PatchError):
    def __init__(self, file_name: str, reason: str = "the patch details could not be resolved"):
        super().__init__(file_name, reason)


class RefUnresolvedError(PatchError):
    def __init__(self, file_name: str):
        super().__init__(file_name, "the commit ref could not be resolved")


class PatchSetupError(SetupError):
    """One or more PR files failed to parse. Carries every per-file error."""

    def __init__(self, errors: list[PatchError]):
        self.errors = list(errors)
        details = "\n".join(str(e) for e in self.errors)
        super().__init__(f"there were errors processing the PR files.\n{details}")


# --------------------------------------------------------------------------- #
# Writes                                                                      #
# --------------------------------------------------------------------------- #


class InvalidTargetError(CommenterError):
    """The (file, line) is outside every commentable range of the PR."""

    def __init__(self, file_name: str, line: int):
        self.file_name = file_name
        self.line = line
        super().__init__(f"{file_name}:{line} is not part of the commented diff")


class DuplicateCommentError(CommenterError):
    """Strict reconciliation found more than one identical existing comment."""

    def __init__(self, file_name: str, comment_ids: list[int]):
        self.file_name = file_name
        self.comment_ids = list(comment_ids)
        super().__init__(f"{file_name}: {len(self.comment_ids)} identical comments exist ({self.comment_ids})")


class RateLimitExhaustedError(CommenterError):
    """Every attempt hit GitHub's abuse rate limit."""

    def __init__(self, attempts: int, elapsed_seconds: int):
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"abuse rate limit still active after {attempts} attempts ({elapsed_seconds}s spent waiting)"
        )


class RemoteWriteError(CommenterError):
    """A remote create/delete failed for any reason other than rate limiting.

    The original exception is chained as ``__cause__``.
    """


class ReplaceIncompleteError(RemoteWriteError):
    """The old comment was deleted but its replacement could not be created."""

    def __init__(self, comment_id: int, message: str):
        self.comment_id = comment_id
        super().__init__(f"deleted existing comment {comment_id} but could not create its replacement: {message}")


class ReplaceRateLimitedError(ReplaceIncompleteError, RateLimitExhaustedError):
    """The old comment was deleted and every attempt to create its replacement was rate limited.

    Catchable as either ReplaceIncompleteError or RateLimitExhaustedError.
    """

    def __init__(self, comment_id: int, attempts: int, elapsed_seconds: int):
        self.comment_id = comment_id
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
        # Both parents build their own message, so set it here once.
        Exception.__init__(
            self,
            f"deleted existing comment {comment_id} but its replacement hit the abuse rate limit "
            f"after {attempts} attempts ({elapsed_seconds}s spent waiting)",
        )

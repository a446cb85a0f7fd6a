"""Write PR comments once, at the right diff position, with rate-limit retries."""

from __future__ import annotations

import logging
import time
from typing import Callable, Mapping

from github import GithubException

from prcommenter_core.config import DEFAULT_CONFIG
from prcommenter_core.errors import (
    CommenterError,
    PullRequestNotFoundError,
    RateLimitExhaustedError,
    RemoteWriteError,
    ReplaceIncompleteError,
    ReplaceRateLimitedError,
    SetupError,
)
from prcommenter_core.gh.pull_request import (
    create_issue_comment,
    create_review_comment,
    delete_review_comment,
    get_existing_comments,
    get_pr_files,
    get_pull,
    get_repo,
)
from prcommenter_core.patch import ChangeRange, load_change_ranges
from prcommenter_core.position import find_change_range, resolve_position
from prcommenter_core.reconcile import CandidateComment, ExistingComment, find_existing_comment
from prcommenter_core.retry import write_with_retries

logger = logging.getLogger(__name__)


class Commenter:
    """Comment session bound to one pull request.

    Change ranges and existing comments are loaded once when the session is
    created. Each write validates its target locally before any network call,
    replaces an identical existing comment instead of duplicating it, and
    retries GitHub's abuse rate limit with backoff.
    """

    def __init__(
        self,
        repo,
        pr,
        change_ranges: Mapping[str, ChangeRange],
        existing_comments: list[ExistingComment],
        config: dict | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.repo = repo
        self.pr = pr
        self.change_ranges = dict(change_ranges)
        self.existing_comments = list(existing_comments)
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self._sleep = sleep

    @classmethod
    def for_pull_request(
        cls,
        token: str | None,
        repo_name: str,
        pr_number: int,
        config: dict | None = None,
        repo_obj=None,
    ) -> Commenter:
        """Fetch the PR's files and review comments and open a session on them.

        Raises SetupError (or a subclass) if the token is missing, the PR does
        not exist, the fetch fails, or any file's patch cannot be parsed.
        """
        if not token:
            raise SetupError("the GITHUB_TOKEN has not been set")

        try:
            repo = repo_obj if repo_obj is not None else get_repo(repo_name, token=token)
            pr = get_pull(repo, pr_number)
        except GithubException as e:
            raise PullRequestNotFoundError(repo_name, pr_number) from e

        try:
            files = get_pr_files(pr)
            existing = get_existing_comments(pr)
        except GithubException as e:
            raise SetupError(f"could not fetch PR #{pr_number} from {repo_name}: {e}") from e

        change_ranges = load_change_ranges(files)
        logger.debug(
            "Loaded %d commentable file(s) and %d existing comment(s) for %s#%d",
            len(change_ranges),
            len(existing),
            repo_name,
            pr_number,
        )
        return cls(repo, pr, change_ranges, existing, config=config)

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def write_line_comment(self, file_name: str, body: str, line: int) -> bool:
        """Comment on a single line. Returns False if an identical comment was kept."""
        change_range = find_change_range(self.change_ranges, file_name, line)
        candidate = CandidateComment(
            file_name=file_name,
            body=body,
            line=line,
            commit_ref=change_range.commit_ref,
            position=resolve_position(change_range, line),
        )
        return self._write_comment_if_required(candidate)

    def write_multiline_comment(self, file_name: str, body: str, start_line: int, end_line: int) -> bool:
        """Comment on the span start_line..end_line; both ends must be commentable."""
        find_change_range(self.change_ranges, file_name, start_line)
        change_range = find_change_range(self.change_ranges, file_name, end_line)

        if start_line == end_line:
            return self.write_line_comment(file_name, body, end_line)
        if start_line > end_line:
            raise ValueError(f"start line {start_line} is after end line {end_line}")

        candidate = CandidateComment(
            file_name=file_name,
            body=body,
            line=end_line,
            commit_ref=change_range.commit_ref,
            position=resolve_position(change_range, end_line),
            start_line=start_line,
        )
        return self._write_comment_if_required(candidate)

    def write_general_comment(self, body: str) -> bool:
        """Post a PR-level comment. No line validation and no de-duplication."""
        self._remote(
            "create issue comment",
            lambda: write_with_retries(lambda: create_issue_comment(self.pr, body), **self._retry),
        )
        return True

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    @property
    def _retry(self) -> dict:
        return {"max_attempts": self.config["max_attempts"], "sleep": self._sleep}

    def _write_comment_if_required(self, candidate: CandidateComment) -> bool:
        comment_id = find_existing_comment(
            self.existing_comments,
            candidate.file_name,
            candidate.body,
            strict=self.config["strict_duplicates"],
        )

        if comment_id is not None and not self.config["replace_existing"]:
            logger.debug("Identical comment %d already on %s; skipping", comment_id, candidate.file_name)
            return False

        if comment_id is not None:
            logger.debug("Replacing existing comment %d on %s", comment_id, candidate.file_name)
            self._remote(
                f"delete existing comment {comment_id}",
                lambda: delete_review_comment(self.pr, comment_id),
            )
            self.existing_comments = [c for c in self.existing_comments if c.comment_id != comment_id]

        payload = candidate.to_payload()
        try:
            new_id = write_with_retries(lambda: create_review_comment(self.repo, self.pr, payload), **self._retry)
        except RateLimitExhaustedError as e:
            if comment_id is not None:
                raise ReplaceRateLimitedError(comment_id, e.attempts, e.elapsed_seconds) from e
            raise
        except Exception as e:
            if comment_id is not None:
                raise ReplaceIncompleteError(comment_id, str(e)) from e
            if isinstance(e, CommenterError):
                raise
            raise RemoteWriteError(f"write review comment: {e}") from e

        if new_id is not None:
            self.existing_comments.append(ExistingComment(candidate.file_name, candidate.body, new_id))
        return True

    def _remote(self, action: str, fn: Callable[[], object]):
        """Run fn, wrapping any non-prcommenter failure in RemoteWriteError."""
        try:
            return fn()
        except CommenterError:
            raise
        except Exception as e:
            raise RemoteWriteError(f"{action}: {e}") from e

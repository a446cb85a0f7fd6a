from __future__ import annotations

import logging

from github import Github, UnknownObjectException

from prcommenter_core.reconcile import ExistingComment

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pr_files(pr):
    """Return the PR's changed files (filename, status, patch, contents_url, changes)."""
    return list(pr.get_files())


def get_existing_comments(pr) -> list[ExistingComment]:
    return [ExistingComment(file_name=c.path, body=c.body, comment_id=c.id) for c in pr.get_review_comments()]


def create_review_comment(repo, pr, payload: dict) -> int | None:
    """Post one line comment as a single-comment review and return its id.

    Posting through a review is what lets the deprecated ``position`` field
    reach GitHub alongside ``line``.
    """
    comment = dict(payload)
    commit = repo.get_commit(comment.pop("commit_id"))
    review = pr.create_review(commit=commit, body="", event="COMMENT", comments=[comment])
    created = list(pr.get_single_review_comments(review.id))
    return created[0].id if created else None


def delete_review_comment(pr, comment_id: int) -> None:
    """Delete a review comment. A comment that is already gone is not an error."""
    try:
        pr.get_review_comment(comment_id).delete()
    except UnknownObjectException:
        logger.debug("Review comment %d already deleted", comment_id)


def create_issue_comment(pr, body: str):
    return pr.create_issue_comment(body)

"""Shared session setup for commands that talk to a pull request."""

from __future__ import annotations

import click

from prcommenter_core.commenter import Commenter
from prcommenter_core.errors import CommenterError


def open_session(ctx: click.Context, repo: str, pr_number: int) -> Commenter:
    config = ctx.obj["config"] if ctx.obj else {}
    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    try:
        return Commenter.for_pull_request(token, repo, pr_number, config=config)
    except CommenterError as e:
        raise click.ClickException(str(e))

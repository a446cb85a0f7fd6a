"""line / span / general commands - write a comment onto a pull request."""

from __future__ import annotations

import click
from rich.console import Console

from prcommenter_core.errors import CommenterError
from prcommenter_cli.commands.session import open_session

console = Console()

_repo_option = click.option("--repo", required=True, help="GitHub repository in owner/name format.")
_pr_option = click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
_body_option = click.option("--body", required=True, help="Comment text (GitHub-flavored markdown).")


def _report(posted: bool, target: str):
    if posted:
        console.print(f"[green]Comment posted on {target}.[/green]")
    else:
        console.print(f"[yellow]Identical comment already on {target}; left unchanged.[/yellow]")


@click.command("line")
@_repo_option
@_pr_option
@click.option("--file", "file_name", required=True, help="Path of the changed file.")
@click.option("--line", type=int, required=True, help="Line number in the new version of the file.")
@_body_option
@click.pass_context
def line_cmd(ctx, repo: str, pr_number: int, file_name: str, line: int, body: str):
    """Comment on a single changed line."""
    commenter = open_session(ctx, repo, pr_number)
    try:
        posted = commenter.write_line_comment(file_name, body, line)
    except CommenterError as e:
        raise click.ClickException(str(e))
    _report(posted, f"{file_name}:{line}")


@click.command("span")
@_repo_option
@_pr_option
@click.option("--file", "file_name", required=True, help="Path of the changed file.")
@click.option("--start", "start_line", type=int, required=True, help="First line of the span.")
@click.option("--end", "end_line", type=int, required=True, help="Last line of the span.")
@_body_option
@click.pass_context
def span_cmd(ctx, repo: str, pr_number: int, file_name: str, start_line: int, end_line: int, body: str):
    """Comment on a span of changed lines."""
    commenter = open_session(ctx, repo, pr_number)
    try:
        posted = commenter.write_multiline_comment(file_name, body, start_line, end_line)
    except (CommenterError, ValueError) as e:
        raise click.ClickException(str(e))
    _report(posted, f"{file_name}:{start_line}-{end_line}")


@click.command("general")
@_repo_option
@_pr_option
@_body_option
@click.pass_context
def general_cmd(ctx, repo: str, pr_number: int, body: str):
    """Post a PR-level comment that is not attached to any line."""
    commenter = open_session(ctx, repo, pr_number)
    try:
        commenter.write_general_comment(body)
    except CommenterError as e:
        raise click.ClickException(str(e))
    console.print(f"[green]Comment posted on PR #{pr_number}.[/green]")

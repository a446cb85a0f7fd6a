"""ranges command - list the commentable line range of every changed file."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from prcommenter_cli.commands.session import open_session

console = Console()


@click.command("ranges")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.pass_context
def ranges_cmd(ctx, repo: str, pr_number: int):
    """Show which lines of each changed file can receive a comment.

    Only the first hunk of each file is commentable; files with more hunks
    are highlighted.
    """
    commenter = open_session(ctx, repo, pr_number)

    if not commenter.change_ranges:
        console.print("[yellow]No commentable files in this pull request.[/yellow]")
        return

    table = Table(title=f"Commentable lines - {repo}#{pr_number}", show_header=True, header_style="bold cyan")
    table.add_column("File")
    table.add_column("Lines", justify="right", width=14)
    table.add_column("Hunks", justify="right", width=6)
    table.add_column("Commit", width=8)

    for name in sorted(commenter.change_ranges):
        r = commenter.change_ranges[name]
        hunks = f"[yellow]{r.hunk_count}[/yellow]" if r.multi_hunk else str(r.hunk_count)
        table.add_row(name, f"{r.range_start}-{r.range_end}", hunks, r.commit_ref[:7])

    console.print(table)

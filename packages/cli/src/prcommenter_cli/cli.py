"""CLI entry point for prcommenter.

Commands:
  line     - comment on a single changed line
  span     - comment on a range of changed lines
  general  - post a PR-level comment
  ranges   - show which lines of each file can receive comments
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from prcommenter_cli.commands.comment import general_cmd, line_cmd, span_cmd
from prcommenter_cli.commands.ranges import ranges_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("prcommenter"),
    prog_name="prcommenter",
)
@click.option(
    "--config",
    "config_path",
    default=".prcommenter.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRCOMMENTER_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log retries and reconciliation decisions.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Post de-duplicated review comments onto a GitHub pull request."""
    from prcommenter_core.config import load_config
    from prcommenter_cli.auth import resolve_github_token

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(line_cmd)
main.add_command(span_cmd)
main.add_command(general_cmd)
main.add_command(ranges_cmd)

"""CLI entry point for prdigest.

Commands:
  review   analyze a pull request's commits or files and post one report comment
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prdigest_cli.commands.review import review_cmd


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through rich, leaving stdout for the report."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # The SDK HTTP clients are noisy at DEBUG.
    for name in ("httpx", "httpcore", "urllib3", "github"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("prdigest"),
    prog_name="prdigest",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """AI-powered commit-by-commit review reports for GitHub pull requests."""
    ctx.ensure_object(dict)
    configure_logging(verbose)
    ctx.obj["verbose"] = verbose


main.add_command(review_cmd)

"""Delivery of the rendered report to the pull request."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.rule import Rule

from prdigest_core.gh.pull_request import create_comment
from prdigest_core.models import Rejected
from prdigest_core.report import render_oversized_warning

console = Console()
logger = logging.getLogger(__name__)


def print_shadow_comment(body: str, title: str = "Shadow review (not posted)") -> None:
    """Print a comment body to the terminal instead of posting it."""
    console.print(Rule(f"[bold]{title}[/bold]"))
    console.print(Markdown(body))
    console.print(Rule())


def publish_report(pr, body: str, shadow: bool = False) -> bool:
    """Post the report as one PR comment. Returns True when posted.

    Called exactly once per run. PublishError propagates: there is no
    other delivery channel.
    """
    if shadow:
        print_shadow_comment(body)
        return False
    create_comment(pr, body)
    logger.info("Posted review comment on PR #%s", pr.number)
    return True


def post_oversized_warning(pr, outcome: Rejected, shadow: bool = False) -> bool:
    """Post an immediate warning for an oversized commit."""
    body = render_oversized_warning(outcome)
    if shadow:
        print_shadow_comment(body, title=f"Oversized commit {outcome.unit.short_id} (not posted)")
        return False
    create_comment(pr, body)
    logger.info("Posted oversized-commit warning for %s", outcome.unit.short_id)
    return True

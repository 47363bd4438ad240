"""Core PR review orchestration.

One run walks the pull request's commits (or files) strictly in platform
order, one external call at a time, and turns each into exactly one
outcome. After the loop, a single aggregate summary call sees the complete
outcome list, and the rendered report is posted once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console

from prdigest_core.admission import admit_commit
from prdigest_core.config import ReviewConfig
from prdigest_core.errors import ConfigError, FetchError
from prdigest_core.fetcher import (
    commit_label,
    enumerate_commits,
    enumerate_files,
    fetch_commit_unit,
    fetch_file_unit,
    pending_unit,
)
from prdigest_core.gh.pull_request import get_pull, get_pull_request_info, get_repo
from prdigest_core.invoker import DeltaObserver, analyze_unit, summarize
from prdigest_core.models import Analyzed, Failed, Outcome, Rejected, WorkUnit
from prdigest_core.providers.anthropic import AnthropicChatClient
from prdigest_core.providers.base import BaseChatClient
from prdigest_core.providers.openai import OpenAIChatClient
from prdigest_core.publisher import post_oversized_warning, publish_report
from prdigest_core.report import render_report

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class ReviewSummary:
    """Result returned by run_review, used by the CLI for its closing message."""

    repo: str
    pr_number: int
    mode: str
    analyzed: int = 0
    rejected: int = 0
    failed: int = 0
    capped: int = 0  # files dropped by the file-count cap
    commented_separately: int = 0  # oversized commits posted as their own comment
    summary_included: bool = False
    body: str = ""
    posted: bool = False

    @property
    def sections(self) -> int:
        return self.analyzed + self.rejected + self.failed


def get_chat_client(config: ReviewConfig) -> BaseChatClient:
    if config.model == "openai":
        return OpenAIChatClient(api_key=config.openai_api_key, timeout=config.request_timeout)
    if config.model == "anthropic":
        return AnthropicChatClient(api_key=config.anthropic_api_key, timeout=config.request_timeout)
    raise ConfigError(f"Unknown model provider: {config.model!r}. Choose 'openai' or 'anthropic'.")


def print_delta(unit: WorkUnit | None, delta: str) -> None:
    """Echo streamed text to the terminal as it arrives."""
    console.print(delta, end="", markup=False, highlight=False)


def _log_outcome(outcome: Outcome) -> None:
    if isinstance(outcome, Analyzed):
        console.print("  [green]Analyzed.[/green]")
    elif isinstance(outcome, Rejected):
        console.print(
            f"  [yellow]Too large: {outcome.change_volume} changes "
            f"(limit {outcome.threshold}). Skipping analysis.[/yellow]"
        )
    else:
        console.print(f"  [red]Failed: {outcome.error_message}[/red]")


def review_commits(
    repo,
    pr,
    client: BaseChatClient,
    config: ReviewConfig,
    shadow: bool = False,
    on_delta: DeltaObserver | None = None,
) -> tuple[list[Outcome], int]:
    """Analyze each commit in order.

    Returns the outcomes plus the number of oversized commits that were
    posted as immediate warnings (and so left out of the outcomes).
    """
    commits = enumerate_commits(pr)
    total = len(commits)
    outcomes: list[Outcome] = []
    commented = 0

    for i, commit in enumerate(commits, 1):
        console.print(f"\n[[{i}/{total}]] Commit {commit.sha[:7]}: {commit_label(commit)}")

        try:
            unit = fetch_commit_unit(repo, commit.sha)
        except FetchError as e:
            outcome: Outcome = Failed(
                unit=pending_unit("commit", commit.sha, commit_label(commit)),
                error_message=str(e),
            )
            _log_outcome(outcome)
            outcomes.append(outcome)
            continue

        if not admit_commit(unit.change_volume, config.max_changes):
            outcome = Rejected(unit=unit, change_volume=unit.change_volume, threshold=config.max_changes)
            _log_outcome(outcome)
            if config.oversized_policy == "comment":
                post_oversized_warning(pr, outcome, shadow=shadow)
                commented += 1
            else:
                outcomes.append(outcome)
            continue

        outcome = analyze_unit(client, config.prompt, unit, stream=config.stream, on_delta=on_delta)
        if config.stream:
            console.print()
        _log_outcome(outcome)
        outcomes.append(outcome)

    return outcomes, commented


def review_files(
    repo,
    pr,
    client: BaseChatClient,
    config: ReviewConfig,
    on_delta: DeltaObserver | None = None,
) -> tuple[list[Outcome], int]:
    """Analyze each file's full content in listing order, up to the file cap.

    Returns the outcomes plus the number of files dropped by the cap.
    """
    files, capped = enumerate_files(pr, config.max_files)
    head_sha = pr.head.sha
    total = len(files)
    outcomes: list[Outcome] = []

    for i, file in enumerate(files, 1):
        console.print(f"\n[[{i}/{total}]] File {file.filename}")

        try:
            unit = fetch_file_unit(repo, file, head_sha)
        except FetchError as e:
            outcome: Outcome = Failed(
                unit=pending_unit("file", f"{file.filename}@{head_sha}", file.filename),
                error_message=str(e),
            )
            _log_outcome(outcome)
            outcomes.append(outcome)
            continue

        outcome = analyze_unit(client, config.prompt, unit, stream=config.stream, on_delta=on_delta)
        if config.stream:
            console.print()
        _log_outcome(outcome)
        outcomes.append(outcome)

    if capped:
        console.print(f"\n[dim]{capped} file(s) beyond the limit of {config.max_files} were not reviewed.[/dim]")
    return outcomes, capped


def run_review(
    repo: str,
    pr_number: int,
    config: ReviewConfig,
    github_token: str | None = None,
    shadow: bool = False,
    repo_obj=None,
    client: BaseChatClient | None = None,
    on_delta: DeltaObserver | None = None,
) -> ReviewSummary:
    """Run the full review pipeline for one pull request.

    Per-unit fetch and analysis errors end up as Failed sections. A failed
    aggregate summary is left out of the report. Errors loading the PR
    itself and PublishError propagate to the caller.
    """
    this_repo = repo_obj if repo_obj is not None else get_repo(repo, github_token, timeout=config.request_timeout)
    this_pr = get_pull(this_repo, pr_number)
    chat = client if client is not None else get_chat_client(config)
    if config.stream and on_delta is None:
        on_delta = print_delta

    summary = ReviewSummary(repo=repo, pr_number=pr_number, mode=config.mode)

    if config.mode == "files":
        outcomes, summary.capped = review_files(this_repo, this_pr, chat, config, on_delta=on_delta)
        kind = "file"
    else:
        outcomes, summary.commented_separately = review_commits(
            this_repo, this_pr, chat, config, shadow=shadow, on_delta=on_delta
        )
        kind = "commit"

    summary.analyzed = sum(1 for o in outcomes if isinstance(o, Analyzed))
    summary.rejected = sum(1 for o in outcomes if isinstance(o, Rejected))
    summary.failed = sum(1 for o in outcomes if isinstance(o, Failed))

    console.print("\n[bold]Generating summary...[/bold]")
    aggregate = summarize(
        chat,
        config.prompt,
        get_pull_request_info(this_pr),
        outcomes,
        stream=config.stream,
        use_builtin_prompt=config.summary_prompt == "builtin",
        kind=kind,
        extra_skipped=summary.commented_separately,
        on_delta=on_delta,
    )
    if config.stream:
        console.print()
    summary.summary_included = aggregate is not None

    summary.body = render_report(
        outcomes,
        aggregate,
        kind=kind,
        commented_separately=summary.commented_separately,
    )
    logger.debug("Rendered report for %s#%d: %d chars", repo, pr_number, len(summary.body))
    summary.posted = publish_report(this_pr, summary.body, shadow=shadow)

    console.print(
        f"[bold]Review complete:[/bold] {summary.analyzed} analyzed, "
        f"{summary.rejected + summary.commented_separately} too large, {summary.failed} failed."
    )
    return summary

"""review command: analyze a pull request and post the report."""

from __future__ import annotations

import logging

import click
from rich.console import Console

from prdigest_core.config import MODES, OVERSIZED_POLICIES, PROVIDERS, SUMMARY_PROMPTS, ReviewConfig
from prdigest_core.errors import PRDigestError
from prdigest_core.reviewer import run_review

console = Console()
logger = logging.getLogger(__name__)


@click.command("review")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to $GITHUB_REPOSITORY.")
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Pull request number. Defaults to the PR in the GitHub Actions event payload.",
)
@click.option("--mode", type=click.Choice(MODES), default=None, help="Review each commit or each changed file.")
@click.option("--stream/--no-stream", default=None, help="Stream analysis text to the terminal as it arrives.")
@click.option("--model", type=click.Choice(PROVIDERS), default=None, help="AI model provider. Overrides config file.")
@click.option("--prompt-file", default=None, help="Path to a Markdown instruction template. Overrides config file.")
@click.option("--max-changes", type=int, default=None, help="Largest commit (additions + deletions) to analyze.")
@click.option("--max-files", type=int, default=None, help="Maximum number of files reviewed in files mode.")
@click.option(
    "--oversized-policy",
    type=click.Choice(OVERSIZED_POLICIES),
    default=None,
    help="Report oversized commits in the final comment, or comment on them immediately.",
)
@click.option(
    "--summary-prompt",
    type=click.Choice(SUMMARY_PROMPTS),
    default=None,
    help="Build the final summary from the custom template or a fixed summary prompt.",
)
@click.option(
    "--config",
    "config_path",
    default=".prdigest.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRDIGEST_CONFIG",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the report without posting to GitHub.",
)
def review_cmd(
    repo: str | None,
    pr_number: int | None,
    mode: str | None,
    stream: bool | None,
    model: str | None,
    prompt_file: str | None,
    max_changes: int | None,
    max_files: int | None,
    oversized_policy: str | None,
    summary_prompt: str | None,
    config_path: str,
    shadow: bool,
):
    """Review a pull request with an AI model and post one summary comment.

    Each commit (or each changed file with --mode files) is analyzed in
    order. Commits larger than --max-changes are reported without analysis.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub personal access token (or use gh CLI)
      OPENAI_API_KEY       Required when using --model openai
      ANTHROPIC_API_KEY    Required when using --model anthropic
    \b
    Optional environment variables:
      CUSTOM_PROMPT        Instruction template sent with every change
      MAX_CHANGES          Same as --max-changes
      MAX_FILES            Same as --max-files
    """
    from prdigest_cli.auth import resolve_actions_pr_number, resolve_actions_repo, resolve_github_token
    from prdigest_core.config import load_config

    repo = repo or resolve_actions_repo()
    if not repo:
        raise click.UsageError("No repository given. Pass --repo owner/name or set GITHUB_REPOSITORY.")
    if pr_number is None:
        pr_number = resolve_actions_pr_number()
    if pr_number is None:
        raise click.UsageError("No pull request given. Pass --pr or run from a pull_request workflow.")

    try:
        raw_config = load_config(
            config_path,
            cli_overrides={
                "mode": mode,
                "stream": stream,
                "model": model,
                "prompt_file": prompt_file,
                "max_changes": max_changes,
                "max_files": max_files,
                "oversized_policy": oversized_policy,
                "summary_prompt": summary_prompt,
            },
        )
        config = ReviewConfig.from_dict(raw_config)
    except (PRDigestError, FileNotFoundError) as e:
        raise click.UsageError(str(e))

    token = resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    if config.model == "openai" and not config.openai_api_key:
        raise click.UsageError("OPENAI_API_KEY environment variable is not set.")
    if config.model == "anthropic" and not config.anthropic_api_key:
        raise click.UsageError("ANTHROPIC_API_KEY environment variable is not set.")

    try:
        summary = run_review(
            repo=repo,
            pr_number=pr_number,
            config=config,
            github_token=token,
            shadow=shadow,
        )
    except PRDigestError as e:
        logger.error("Review of %s#%d failed: %s", repo, pr_number, e)
        raise click.ClickException(str(e))
    except Exception as e:
        logger.exception("Unexpected error while reviewing %s#%d", repo, pr_number)
        raise click.ClickException(f"Execution error: {e}")

    if summary.posted:
        console.print(f"[green]Review posted to {repo}#{pr_number}.[/green]")
    elif shadow:
        console.print("[bold]Shadow review complete. Nothing was posted.[/bold]")

"""Prompt construction for per-unit reviews and the aggregate summary.

Builders assume their input has already been admitted (see admission.py);
nothing here truncates or filters.
"""

from __future__ import annotations

from typing import Sequence

from prdigest_core.models import Analyzed, PullRequestInfo, WorkUnit

DEFAULT_PROMPT = """Analyze the following commit and provide:
1. A brief summary of changes
2. Code quality assessment
3. Potential issues or improvements
4. Security considerations if applicable"""

BUILTIN_SUMMARY_PROMPT = """You are summarizing an automated code review of a pull request.
Use the pull request details and the list of reviewed changes below."""

_SUMMARY_INSTRUCTION = (
    "Provide a brief, focused summary of the changes, their impact, and any key recommendations."
)


def build_commit_context(unit: WorkUnit) -> str:
    """Render a commit unit: SHA, author, message, file stats and the combined diff."""
    changed = "\n".join(f"- {f.filename} (Added: {f.additions}, Removed: {f.deletions})" for f in unit.files)
    return f"""
## Commit Analysis
SHA: {unit.id}
Author: {unit.author}
Message: {unit.message}

Changed Files:
{changed}

Code Changes:
```diff
{unit.payload}
```
"""


def build_file_context(unit: WorkUnit) -> str:
    return f"""
## File Analysis
Path: {unit.label}

Content:
```
{unit.payload}
```
"""


def build_unit_prompt(template: str, unit: WorkUnit) -> str:
    context = build_commit_context(unit) if unit.kind == "commit" else build_file_context(unit)
    return f"{template}\n\n{context}"


def build_pr_context(info: PullRequestInfo) -> str:
    return f"""
## Pull Request Information
Title: {info.title}
Description: {info.body or 'No description provided'}
Author: {info.author}
Base Branch: {info.base_ref}
Head Branch: {info.head_ref}
Number of Files Changed: {info.changed_files}
Total Additions: {info.additions}
Total Deletions: {info.deletions}
"""


def build_summary_prompt(
    template: str,
    info: PullRequestInfo,
    analyzed: Sequence[Analyzed],
    skipped_count: int,
    kind: str = "commit",
) -> str:
    """Build the aggregate summary prompt.

    Only ids and labels of analyzed units are included, never their review
    text; rejected and failed units contribute a count only.
    """
    heading = "Commits Analysis" if kind == "commit" else "Files Analysis"
    listed = "\n".join(f"- {o.unit.short_id}: {o.unit.label}" for o in analyzed) or "- (none)"
    noun = "commits" if kind == "commit" else "files"
    note = f"\nNote: {skipped_count} {noun} were too large or could not be analyzed.\n" if skipped_count else ""
    return f"""{template}

{build_pr_context(info)}
{heading}:
{listed}
{note}
{_SUMMARY_INSTRUCTION}"""

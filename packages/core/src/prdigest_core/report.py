"""Markdown rendering of the review report.

Sections follow outcome order exactly, one section per outcome, so the
same outcomes always render to the same bytes. Analyzed, rejected and
failed sections are interleaved in enumeration order and told apart by
their marker.
"""

from __future__ import annotations

import re
from typing import Sequence

from prdigest_core.models import Analyzed, Failed, Outcome, Rejected, WorkUnit

ANALYZED_MARKER = "✅"
REJECTED_MARKER = "❌"
FAILED_MARKER = "⚠️"

HEADER = "<!-- prdigest-report -->\n"
FOOTER = '<div align="right"><sub>Generated by <b>prdigest</b></sub></div>'

RECOMMENDATIONS = (
    "- Split changes into smaller, focused commits\n"
    "- Make incremental changes\n"
    "- Keep each commit with a single purpose"
)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def anchor(unit: WorkUnit) -> str:
    if unit.kind == "commit":
        return unit.short_id
    return _SLUG_RE.sub("-", unit.label.lower()).strip("-")


def unique_anchors(outcomes: Sequence[Outcome]) -> list[str]:
    """One anchor per outcome; repeated slugs get -2, -3, ... in order."""
    used: set[str] = set()
    anchors = []
    for o in outcomes:
        base = candidate = anchor(o.unit)
        n = 1
        while candidate in used:
            n += 1
            candidate = f"{base}-{n}"
        used.add(candidate)
        anchors.append(candidate)
    return anchors


def _title(unit: WorkUnit) -> str:
    if unit.kind == "commit":
        return f"Commit {unit.short_id}: {unit.label}"
    return f"File {unit.label}"


def _marker(outcome: Outcome) -> str:
    if isinstance(outcome, Analyzed):
        return ANALYZED_MARKER
    if isinstance(outcome, Rejected):
        return REJECTED_MARKER
    return FAILED_MARKER


def oversized_message(outcome: Rejected) -> str:
    return (
        f"This commit exceeds the recommended limit of {outcome.threshold} lines "
        f"(found {outcome.change_volume} changes).\n"
        "Please consider breaking down the changes into smaller, incremental commits for better review.\n\n"
        f"**Recommendations:**\n{RECOMMENDATIONS}"
    )


def render_section(outcome: Outcome, section_id: str | None = None) -> str:
    unit = outcome.unit
    heading = f'### {_marker(outcome)} <span id="{section_id or anchor(unit)}">{_title(unit)}</span>'

    if isinstance(outcome, Analyzed):
        body = outcome.text
    elif isinstance(outcome, Rejected):
        body = oversized_message(outcome)
    elif isinstance(outcome, Failed):
        body = f"Error analyzing {unit.short_id}: {outcome.error_message}"
    else:
        raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

    return f"{heading}\n\n{body}\n\n---\n"


def _toc(
    outcomes: Sequence[Outcome], anchors: Sequence[str], section_title: str, section_anchor: str, has_summary: bool
) -> str:
    lines = ["## Table of Contents", f"- [{section_title}](#{section_anchor})"]
    for o, section_id in zip(outcomes, anchors):
        suffix = "" if isinstance(o, Analyzed) else f" {_marker(o)}"
        lines.append(f"  - [{o.unit.short_id}: {o.unit.label}](#{section_id}){suffix}")
    if has_summary:
        lines.append("- [Summary](#summary)")
    return "\n".join(lines)


def render_report(
    outcomes: Sequence[Outcome],
    summary: str | None,
    kind: str = "commit",
    commented_separately: int = 0,
) -> str:
    """Render the full comment body.

    ``commented_separately`` counts oversized commits that were already
    reported in their own comment and are therefore absent from ``outcomes``.
    """
    section_title = "Commit Reviews" if kind == "commit" else "File Reviews"
    section_anchor = section_title.lower().replace(" ", "-")

    anchors = unique_anchors(outcomes)
    parts = [
        f"{HEADER}# 🔍 Code Review",
        _toc(outcomes, anchors, section_title, section_anchor, summary is not None),
        f"## {section_title}",
    ]

    if outcomes:
        parts.extend(render_section(o, section_id) for o, section_id in zip(outcomes, anchors))
    else:
        parts.append("_No changes were reviewed._\n")

    if commented_separately:
        parts.append(
            f"_{commented_separately} commit(s) exceeded the size limit and were reported in separate comments._\n"
        )

    if summary is not None:
        parts.append(f'## 📋 <span id="summary">Summary</span>\n\n{summary}\n')

    parts.append(f"---\n{FOOTER}")
    return "\n\n".join(parts)


def render_oversized_warning(outcome: Rejected) -> str:
    """Body of the stand-alone comment posted for an oversized commit."""
    unit = outcome.unit
    return (
        f"{HEADER}### {REJECTED_MARKER} Commit {unit.short_id}: {unit.label}\n\n"
        f"{oversized_message(outcome)}\n\n---\n{FOOTER}"
    )

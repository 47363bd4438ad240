"""Chat-service invocation for single units and the aggregate summary.

Every call here is synchronous and made one at a time by the caller's loop.
Whatever happens inside the chat service, a unit always comes back as
exactly one outcome; nothing in this module raises for a per-unit failure.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from prdigest_core.errors import AnalysisError
from prdigest_core.models import Analyzed, Failed, Outcome, PullRequestInfo, StreamingAccumulator, WorkUnit
from prdigest_core.prompts import BUILTIN_SUMMARY_PROMPT, build_summary_prompt, build_unit_prompt

logger = logging.getLogger(__name__)

# Receives (unit, delta) for every streamed chunk; unit is None for the summary.
DeltaObserver = Callable[[Optional[WorkUnit], str], None]


# Accumulates the streamed aggregate summary; observers see it as unit None.
SUMMARY_UNIT = WorkUnit(kind="summary", id="summary", label="Summary", payload="")


def _stream_text(client, prompt: str, accumulator: StreamingAccumulator, on_delta: DeltaObserver | None):
    observed = None if accumulator.unit is SUMMARY_UNIT else accumulator.unit
    for delta in client.stream(prompt):
        accumulator.append(delta)
        if on_delta is not None:
            on_delta(observed, delta)


def analyze_unit(
    client,
    template: str,
    unit: WorkUnit,
    stream: bool = False,
    on_delta: DeltaObserver | None = None,
) -> Outcome:
    """Analyze one admitted unit and return Analyzed or Failed."""
    prompt = build_unit_prompt(template, unit)

    if stream:
        accumulator = StreamingAccumulator(unit=unit)
        try:
            _stream_text(client, prompt, accumulator, on_delta)
        except AnalysisError as e:
            logger.warning("Stream for %s aborted: %s", unit.short_id, e)
            return accumulator.finalize(error=e)
        return accumulator.finalize()

    try:
        text = client.complete(prompt)
    except AnalysisError as e:
        logger.warning("Analysis of %s failed: %s", unit.short_id, e)
        return Failed(unit=unit, error_message=str(e))
    return Analyzed(unit=unit, text=text)


def summarize(
    client,
    template: str,
    info: PullRequestInfo,
    outcomes: Sequence[Outcome],
    stream: bool = False,
    use_builtin_prompt: bool = False,
    kind: str = "commit",
    extra_skipped: int = 0,
    on_delta: DeltaObserver | None = None,
) -> str | None:
    """Produce the aggregate summary, or None when the call fails.

    Must be called once, after every per-unit outcome is final.
    ``extra_skipped`` counts rejected units that are not in ``outcomes``.
    """
    analyzed = [o for o in outcomes if isinstance(o, Analyzed)]
    skipped = len(outcomes) - len(analyzed) + extra_skipped
    prompt = build_summary_prompt(
        BUILTIN_SUMMARY_PROMPT if use_builtin_prompt else template,
        info,
        analyzed,
        skipped,
        kind=kind,
    )

    if stream:
        accumulator = StreamingAccumulator(unit=SUMMARY_UNIT)
        try:
            _stream_text(client, prompt, accumulator, on_delta)
        except AnalysisError as e:
            outcome = accumulator.finalize(error=e)
        else:
            outcome = accumulator.finalize()
        if isinstance(outcome, Failed):
            logger.warning("Aggregate summary failed; the report will omit it: %s", outcome.error_message)
            return None
        return outcome.text

    try:
        return client.complete(prompt)
    except AnalysisError as e:
        logger.warning("Aggregate summary failed; the report will omit it: %s", e)
        return None

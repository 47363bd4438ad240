"""Admission control applied before any chat-service call.

Commits and files are bounded differently: an oversized commit is rejected
explicitly and shows up in the report, while files past the count cap are
dropped from the run without producing any outcome.
"""

from __future__ import annotations

import logging
from typing import Sequence, TypeVar

from prdigest_core.models import FileChange

logger = logging.getLogger(__name__)

T = TypeVar("T")


def change_volume(files: Sequence[FileChange]) -> int:
    return sum(f.additions + f.deletions for f in files)


def admit_commit(volume: int, threshold: int) -> bool:
    """Return True when a commit of ``volume`` changed lines may be analyzed."""
    return volume <= threshold


def cap_files(files: Sequence[T], max_files: int) -> tuple[list[T], int]:
    """Keep the first ``max_files`` entries; return them with the dropped count."""
    kept = list(files[:max_files])
    dropped = len(files) - len(kept)
    if dropped:
        logger.info("File cap of %d reached; %d file(s) will not be reviewed.", max_files, dropped)
    return kept, dropped

"""Data carried through the review pipeline.

A WorkUnit is built by the fetcher, consumed once by the invoker, and turned
into exactly one outcome (Analyzed, Rejected or Failed). Outcomes keep the
order in which units were enumerated, so the report never needs sorting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class FileChange:
    """One file touched by a commit."""

    filename: str
    additions: int
    deletions: int
    patch: str = ""


@dataclass(frozen=True)
class WorkUnit:
    """A commit or a file under review."""

    kind: str  # "commit" | "file" | "summary"
    id: str  # commit SHA, or "path@ref" for files
    label: str  # first line of the commit message, or the filename
    payload: str  # unified diff for commits, decoded content for files
    # additions + deletions across the commit; None for whole-file units,
    # which are bounded by the file-count cap instead.
    change_volume: int | None = None
    author: str = ""
    message: str = ""
    files: tuple[FileChange, ...] = ()

    @property
    def short_id(self) -> str:
        """Commit SHA truncated to its short form; filenames are returned as-is."""
        if self.kind == "commit":
            return self.id[:SHORT_SHA_LENGTH]
        return self.label


@dataclass(frozen=True)
class Analyzed:
    unit: WorkUnit
    text: str


@dataclass(frozen=True)
class Rejected:
    unit: WorkUnit
    change_volume: int
    threshold: int


@dataclass(frozen=True)
class Failed:
    unit: WorkUnit
    error_message: str


Outcome = Union[Analyzed, Rejected, Failed]


@dataclass(frozen=True)
class PullRequestInfo:
    """Pull request metadata fed into the aggregate summary prompt."""

    number: int
    title: str
    body: str
    author: str
    base_ref: str
    head_ref: str
    changed_files: int
    additions: int
    deletions: int


@dataclass
class StreamingAccumulator:
    """Concatenates streamed text deltas for one in-flight unit.

    Owned by a single unit for the duration of its stream; finalize() is
    called exactly once, either with the stream's natural end or its error.
    """

    unit: WorkUnit
    chunks: list[str] = field(default_factory=list)

    def append(self, delta: str) -> None:
        if delta:
            self.chunks.append(delta)

    @property
    def text(self) -> str:
        return "".join(self.chunks)

    def finalize(self, error: Exception | None = None) -> Outcome:
        if error is not None:
            # Partial text is discarded; a broken stream never becomes a review.
            self.chunks.clear()
            return Failed(unit=self.unit, error_message=str(error) or error.__class__.__name__)
        text = self.text.strip()
        if not text:
            return Failed(unit=self.unit, error_message="The chat service returned no content.")
        return Analyzed(unit=self.unit, text=text)

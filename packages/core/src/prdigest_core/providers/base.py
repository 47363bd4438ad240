"""Base chat client implementing the Template Method pattern.

All providers share the same invocation contract:
    complete() → _call_api()     ← one whole response
    stream()   → _stream_api()   ← ordered text deltas

Subclasses implement only the two raw SDK calls. Error normalization lives
here: any SDK failure, and any response without content, surfaces as
AnalysisError so the pipeline has a single exception to catch per unit.
Calls are never retried.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterator

from prdigest_core.errors import AnalysisError

logger = logging.getLogger(__name__)

_MAX_TOKENS = 4096


class BaseChatClient(ABC):
    MODEL: str = ""
    TEMPERATURE: float = 0.2
    MAX_TOKENS: int = _MAX_TOKENS

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def complete(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the reply text."""
        try:
            text = self._call_api(prompt)
        except AnalysisError:
            raise
        except Exception as e:
            logger.error("%s API call failed: %s", self.__class__.__name__, e)
            raise AnalysisError(str(e) or e.__class__.__name__) from e

        if not text or not text.strip():
            raise AnalysisError("The chat service returned no content.")
        return text.strip()

    def stream(self, prompt: str) -> Iterator[str]:
        """Yield reply text deltas in arrival order.

        The iterator is finite and cannot be restarted. An error raised
        mid-stream is re-raised as AnalysisError after the deltas already
        yielded; the caller decides what to do with them.
        """
        try:
            for delta in self._stream_api(prompt):
                if delta:
                    yield delta
        except AnalysisError:
            raise
        except Exception as e:
            logger.error("%s stream failed: %s", self.__class__.__name__, e)
            raise AnalysisError(str(e) or e.__class__.__name__) from e

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, prompt: str) -> str | None:
        """Make one API call and return the raw text, or None when empty."""

    @abstractmethod
    def _stream_api(self, prompt: str) -> Iterator[str]:
        """Open a streaming API call and yield text deltas until it ends."""

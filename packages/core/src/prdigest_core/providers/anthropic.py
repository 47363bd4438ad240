from __future__ import annotations

from typing import Iterator

from anthropic import Anthropic
from anthropic.types import TextBlock

from prdigest_core.providers.base import BaseChatClient


class AnthropicChatClient(BaseChatClient):
    MODEL = "claude-sonnet-4-20250514"
    # Slightly higher than OpenAI's 0.2; the output is prose, not JSON.
    TEMPERATURE = 0.3

    def __init__(self, api_key: str, timeout: float | None = None):
        if timeout is not None:
            self.client = Anthropic(api_key=api_key, timeout=timeout)
        else:
            self.client = Anthropic(api_key=api_key)

    def _call_api(self, prompt: str) -> str | None:
        response = self.client.messages.create(
            model=self.MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks)

    def _stream_api(self, prompt: str) -> Iterator[str]:
        with self.client.messages.stream(
            model=self.MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        ) as stream:
            yield from stream.text_stream

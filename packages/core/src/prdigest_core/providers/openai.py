from __future__ import annotations

from typing import Iterator

from openai import OpenAI

from prdigest_core.providers.base import BaseChatClient


class OpenAIChatClient(BaseChatClient):
    MODEL = "gpt-4o"
    TEMPERATURE = 0.2

    def __init__(self, api_key: str, timeout: float | None = None):
        if timeout is not None:
            self.client = OpenAI(api_key=api_key, timeout=timeout)
        else:
            self.client = OpenAI(api_key=api_key)

    def _messages(self, prompt: str) -> list[dict]:
        return [{"role": "user", "content": prompt}]

    def _call_api(self, prompt: str) -> str | None:
        response = self.client.chat.completions.create(
            model=self.MODEL,
            messages=self._messages(prompt),
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    def _stream_api(self, prompt: str) -> Iterator[str]:
        stream = self.client.chat.completions.create(
            model=self.MODEL,
            messages=self._messages(prompt),
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
            stream=True,
        )
        for chunk in stream:
            # The final usage chunk carries no choices.
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

from __future__ import annotations

import logging
from typing import Any

import httpx

from nexsched.ai.base import TextGenerationError

logger = logging.getLogger(__name__)


class OpenAIChatProvider:
    """Single chat-completion call against an OpenAI-compatible API."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.model = model
        self._client = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            transport=transport,
        )

    def generate(self, prompt: str) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        try:
            response = self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TextGenerationError(str(exc)) from exc

        if not isinstance(body, dict):
            raise TextGenerationError("Unexpected completion payload")
        choices = body.get("choices") or []
        if not isinstance(choices, list):
            raise TextGenerationError("Unexpected completion payload")
        if not choices:
            return ""
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise TextGenerationError("Unexpected completion payload")
        content = message.get("content")
        return content if isinstance(content, str) else ""

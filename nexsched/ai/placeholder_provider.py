from __future__ import annotations

MISSING_KEY_MESSAGE = "API Key ausente. Configure OPENAI_API_KEY."


class PlaceholderProvider:
    """Used when no text-generation credentials are configured."""

    name = "placeholder"

    def generate(self, prompt: str) -> str:
        return MISSING_KEY_MESSAGE

from __future__ import annotations

from typing import Protocol


class TextGenerationError(Exception):
    pass


class TextGenerationProvider(Protocol):
    name: str

    def generate(self, prompt: str) -> str:
        ...

"""Shared fixtures: scripted generator and preloader doubles."""

import asyncio
from typing import Optional

import pytest

from promptpix.models import GenerationResult
from promptpix.preload import PreloadError

IMAGE_URL = "https://x/img.png"


class ScriptedGenerator:
    """Async generator double that replays outcomes in order.

    The last outcome repeats once the script runs out. Set ``gate`` to an
    asyncio.Event to hold every call until it is set.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [GenerationResult.ok(IMAGE_URL)]
        self.prompts: list[str] = []
        self.gate: Optional[asyncio.Event] = None

    async def generate(self, prompt: str) -> GenerationResult:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class ScriptedPreloader:
    """Preloader double; ``fail`` makes every load raise PreloadError."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.urls: list[str] = []
        self.gate: Optional[asyncio.Event] = None

    async def load(self, url: str) -> bytes:
        self.urls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise PreloadError("Image fetch error 404")
        return b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def preloader():
    return ScriptedPreloader()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real PROMPTPIX_* variables out of config tests."""
    monkeypatch.delenv("PROMPTPIX_ENDPOINT", raising=False)
    monkeypatch.delenv("PROMPTPIX_API_KEY", raising=False)

from __future__ import annotations

import pytest

from factlens.config import Settings
from factlens.schemas import FactCheckRequest


class FakeGeminiClient:
    def __init__(self, raw: str = "", error: Exception | None = None):
        self.raw = raw
        self.error = error
        self.calls = []

    async def generate(self, request: FactCheckRequest) -> str:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.raw


@pytest.fixture
def settings():
    return Settings(GEMINI_API_KEY="test-key", GEMINI_MODEL="gemini-test", _env_file=None)


@pytest.fixture
def moon_request():
    return FactCheckRequest(text="The moon is made of cheese.")

from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from job_coverage.core.matcher import CoverageMatcher
from job_coverage.llm.base import TextGenerator, TextGenerationError


class FakeGenerator(TextGenerator):
    """Replays canned replies; an Exception in the list is raised instead."""

    def __init__(self, replies=None, available: bool = True):
        super().__init__(model="fake")
        self.replies = list(replies or [])
        self.available = available
        self.calls: list[dict] = []

    @property
    def name(self) -> str:
        return "Fake"

    @property
    def requires_api_key(self) -> bool:
        return False

    def generate(self, prompt: str, temperature: float = 0.7, format: Optional[str] = None) -> str:
        self.calls.append({"prompt": prompt, "temperature": temperature, "format": format})
        if not self.replies:
            raise TextGenerationError("no more replies")
        reply = self.replies.pop(0)
        if callable(reply) and not isinstance(reply, Exception):
            reply = reply(prompt)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def is_available(self) -> bool:
        return self.available


@pytest.fixture
def fake_generator_cls():
    return FakeGenerator


@pytest.fixture
def matcher():
    return CoverageMatcher(today=date(2024, 6, 1))

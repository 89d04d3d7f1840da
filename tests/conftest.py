from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.store import PostingStore

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class FakeGenerator:
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def store() -> PostingStore:
    return PostingStore()


@pytest.fixture
def lifecycle(store: PostingStore) -> LifecycleManager:
    return LifecycleManager(store)

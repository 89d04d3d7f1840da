from __future__ import annotations

import threading
from typing import Iterator

from lendmatch.postings.errors import PostingNotFound
from lendmatch.postings.models import Posting


class PostingStore: # In-memory, insertion-ordered posting collection indexed by id
    def __init__(self) -> None:
        self._postings: dict[str, Posting] = {}
        self._next_id = 0
        # Held by LifecycleManager around every mutation. Blocking: async
        # callers take it through a worker thread, never on the event loop.
        self.lock = threading.RLock()

    def next_id(self) -> str:
        with self.lock:
            posting_id = str(self._next_id)
            self._next_id += 1
            return posting_id

    def insert(self, posting: Posting) -> None:
        with self.lock:
            if posting.id in self._postings:
                raise ValueError(f"Duplicate posting id: {posting.id}")
            self._postings[posting.id] = posting

    def get(self, posting_id: str) -> Posting:
        try:
            return self._postings[posting_id]
        except KeyError:
            raise PostingNotFound(posting_id) from None

    def remove(self, posting: Posting) -> bool: # Remove by identity; False when the record is not stored
        with self.lock:
            if self._postings.get(posting.id) is not posting:
                return False
            del self._postings[posting.id]
            return True

    def clear(self) -> None:
        # Ids are never reused, so the counter is left alone.
        with self.lock:
            self._postings.clear()

    def __iter__(self) -> Iterator[Posting]:
        with self.lock:
            snapshot = list(self._postings.values())
        return iter(snapshot)

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, posting: object) -> bool:
        if not isinstance(posting, Posting):
            return False
        return self._postings.get(posting.id) is posting

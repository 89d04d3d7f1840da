from __future__ import annotations

import pytest

from lendmatch.postings.errors import PostingNotFound
from lendmatch.postings.models import Posting, Role
from lendmatch.postings.store import PostingStore


def _posting(store: PostingStore, name: str) -> Posting:
    return Posting(id=store.next_id(), owner="Alice", role=Role.LENDER, name=name, category="Misc")


def test_store_keeps_insertion_order_and_indexes_by_id() -> None:
    store = PostingStore()
    a, b, c = (_posting(store, n) for n in ("a", "b", "c"))
    for p in (b, a, c):
        store.insert(p)

    assert [p.name for p in store] == ["b", "a", "c"]
    assert store.get(a.id) is a
    assert len(store) == 3


def test_store_get_missing_raises() -> None:
    with pytest.raises(PostingNotFound):
        PostingStore().get("7")


def test_store_remove_is_by_identity() -> None:
    store = PostingStore()
    stored = _posting(store, "a")
    store.insert(stored)
    lookalike = Posting(id=stored.id, owner="Alice", role=Role.LENDER, name="a", category="Misc")

    assert store.remove(lookalike) is False
    assert store.remove(stored) is True
    assert stored not in store


def test_store_rejects_duplicate_ids() -> None:
    store = PostingStore()
    p = _posting(store, "a")
    store.insert(p)
    with pytest.raises(ValueError):
        store.insert(Posting(id=p.id, owner="Bob", role=Role.BORROWER, name="b", category="Misc"))


def test_store_clear_keeps_id_counter() -> None:
    store = PostingStore()
    store.insert(_posting(store, "a"))
    store.clear()

    assert len(store) == 0
    assert store.next_id() == "1"

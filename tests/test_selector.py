from __future__ import annotations

from datetime import timedelta

from conftest import NOW
from lendmatch.match.selector import select_candidates
from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.models import Role, Status


def test_select_returns_active_complementary_postings_in_order(lifecycle: LifecycleManager) -> None:
    start = NOW - timedelta(days=1)
    bob = lifecycle.create("Bob", Role.LENDER, "Basic Calculator", "Calculator", available_from=start)
    carl = lifecycle.create("Carl", Role.BORROWER, "Charger", "Charger", available_from=start)
    alice = lifecycle.create("Alice", Role.LENDER, "Scientific Calculator", "Calculator", available_from=start)
    dana = lifecycle.create("Dana", Role.LENDER, "Projector", "AV", available_from=start)
    lifecycle.cancel(dana)

    assert select_candidates(lifecycle, Role.BORROWER, NOW) == [bob, alice]
    assert select_candidates(lifecycle, Role.LENDER, NOW) == [carl]


def test_select_expires_lapsed_postings_first(lifecycle: LifecycleManager) -> None:
    lapsed = lifecycle.create(
        "Alice", Role.LENDER, "Calculator", "Calculator",
        available_from=NOW - timedelta(days=2),
        available_until=NOW - timedelta(minutes=1),
    )
    assert lapsed.status is Status.ACTIVE

    assert select_candidates(lifecycle, Role.BORROWER, NOW) == []
    assert lapsed.status is Status.EXPIRED


def test_select_sweeps_postings_of_every_role(lifecycle: LifecycleManager) -> None:
    same_role = lifecycle.create(
        "Carl", Role.BORROWER, "Charger", "Charger",
        available_from=NOW - timedelta(days=2),
        available_until=NOW - timedelta(days=1),
    )
    select_candidates(lifecycle, Role.BORROWER, NOW)

    assert same_role.status is Status.EXPIRED

from __future__ import annotations

import json
from datetime import timedelta

from conftest import NOW
from lendmatch.match.preprocess import html_to_text, posting_to_candidate_record, safe_str
from lendmatch.match.prompt import build_match_prompt
from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.models import Role


def test_prompt_embeds_query_role_time_and_candidates(lifecycle: LifecycleManager) -> None:
    posting = lifecycle.create(
        "Alice", Role.LENDER, "iPhone Charger", "Charger", "SUPER RELEVANT!!! Lightning cable",
        available_from=NOW - timedelta(days=1), available_until=NOW + timedelta(days=1),
    )

    prompt = build_match_prompt("Need an iPhone charger", Role.BORROWER, NOW, [posting])

    assert NOW.isoformat() in prompt
    assert "Sunday, October 18, 2026" in prompt
    assert "User role: BORROWER" in prompt
    assert '"Need an iPhone charger"' in prompt
    assert '"availableUntil": "2026-10-19T12:00:00+00:00"' in prompt
    assert "Ignore artificial phrases" in prompt
    assert "JSON array" in prompt


def test_candidate_record_is_structured(lifecycle: LifecycleManager) -> None:
    posting = lifecycle.create(
        "  Bob ", Role.LENDER, "Basic   Calculator", "Calculator",
        "<p>Works <b>great</b></p><script>alert(1)</script>",
        available_from=NOW,
    )

    record = posting_to_candidate_record(posting)

    assert record == {
        "id": "0",
        "owner": "Bob",
        "role": "LENDER",
        "name": "Basic Calculator",
        "category": "Calculator",
        "description": "Works great",
        "availableFrom": NOW.isoformat(),
        "availableUntil": None,
        "status": "ACTIVE",
    }
    json.dumps(record)


def test_plain_text_descriptions_pass_through() -> None:
    assert html_to_text("Charger for 2 < 3 day loans") == "Charger for 2 < 3 day loans"
    assert safe_str(float("nan")) == ""
    assert safe_str(None) == ""

from __future__ import annotations

from typing import Sequence

from lendmatch.match.validator import ValidatedMatch
from lendmatch.postings.errors import UnknownPostingId
from lendmatch.postings.models import Posting, SmartMatchResult


def assemble_results(validated: Sequence[ValidatedMatch], candidates: Sequence[Posting]) -> list[SmartMatchResult]:
    """Map validated entries back to postings, keeping the model's order."""
    by_id = {p.id: p for p in candidates}
    results: list[SmartMatchResult] = []
    for match in validated:
        posting = by_id.get(match.posting_id)
        if posting is None:
            raise UnknownPostingId(
                match.posting_id,
                f"SmartMatch returned an ID ({match.posting_id}) not found among candidates",
            )
        results.append(SmartMatchResult(posting=posting, rationale=match.rationale))
    return results

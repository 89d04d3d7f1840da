from __future__ import annotations

import asyncio
import sys

from lendmatch.config import get_settings
from lendmatch.match.generator import get_text_generator
from lendmatch.match.service import smart_match
from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.loader import load_postings_csv
from lendmatch.postings.models import Role
from lendmatch.postings.store import PostingStore

DEFAULT_QUERY = "Need a basic calculator for tomorrow's accounting exam"


async def run(query: str, role: Role) -> None:
    settings = get_settings()
    if not settings.postings_csv_path:
        raise ValueError("Set POSTINGS_CSV_PATH to a postings CSV (see data/sample_postings.csv).")

    lifecycle = LifecycleManager(PostingStore())

    print(f"Loading postings from: {settings.postings_csv_path}")
    postings = load_postings_csv(settings.postings_csv_path, lifecycle)
    for p in postings:
        print(f"- [{p.id}] {p.owner} ({p.role.value}) {p.name} / {p.category}: {p.description or ''}")

    generator = get_text_generator(settings)

    print(f"\nRunning SmartMatch for {role.value} query: {query!r}")
    results = await asyncio.wait_for(
        smart_match(
            query,
            role,
            lifecycle=lifecycle,
            generator=generator,
            min_score=settings.min_relevance_score,
        ),
        timeout=settings.llm_timeout_seconds,
    )

    if not results:
        print("No matches.")
    for i, r in enumerate(results, start=1):
        print(f"{i}. {r.posting.name} by {r.posting.owner}: {r.rationale}")


def main() -> None:
    query = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_QUERY
    role = Role(sys.argv[2].upper()) if len(sys.argv) > 2 else Role.BORROWER
    asyncio.run(run(query, role))


if __name__ == "__main__":
    main()

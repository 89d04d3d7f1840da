from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from lendmatch.constants import MIN_RELEVANCE_SCORE
from lendmatch.match.assembler import assemble_results
from lendmatch.match.generator import TextGenerator
from lendmatch.match.prompt import build_match_prompt
from lendmatch.match.selector import select_candidates
from lendmatch.match.validator import validate_match_response
from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.models import Role, SmartMatchResult, utcnow

logger = logging.getLogger(__name__)


async def smart_match(
    query_text: str,
    query_role: Role,
    *,
    lifecycle: LifecycleManager,
    generator: TextGenerator,
    clock: Callable[[], datetime] = utcnow,
    min_score: float = MIN_RELEVANCE_SCORE,
) -> list[SmartMatchResult]:
    """Find complementary ACTIVE postings for a natural-language query.

    The model call is the only suspension point and is not retried; its
    failures propagate.  The reply is validated against the clock as read
    after the reply arrives, not the time the request was built.
    """
    q = query_text.strip() if query_text else ""
    if not q:
        raise ValueError("Query must not be empty.")

    requested_at = clock()
    # Selection takes the store lock; keep it off the event loop.
    candidates = await asyncio.to_thread(select_candidates, lifecycle, query_role, requested_at)
    if not candidates:
        logger.info("No candidates for %s query; skipping model call", Role(query_role).value)
        return []

    prompt = build_match_prompt(q, query_role, requested_at, candidates)
    logger.info("Requesting matches for %d candidates", len(candidates))
    raw_text = await generator.generate(prompt)
    logger.debug("Raw model response: %s", raw_text[:1000])

    validated = validate_match_response(raw_text, candidates, clock(), min_score=min_score)
    results = assemble_results(validated, candidates)
    logger.info("SmartMatch returned %d results", len(results))
    return results

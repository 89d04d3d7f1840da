from __future__ import annotations

import logging
from datetime import datetime

from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.models import Posting, Role, Status

logger = logging.getLogger(__name__)


def select_candidates(lifecycle: LifecycleManager, query_role: Role, now: datetime) -> list[Posting]:
    """Return ACTIVE postings of the complementary role, in insertion order.

    Expiry is evaluated lazily: every stored posting is swept through
    :meth:`LifecycleManager.expire` before filtering.
    """
    expired = lifecycle.expire_all(now)
    if expired:
        logger.info("Expired %d postings before matching", len(expired))

    role = Role(query_role)
    candidates = [
        p for p in lifecycle.store
        if p.status is Status.ACTIVE and p.role is not role
    ]
    logger.debug("Selected %d candidates for %s query", len(candidates), role.value)
    return candidates

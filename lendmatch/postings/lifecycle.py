"""
Posting lifecycle.

Every posting starts ACTIVE and moves to exactly one terminal state
(FULFILLED, CANCELLED or EXPIRED).  Only ACTIVE postings may be edited,
and only terminal postings may be deleted.  Cancel, fulfill and expire
are silent no-ops when their precondition does not hold, whereas
create, update and delete fail loudly.
"""

from __future__ import annotations

import logging
from datetime import datetime

from lendmatch.postings.errors import CannotDeleteActive, InvalidTimeWindow, NotActive
from lendmatch.postings.models import Posting, Role, Status, utcnow
from lendmatch.postings.store import PostingStore
from lendmatch.utils import ensure_utc

logger = logging.getLogger(__name__)


class LifecycleManager:
    def __init__(self, store: PostingStore) -> None:
        self._store = store

    @property
    def store(self) -> PostingStore:
        return self._store

    def create(
        self,
        owner: str,
        role: Role,
        name: str,
        category: str,
        description: str | None = None,
        available_from: datetime | None = None,
        available_until: datetime | None = None,
    ) -> Posting:
        """Create an ACTIVE posting and add it to the store.

        ``available_from`` defaults to the current time.  Raises
        :class:`InvalidTimeWindow` when both bounds are given and the
        window is inverted.
        """
        start = ensure_utc(available_from) or utcnow()
        available_until = ensure_utc(available_until)
        if available_until is not None and start > available_until:
            raise InvalidTimeWindow("Invalid time window: available_from is after available_until")

        with self._store.lock:
            posting = Posting(
                id=self._store.next_id(),
                owner=owner,
                role=Role(role),
                name=name,
                category=category,
                description=description,
                available_from=start,
                available_until=available_until,
            )
            self._store.insert(posting)
        logger.info("Created posting %s (%s) for %s", posting.id, posting.role.value, owner)
        return posting

    def update(
        self,
        posting: Posting,
        name: str | None = None,
        category: str | None = None,
        description: str | None = None,
        available_from: datetime | None = None,
        available_until: datetime | None = None,
    ) -> None:
        """Apply the supplied (truthy) fields to an ACTIVE posting.

        Only a newly supplied pair of bounds is checked against each other;
        a single new bound is not compared with the bound already stored.
        """
        available_from = ensure_utc(available_from)
        available_until = ensure_utc(available_until)
        with self._store.lock:
            if posting.status is not Status.ACTIVE:
                raise NotActive(f"Cannot update posting {posting.id}: status is {posting.status.value}")
            if available_from and available_until and available_from > available_until:
                raise InvalidTimeWindow("Invalid new time window: available_from is after available_until")

            if name:
                posting.name = name
            if category:
                posting.category = category
            if description:
                posting.description = description
            if available_from:
                posting.available_from = available_from
            if available_until:
                posting.available_until = available_until
        logger.info("Updated posting %s", posting.id)

    def cancel(self, posting: Posting) -> None:
        self._finish(posting, Status.CANCELLED)

    def fulfill(self, posting: Posting) -> None:
        self._finish(posting, Status.FULFILLED)

    def expire(self, posting: Posting, now: datetime | None = None) -> bool: # True only when this call moved the posting to EXPIRED
        current = ensure_utc(now) or utcnow()
        with self._store.lock:
            if (
                posting.status is Status.ACTIVE
                and posting.available_until is not None
                and current > posting.available_until
            ):
                posting.status = Status.EXPIRED
                logger.info("Posting %s expired (available until %s)", posting.id, posting.available_until.isoformat())
                return True
        return False

    def expire_all(self, now: datetime | None = None) -> list[Posting]:
        current = ensure_utc(now) or utcnow()
        with self._store.lock:
            return [p for p in self._store if self.expire(p, current)]

    def delete(self, posting: Posting) -> None:
        with self._store.lock:
            if posting.status is Status.ACTIVE:
                raise CannotDeleteActive(f"Cannot delete posting {posting.id}: it is still ACTIVE")
            self._store.remove(posting)
        logger.info("Deleted posting %s", posting.id)

    def _finish(self, posting: Posting, target: Status) -> None:
        with self._store.lock:
            if posting.status is not Status.ACTIVE:
                logger.debug(
                    "Ignoring %s for posting %s: status is %s",
                    target.value, posting.id, posting.status.value,
                )
                return
            posting.status = target
        logger.info("Posting %s is now %s", posting.id, target.value)

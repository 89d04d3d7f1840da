from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Role(str, Enum):
    LENDER = "LENDER"
    BORROWER = "BORROWER"


class Status(str, Enum):
    ACTIVE = "ACTIVE"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


_IMMUTABLE_FIELDS = frozenset({"id", "role"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Posting:
    """One offer (LENDER) or request (BORROWER) for a shared item.

    Postings compare by identity: the store removes them by identity and two
    postings with identical fields are still different records.
    """

    id: str
    owner: str
    role: Role
    name: str
    category: str
    description: str | None = None
    available_from: datetime = field(default_factory=utcnow)
    available_until: datetime | None = None
    status: Status = Status.ACTIVE

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"Posting.{name} cannot be changed after creation")
        super().__setattr__(name, value)


@dataclass(frozen=True)
class SmartMatchResult: # One matched posting and the model's short reason for it
    posting: Posting
    rationale: str

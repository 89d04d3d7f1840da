"""
Validation of the model's match response.

The raw reply is untrusted text.  It is first reduced to a list of
entries (tolerating prose around the JSON array), then checked against
three batch-level policies in order: every id must name a candidate,
every referenced posting must be available at validation time, and
every score must reach the relevance floor.  A single offending entry
rejects the whole batch; entries are never dropped individually.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from lendmatch.constants import MIN_RELEVANCE_SCORE
from lendmatch.postings.errors import BelowRelevanceThreshold, StalePosting, UnknownPostingId
from lendmatch.postings.models import Posting
from lendmatch.utils import ensure_utc

logger = logging.getLogger(__name__)

_DECODER = json.JSONDecoder()


class MatchEntry(BaseModel):
    """One element of the array returned by the model."""

    model_config = ConfigDict(extra="ignore")

    id: str
    owner: str | None = None
    rationale: str = ""
    score: float = Field(strict=False)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("score", mode="before")
    @classmethod
    def _score_not_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("score must be a number, not a boolean")
        return value

    @field_validator("rationale", mode="before")
    @classmethod
    def _rationale_default(cls, value: Any) -> Any:
        return "" if value is None else value


_ENTRIES = TypeAdapter(list[MatchEntry])


@dataclass(frozen=True)
class ParsedArray:
    entries: list[MatchEntry]


@dataclass(frozen=True)
class MalformedModelResponse:
    reason: str


ExtractionResult = Union[ParsedArray, MalformedModelResponse]


@dataclass(frozen=True)
class ValidatedMatch:
    posting_id: str
    rationale: str


def extract_match_array(raw_text: str) -> ExtractionResult:
    """Find the first JSON array literal in ``raw_text`` and parse its entries.

    Brackets that do not open a decodable JSON value are skipped.  The first
    array that decodes is authoritative: if its entries are not well-formed
    the result is :class:`MalformedModelResponse`.
    """
    if not raw_text or not raw_text.strip():
        return MalformedModelResponse("empty response")

    start = raw_text.find("[")
    while start != -1:
        try:
            value, _ = _DECODER.raw_decode(raw_text, start)
        except json.JSONDecodeError:
            start = raw_text.find("[", start + 1)
            continue

        try:
            return ParsedArray(entries=_ENTRIES.validate_python(value))
        except ValidationError as exc:
            return MalformedModelResponse(f"array entries are not well-formed: {exc.error_count()} errors")

    return MalformedModelResponse("no JSON array found")


def validate_match_response(
    raw_text: str,
    candidates: Sequence[Posting],
    now: datetime,
    *,
    min_score: float = MIN_RELEVANCE_SCORE,
) -> list[ValidatedMatch]:
    """Turn a raw model reply into an ordered list of trusted matches.

    Returns an empty list when no usable array can be extracted.  Raises
    :class:`UnknownPostingId`, :class:`StalePosting` or
    :class:`BelowRelevanceThreshold` when any entry breaks the
    corresponding policy.
    """
    now = ensure_utc(now)
    extracted = extract_match_array(raw_text)
    if isinstance(extracted, MalformedModelResponse):
        logger.warning("Failed to parse model output (%s): %r", extracted.reason, raw_text[:500])
        return []

    entries = extracted.entries
    by_id = {p.id: p for p in candidates}

    for entry in entries:
        if entry.id not in by_id:
            logger.warning("Rejecting batch: unknown posting id %r", entry.id)
            raise UnknownPostingId(entry.id, f"SmartMatch returned non-existent posting ID: {entry.id}")

    for entry in entries:
        posting = by_id[entry.id]
        if posting.available_from is not None and posting.available_from > now:
            logger.warning("Rejecting batch: posting %s not yet available", posting.id)
            raise StalePosting(
                posting.id,
                f"Posting {posting.id} is not yet available (starts {posting.available_from.isoformat()}).",
            )
        if posting.available_until is not None and posting.available_until < now:
            logger.warning("Rejecting batch: posting %s no longer available", posting.id)
            raise StalePosting(
                posting.id,
                f"Posting {posting.id} has expired (ended {posting.available_until.isoformat()}).",
            )

    for entry in entries:
        # NaN never satisfies the floor.
        if not entry.score >= min_score:
            logger.warning("Rejecting batch: posting %s scored %s", entry.id, entry.score)
            raise BelowRelevanceThreshold(entry.id, entry.score, min_score)

    return [ValidatedMatch(posting_id=e.id, rationale=e.rationale) for e in entries]

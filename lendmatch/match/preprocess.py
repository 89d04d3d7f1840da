from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from bs4 import BeautifulSoup

from lendmatch.postings.models import Posting


_WHITESPACE_RE = re.compile(r"\s+")
_MARKUP_RE = re.compile(r"<[a-zA-Z/!][^>]*>")


def normalize_whitespace(text: str) -> str: #repeated whitespaces into single spaces
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def html_to_text(html: str) -> str: #html to plain text; plain text passes through
    if not html:
        return ""
    if not _MARKUP_RE.search(html):
        return normalize_whitespace(html)

    soup = BeautifulSoup(html, "lxml")

    for node in soup(["script", "style"]):
        node.decompose()

    text = soup.get_text(separator=" ", strip=True)
    return normalize_whitespace(text)


def safe_str(value: Any) -> str: #values to trimmed string and missing values becomes empty
    if value is None:
        return ""

    s = str(value).strip()
    if s.lower() in {"nan", "none", "nat"}:
        return ""

    return s


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def posting_to_candidate_record(posting: Posting) -> dict[str, Any]: # structured record sent to the model for one candidate
    return {
        "id": posting.id,
        "owner": normalize_whitespace(posting.owner),
        "role": posting.role.value,
        "name": normalize_whitespace(posting.name),
        "category": normalize_whitespace(posting.category),
        "description": html_to_text(posting.description) if posting.description else None,
        "availableFrom": _iso(posting.available_from),
        "availableUntil": _iso(posting.available_until),
        "status": posting.status.value,
    }


def human_readable_time(value: datetime) -> str:
    # e.g. "Sunday, October 18, 2026 at 09:30 UTC"
    return value.strftime("%A, %B %d, %Y at %H:%M %Z").strip()

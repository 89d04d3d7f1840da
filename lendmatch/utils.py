from datetime import datetime, timezone
from typing import Any, Dict, Optional

from lendmatch.postings.models import Posting


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sanitize_posting(posting: Posting) -> Dict[str, Any]:
    return {
        "id": posting.id,
        "owner": posting.owner,
        "role": posting.role,
        "name": posting.name,
        "category": posting.category,
        "description": posting.description,
        "available_from": posting.available_from,
        "available_until": posting.available_until,
        "status": posting.status,
    }

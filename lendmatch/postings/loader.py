from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd

from lendmatch.constants import PostingColumns
from lendmatch.match.preprocess import safe_str
from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.models import Posting, Role


def load_postings_frame(csv_path: str) -> pd.DataFrame: #load csv into dataframe
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Postings file not found: {csv_path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    if df.empty:
        raise ValueError("The postings file was loaded, but it contains no rows.")

    missing = [c for c in PostingColumns.REQUIRED if c not in df.columns]
    if missing:
        raise ValueError(f"Postings file is missing required columns: {', '.join(missing)}")

    return df


def _parse_timestamp(value: Any) -> datetime | None:
    raw = safe_str(value)
    if not raw:
        return None
    ts = pd.Timestamp(raw)
    if ts.tzinfo is None:
        ts = ts.tz_localize(timezone.utc)
    return ts.tz_convert(timezone.utc).to_pydatetime()


def load_postings_csv(csv_path: str, lifecycle: LifecycleManager) -> list[Posting]:
    """Create one posting per CSV row through the lifecycle manager.

    Rows go through :meth:`LifecycleManager.create`, so an inverted time
    window raises :class:`InvalidTimeWindow` and stops the load.
    """
    df = load_postings_frame(csv_path)

    created: list[Posting] = []
    for row in df.to_dict(orient="records"):
        created.append(
            lifecycle.create(
                owner=safe_str(row[PostingColumns.OWNER]),
                role=Role(safe_str(row[PostingColumns.ROLE]).upper()),
                name=safe_str(row[PostingColumns.NAME]),
                category=safe_str(row[PostingColumns.CATEGORY]),
                description=safe_str(row.get(PostingColumns.DESCRIPTION)) or None,
                available_from=_parse_timestamp(row.get(PostingColumns.AVAILABLE_FROM)),
                available_until=_parse_timestamp(row.get(PostingColumns.AVAILABLE_UNTIL)),
            )
        )
    return created

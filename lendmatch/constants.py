from __future__ import annotations


MIN_RELEVANCE_SCORE = 30  # on the model's 0-100 scale


class PostingColumns: # Column names expected in a postings CSV
    OWNER = "owner"
    ROLE = "role"
    NAME = "name"
    CATEGORY = "category"
    DESCRIPTION = "description"
    AVAILABLE_FROM = "available_from"
    AVAILABLE_UNTIL = "available_until"

    REQUIRED = (OWNER, ROLE, NAME, CATEGORY)

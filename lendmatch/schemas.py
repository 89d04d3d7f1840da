from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from lendmatch.postings.models import Role, Status


class PostingCreateRequest(BaseModel): # Request body for creating a posting
    owner: str = Field(..., min_length=1)
    role: Role
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    description: str | None = None
    available_from: datetime | None = None
    available_until: datetime | None = None


class PostingUpdateRequest(BaseModel): # Omitted or empty fields are left unchanged
    name: str | None = None
    category: str | None = None
    description: str | None = None
    available_from: datetime | None = None
    available_until: datetime | None = None


class PostingOut(BaseModel):
    id: str
    owner: str
    role: Role
    name: str
    category: str
    description: str | None = None
    available_from: datetime
    available_until: datetime | None = None
    status: Status


class MatchRequest(BaseModel): # Request body for a smart match query
    query: str = Field(
        ...,
        min_length=1,
        description="Free-text description of what the user needs or offers",
    )
    role: Role = Field(..., description="Role of the user asking")


class MatchResult(BaseModel):
    posting: PostingOut
    rationale: str


class MatchResponse(BaseModel):
    query: str
    role: Role
    results: list[MatchResult]

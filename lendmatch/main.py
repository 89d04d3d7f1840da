from __future__ import annotations

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager
from functools import lru_cache

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Response
from starlette.requests import Request

from lendmatch.config import get_settings
from lendmatch.match.generator import TextGenerator, get_text_generator
from lendmatch.match.service import smart_match
from lendmatch.postings.errors import (
    InvalidTimeWindow,
    MatchValidationError,
    ModelUnavailableError,
    PostingError,
    PostingNotFound,
)
from lendmatch.postings.lifecycle import LifecycleManager
from lendmatch.postings.loader import load_postings_csv
from lendmatch.postings.models import Posting, Role, Status
from lendmatch.postings.store import PostingStore
from lendmatch.schemas import (
    MatchRequest,
    MatchResponse,
    MatchResult,
    PostingCreateRequest,
    PostingOut,
    PostingUpdateRequest,
)
from lendmatch.utils import ensure_utc, sanitize_posting

_settings = get_settings()
logging.basicConfig(level=_settings.log_level, format="[%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@lru_cache
def get_lifecycle() -> LifecycleManager:
    return LifecycleManager(PostingStore())


@lru_cache
def _default_generator() -> TextGenerator:
    return get_text_generator(_settings)


def get_generator() -> TextGenerator:
    try:
        return _default_generator()
    except ModelUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@asynccontextmanager
async def lifespan(_: FastAPI):
    if _settings.postings_csv_path:
        seeded = load_postings_csv(_settings.postings_csv_path, get_lifecycle())
        logger.info("Seeded %d postings from %s", len(seeded), _settings.postings_csv_path)
    yield


app = FastAPI(
    title="Lend/Borrow Matching API",
    version="0.1.0",
    description="Posting lifecycle and LLM-assisted matching of lenders and borrowers.",
    lifespan=lifespan,
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    started_at = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started_at) * 1000.0
    logger.info(
        "http request method=%s path=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


def _http_error(exc: PostingError) -> HTTPException:
    if isinstance(exc, PostingNotFound):
        status_code = 404
    elif isinstance(exc, InvalidTimeWindow):
        status_code = 400
    else:
        status_code = 409
    return HTTPException(status_code=status_code, detail=str(exc))


def _get_posting(lifecycle: LifecycleManager, posting_id: str) -> Posting:
    try:
        return lifecycle.store.get(posting_id)
    except PostingNotFound as exc:
        raise _http_error(exc) from exc


def _out(posting: Posting) -> PostingOut:
    return PostingOut(**sanitize_posting(posting))


@app.get("/")
def root() -> dict:
    return {"message": "Lend/Borrow Matching API. Visit /docs for Swagger UI."}


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/api/postings", response_model=PostingOut, status_code=201)
def create_posting(
    payload: PostingCreateRequest,
    lifecycle: LifecycleManager = Depends(get_lifecycle),
) -> PostingOut:
    try:
        posting = lifecycle.create(
            owner=payload.owner,
            role=payload.role,
            name=payload.name,
            category=payload.category,
            description=payload.description,
            available_from=ensure_utc(payload.available_from),
            available_until=ensure_utc(payload.available_until),
        )
    except PostingError as exc:
        raise _http_error(exc) from exc
    return _out(posting)


@app.get("/api/postings", response_model=list[PostingOut])
def list_postings(
    status: Status | None = None,
    role: Role | None = None,
    lifecycle: LifecycleManager = Depends(get_lifecycle),
) -> list[PostingOut]:
    return [
        _out(p)
        for p in lifecycle.store
        if (status is None or p.status is status) and (role is None or p.role is role)
    ]


@app.get("/api/postings/{posting_id}", response_model=PostingOut)
def get_posting(posting_id: str, lifecycle: LifecycleManager = Depends(get_lifecycle)) -> PostingOut:
    return _out(_get_posting(lifecycle, posting_id))


@app.patch("/api/postings/{posting_id}", response_model=PostingOut)
def update_posting(
    posting_id: str,
    payload: PostingUpdateRequest,
    lifecycle: LifecycleManager = Depends(get_lifecycle),
) -> PostingOut:
    posting = _get_posting(lifecycle, posting_id)
    try:
        lifecycle.update(
            posting,
            name=payload.name,
            category=payload.category,
            description=payload.description,
            available_from=ensure_utc(payload.available_from),
            available_until=ensure_utc(payload.available_until),
        )
    except PostingError as exc:
        raise _http_error(exc) from exc
    return _out(posting)


@app.post("/api/postings/{posting_id}/cancel", response_model=PostingOut)
def cancel_posting(posting_id: str, lifecycle: LifecycleManager = Depends(get_lifecycle)) -> PostingOut:
    posting = _get_posting(lifecycle, posting_id)
    lifecycle.cancel(posting)
    return _out(posting)


@app.post("/api/postings/{posting_id}/fulfill", response_model=PostingOut)
def fulfill_posting(posting_id: str, lifecycle: LifecycleManager = Depends(get_lifecycle)) -> PostingOut:
    posting = _get_posting(lifecycle, posting_id)
    lifecycle.fulfill(posting)
    return _out(posting)


@app.post("/api/postings/{posting_id}/expire", response_model=PostingOut)
def expire_posting(posting_id: str, lifecycle: LifecycleManager = Depends(get_lifecycle)) -> PostingOut:
    posting = _get_posting(lifecycle, posting_id)
    lifecycle.expire(posting)
    return _out(posting)


@app.delete("/api/postings/{posting_id}", status_code=204)
def delete_posting(posting_id: str, lifecycle: LifecycleManager = Depends(get_lifecycle)) -> Response:
    posting = _get_posting(lifecycle, posting_id)
    try:
        lifecycle.delete(posting)
    except PostingError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=204)


@app.post("/api/match", response_model=MatchResponse)
async def match_postings(
    payload: MatchRequest,
    lifecycle: LifecycleManager = Depends(get_lifecycle),
    generator: TextGenerator = Depends(get_generator),
) -> MatchResponse:
    try:
        results = await asyncio.wait_for(
            smart_match(
                payload.query,
                payload.role,
                lifecycle=lifecycle,
                generator=generator,
                min_score=_settings.min_relevance_score,
            ),
            timeout=_settings.llm_timeout_seconds,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except MatchValidationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except asyncio.TimeoutError as exc:
        raise HTTPException(status_code=504, detail="Model call timed out") from exc

    return MatchResponse(
        query=payload.query,
        role=payload.role,
        results=[MatchResult(posting=_out(r.posting), rationale=r.rationale) for r in results],
    )


def run() -> None: # Serve the API with uvicorn (``lendmatch-api`` console script)
    uvicorn.run(
        "lendmatch.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_level=_settings.log_level.lower(),
    )

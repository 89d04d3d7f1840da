from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from lendmatch.constants import MIN_RELEVANCE_SCORE

# Load .env
load_dotenv()


@dataclass(frozen=True)
class Settings:
    llm_provider: str
    llm_model: str
    llm_temperature: float
    llm_max_output_tokens: int
    llm_timeout_seconds: float

    min_relevance_score: float
    postings_csv_path: str | None
    log_level: str


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer (got {value!r})") from exc


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a float (got {value!r})") from exc


def get_settings() -> Settings:
    llm_provider = os.getenv("LLM_PROVIDER", "none")
    llm_model = os.getenv("LLM_MODEL", "gemini-2.5-flash")
    llm_temperature = _parse_float("LLM_TEMPERATURE", os.getenv("LLM_TEMPERATURE", "0.2"))
    llm_max_output_tokens = _parse_int(
        "LLM_MAX_OUTPUT_TOKENS", os.getenv("LLM_MAX_OUTPUT_TOKENS", "1024")
    )
    llm_timeout_seconds = _parse_float("LLM_TIMEOUT_SECONDS", os.getenv("LLM_TIMEOUT_SECONDS", "30"))

    min_relevance_score = _parse_float(
        "MIN_RELEVANCE_SCORE", os.getenv("MIN_RELEVANCE_SCORE", str(MIN_RELEVANCE_SCORE))
    )
    if not 0 <= min_relevance_score <= 100:
        raise ValueError(f"MIN_RELEVANCE_SCORE must be between 0 and 100 (got {min_relevance_score})")

    return Settings(
        llm_provider=llm_provider,
        llm_model=llm_model,
        llm_temperature=llm_temperature,
        llm_max_output_tokens=llm_max_output_tokens,
        llm_timeout_seconds=llm_timeout_seconds,
        min_relevance_score=min_relevance_score,
        postings_csv_path=os.getenv("POSTINGS_CSV_PATH") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

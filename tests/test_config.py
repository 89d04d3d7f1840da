from __future__ import annotations

import pytest

from lendmatch.config import get_settings
from lendmatch.match.generator import GeminiGenerator, get_text_generator
from lendmatch.postings.errors import ModelUnavailableError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "LLM_PROVIDER",
        "LLM_TEMPERATURE",
        "MIN_RELEVANCE_SCORE",
        "POSTINGS_CSV_PATH",
        "GOOGLE_API_KEY",
        "GEMINI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = get_settings()

    assert settings.llm_provider == "none"
    assert settings.min_relevance_score == 30
    assert settings.postings_csv_path is None


def test_bad_numbers_are_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_TEMPERATURE", "warm")
    with pytest.raises(ValueError, match="LLM_TEMPERATURE"):
        get_settings()


def test_relevance_floor_must_be_on_score_scale(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIN_RELEVANCE_SCORE", "150")
    with pytest.raises(ValueError, match="MIN_RELEVANCE_SCORE"):
        get_settings()


def test_generator_requires_provider_and_key(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ModelUnavailableError):
        get_text_generator(get_settings())

    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    with pytest.raises(ModelUnavailableError, match="API_KEY"):
        get_text_generator(get_settings())

    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    assert isinstance(get_text_generator(get_settings()), GeminiGenerator)

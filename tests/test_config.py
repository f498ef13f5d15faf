"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from fake_news_detector.config import (
    DEFAULT_DATA_DIR,
    IdfFormula,
    Settings,
)


def _from(**env: str) -> Settings:
    return Settings.from_env({f"FAKE_NEWS_{k}": v for k, v in env.items()}, use_dotenv=False)


class TestDefaults:
    def test_default_paths(self) -> None:
        settings = Settings()
        assert settings.model_path == DEFAULT_DATA_DIR / "logistic_regression_model.json"
        assert settings.tfidf_state_path == DEFAULT_DATA_DIR / "tfidf_state.json"
        assert settings.vocabulary_path == DEFAULT_DATA_DIR / "vocabulary.json"

    def test_default_limits(self) -> None:
        settings = Settings()
        assert settings.idf_formula is IdfFormula.SMOOTH
        assert settings.max_text_length == 100_000
        assert settings.min_token_length == 1
        assert settings.max_tokens is None

    def test_empty_environment_gives_defaults(self) -> None:
        assert _from() == Settings()

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Settings().max_tokens = 5  # type: ignore[misc]


class TestForDataDir:
    def test_paths(self, tmp_path: Path) -> None:
        settings = Settings.for_data_dir(tmp_path)
        assert settings.model_path.parent == tmp_path
        assert settings.vocabulary_path.name == "vocabulary.json"

    def test_overrides(self, tmp_path: Path) -> None:
        settings = Settings.for_data_dir(str(tmp_path), idf_formula=IdfFormula.RAW)
        assert settings.idf_formula is IdfFormula.RAW


class TestFromEnv:
    def test_data_dir(self) -> None:
        settings = _from(DATA_DIR="/srv/model")
        assert settings.tfidf_state_path == Path("/srv/model/tfidf_state.json")

    def test_individual_paths_override_data_dir(self) -> None:
        settings = _from(DATA_DIR="/srv/model", VOCAB_PATH="/etc/vocab.json")
        assert settings.vocabulary_path == Path("/etc/vocab.json")
        assert settings.model_path == Path("/srv/model/logistic_regression_model.json")

    def test_formula_case_insensitive(self) -> None:
        assert _from(IDF_FORMULA="RAW").idf_formula is IdfFormula.RAW

    def test_unknown_formula(self) -> None:
        with pytest.raises(ValueError, match="IDF_FORMULA"):
            _from(IDF_FORMULA="bm25")

    def test_numeric_settings(self) -> None:
        settings = _from(MAX_TEXT_LENGTH="500", MIN_TOKEN_LENGTH="3", MAX_TOKENS="100")
        assert settings.max_text_length == 500
        assert settings.min_token_length == 3
        assert settings.max_tokens == 100

    def test_zero_disables_limits(self) -> None:
        settings = _from(MAX_TEXT_LENGTH="0", MAX_TOKENS="0")
        assert settings.max_text_length is None
        assert settings.max_tokens is None

    def test_blank_values_ignored(self) -> None:
        assert _from(MAX_TEXT_LENGTH="  ", DATA_DIR="") == Settings()

    @pytest.mark.parametrize("value", ["ten", "1.5", "-3"])
    def test_bad_integer(self, value: str) -> None:
        with pytest.raises(ValueError, match="MAX_TEXT_LENGTH"):
            _from(MAX_TEXT_LENGTH=value)

    def test_log_level(self) -> None:
        assert _from(LOG_LEVEL="debug").log_level == "DEBUG"

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FAKE_NEWS_MAX_TOKENS", "7")
        assert Settings.from_env(use_dotenv=False).max_tokens == 7


def test_to_dict() -> None:
    data = Settings().to_dict()
    assert data["idf_formula"] == "smooth"
    assert data["max_text_length"] == 100_000
    assert isinstance(data["model_path"], str)

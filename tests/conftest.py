"""Shared test fixtures for fake-news-detector tests.

The golden artifacts are small enough to check by hand:

- vocabulary: fake, shock, cure, report, hoax
- 4 training documents; document frequencies fake=3, shock=1, cure=1,
  report=2, hoax=1
- weights: 0.5, 1.0, -1.0, -2.0, 3.0 and bias -0.5
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest

from fake_news_detector.assets import AssetStore, load_assets
from fake_news_detector.config import Settings
from fake_news_detector.service import InferenceService

GOLDEN_VOCABULARY = ["fake", "shock", "cure", "report", "hoax"]

GOLDEN_DOCUMENTS = [
    {"fake": 2, "shock": 1, "hoax": 1, "__key": 0},
    {"fake": 1, "report": 3, "__key": 1},
    {"fake": 1, "cure": 1, "__key": 2},
    {"report": 2, "__key": 3},
]

GOLDEN_WEIGHTS = [0.5, 1.0, -1.0, -2.0, 3.0, -0.5]

_DEFAULT = object()

GOLDEN_TEXT = "SHOCKING news: the secret miracle cure they hide!!! 100% FAKE, fake."


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FAKE_NEWS_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("FAKE_NEWS_"):
            monkeypatch.delenv(name)


@pytest.fixture
def write_artifacts(tmp_path: Path) -> Callable[..., Path]:
    """Write model artifacts into a fresh directory and return it.

    Pass ``None`` to leave an artifact out, or a ``str`` to write it verbatim.
    """
    counter = {"n": 0}

    def _write(
        vocabulary: Any = _DEFAULT,
        weights: Any = _DEFAULT,
        tfidf_state: Any = _DEFAULT,
    ) -> Path:
        counter["n"] += 1
        data_dir = tmp_path / f"assets{counter['n']}"
        data_dir.mkdir()
        if vocabulary is _DEFAULT:
            vocabulary = GOLDEN_VOCABULARY
        if weights is _DEFAULT:
            weights = GOLDEN_WEIGHTS
        if tfidf_state is _DEFAULT:
            tfidf_state = {"documents": GOLDEN_DOCUMENTS}
        artifacts = {
            "vocabulary.json": vocabulary,
            "logistic_regression_model.json": weights,
            "tfidf_state.json": tfidf_state,
        }
        for name, content in artifacts.items():
            if content is None:
                continue
            text = content if isinstance(content, str) else json.dumps(content)
            (data_dir / name).write_text(text, encoding="utf-8")
        return data_dir

    return _write


@pytest.fixture
def golden_dir(write_artifacts: Callable[..., Path]) -> Path:
    return write_artifacts()


@pytest.fixture
def golden_settings(golden_dir: Path) -> Settings:
    return Settings.for_data_dir(golden_dir)


@pytest.fixture
def golden_store(golden_settings: Settings) -> AssetStore:
    return load_assets(golden_settings)


@pytest.fixture
def service(golden_settings: Settings) -> InferenceService:
    """A ready service over the golden artifacts."""
    return InferenceService(golden_settings).load()


@pytest.fixture
def golden_text() -> str:
    return GOLDEN_TEXT

"""Runtime settings loaded from the environment (and an optional ``.env``).

Example ``.env``::

    FAKE_NEWS_DATA_DIR=ml_data/fake_news/processed
    FAKE_NEWS_IDF_FORMULA=smooth
    FAKE_NEWS_MAX_TEXT_LENGTH=100000
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_DATA_DIR = Path("ml_data") / "fake_news" / "processed"
MODEL_FILENAME = "logistic_regression_model.json"
TFIDF_STATE_FILENAME = "tfidf_state.json"
VOCABULARY_FILENAME = "vocabulary.json"

_ENV_PREFIX = "FAKE_NEWS_"


class IdfFormula(str, Enum):
    """Inverse document frequency formulas understood by the vectorizer.

    ``SMOOTH`` is ``1 + ln(N / (1 + df))``, the formula of the TF-IDF
    implementation the artifacts were trained with. ``RAW`` is
    ``ln(N / df)``, used by the optimized trainer variant.
    """

    SMOOTH = "smooth"
    RAW = "raw"


@dataclass(frozen=True)
class Settings:
    """Locations of the model artifacts and request-time limits.

    Attributes:
        model_path: Logistic regression weights (JSON).
        tfidf_state_path: Training corpus term-frequency records (JSON).
        vocabulary_path: Ordered vocabulary (JSON array).
        idf_formula: Formula used to turn document frequencies into IDF.
        max_text_length: Longest accepted input in characters; ``None``
            disables the cap.
        min_token_length: Tokens shorter than this are dropped with the
            stopwords.
        max_tokens: Keep only the first ``max_tokens`` tokens before
            stemming; ``None`` keeps all of them.
        log_level: Level the CLI configures logging with.
    """

    model_path: Path = DEFAULT_DATA_DIR / MODEL_FILENAME
    tfidf_state_path: Path = DEFAULT_DATA_DIR / TFIDF_STATE_FILENAME
    vocabulary_path: Path = DEFAULT_DATA_DIR / VOCABULARY_FILENAME
    idf_formula: IdfFormula = IdfFormula.SMOOTH
    max_text_length: Optional[int] = 100_000
    min_token_length: int = 1
    max_tokens: Optional[int] = None
    log_level: str = "WARNING"

    @classmethod
    def for_data_dir(cls, data_dir: str | Path, **overrides) -> "Settings":
        """Settings pointing at the three standard artifact names in ``data_dir``."""
        data_dir = Path(data_dir)
        return cls(
            model_path=data_dir / MODEL_FILENAME,
            tfidf_state_path=data_dir / TFIDF_STATE_FILENAME,
            vocabulary_path=data_dir / VOCABULARY_FILENAME,
            **overrides,
        )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        use_dotenv: bool = True,
    ) -> "Settings":
        """Build settings from ``FAKE_NEWS_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            use_dotenv: Load a ``.env`` file into the process environment first.

        Raises:
            ValueError: If a numeric variable is not an integer or the IDF
                formula is unknown.
        """
        if use_dotenv:
            load_dotenv()
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(_ENV_PREFIX + name)
            return value.strip() if value and value.strip() else None

        data_dir = Path(get("DATA_DIR") or DEFAULT_DATA_DIR)
        settings = cls.for_data_dir(data_dir)

        if get("MODEL_PATH"):
            settings = replace(settings, model_path=Path(get("MODEL_PATH")))
        if get("TFIDF_STATE_PATH"):
            settings = replace(settings, tfidf_state_path=Path(get("TFIDF_STATE_PATH")))
        if get("VOCAB_PATH"):
            settings = replace(settings, vocabulary_path=Path(get("VOCAB_PATH")))

        formula = get("IDF_FORMULA")
        if formula:
            try:
                settings = replace(settings, idf_formula=IdfFormula(formula.lower()))
            except ValueError:
                known = ", ".join(f.value for f in IdfFormula)
                raise ValueError(
                    f"{_ENV_PREFIX}IDF_FORMULA must be one of: {known} (got {formula!r})"
                ) from None

        max_len = _parse_int(get("MAX_TEXT_LENGTH"), "MAX_TEXT_LENGTH")
        if max_len is not None:
            settings = replace(settings, max_text_length=max_len or None)

        min_token = _parse_int(get("MIN_TOKEN_LENGTH"), "MIN_TOKEN_LENGTH")
        if min_token is not None:
            settings = replace(settings, min_token_length=max(1, min_token))

        max_tokens = _parse_int(get("MAX_TOKENS"), "MAX_TOKENS")
        if max_tokens is not None:
            settings = replace(settings, max_tokens=max_tokens or None)

        if get("LOG_LEVEL"):
            settings = replace(settings, log_level=get("LOG_LEVEL").upper())

        return settings

    def to_dict(self) -> dict:
        return {
            "model_path": str(self.model_path),
            "tfidf_state_path": str(self.tfidf_state_path),
            "vocabulary_path": str(self.vocabulary_path),
            "idf_formula": self.idf_formula.value,
            "max_text_length": self.max_text_length,
            "min_token_length": self.min_token_length,
            "max_tokens": self.max_tokens,
            "log_level": self.log_level,
        }


def _parse_int(value: Optional[str], name: str) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer (got {value!r})") from None
    if parsed < 0:
        raise ValueError(f"{_ENV_PREFIX}{name} must not be negative (got {parsed})")
    return parsed

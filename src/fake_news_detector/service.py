"""Inference service orchestrating validation, preprocessing, and scoring.

The ``InferenceService`` is the only entry point callers need. It owns the
``loading -> ready | failed`` lifecycle and, once ready, answers
``classify`` calls against a single immutable ``AssetStore``.

Example::

    service = InferenceService(Settings.from_env())
    service.load()

    result = service.classify("Scientists SHOCKED by miracle cure!")
    print(result.label, result.probability)
"""

from __future__ import annotations

import logging
from typing import Optional

from .assets import AssetStore, load_assets
from .classifier import LogisticRegressionClassifier
from .config import Settings
from .errors import AssetLoadError, InvalidInputError, NotReadyError
from .models import ClassificationResult, ServiceState
from .preprocessing import TextPreprocessor
from .vectorizer import TfidfVectorizer

logger = logging.getLogger(__name__)


class InferenceService:
    """Fake news classification over preloaded model assets.

    Every request reads the same frozen ``AssetStore``, vectorizer and
    classifier and writes nothing shared, so ``classify`` may be called
    concurrently from any number of threads once the service is ready.

    Args:
        settings: Artifact locations and request limits. Defaults to
            ``Settings()``.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()
        self._preprocessor = TextPreprocessor(
            min_token_length=self._settings.min_token_length,
            max_tokens=self._settings.max_tokens,
        )
        self._state = ServiceState.LOADING
        self._error: Optional[AssetLoadError] = None
        self._assets: Optional[AssetStore] = None
        self._vectorizer: Optional[TfidfVectorizer] = None
        self._classifier: Optional[LogisticRegressionClassifier] = None

    @classmethod
    def from_assets(
        cls,
        store: AssetStore,
        settings: Optional[Settings] = None,
    ) -> "InferenceService":
        """Build a ready service around an already validated store."""
        service = cls(settings)
        service._install(store)
        return service

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ServiceState.READY

    @property
    def assets(self) -> Optional[AssetStore]:
        return self._assets

    @property
    def error(self) -> Optional[AssetLoadError]:
        """The load failure, when the service is ``failed``."""
        return self._error

    def load(self) -> "InferenceService":
        """Load the model assets and become ready.

        A ready service ignores repeated calls. A failed service stays
        failed; only a process restart retries the load.

        Returns:
            Self (for method chaining).

        Raises:
            AssetLoadError: If the assets cannot be loaded or validated.
        """
        if self._state is ServiceState.READY:
            return self
        if self._state is ServiceState.FAILED:
            raise AssetLoadError(f"service failed to load earlier: {self._error}")

        try:
            store = load_assets(self._settings)
        except AssetLoadError as exc:
            self._state = ServiceState.FAILED
            self._error = exc
            logger.error("Inference service failed to start: %s", exc)
            raise
        self._install(store)
        return self

    def _install(self, store: AssetStore) -> None:
        self._vectorizer = TfidfVectorizer.from_assets(store)
        self._classifier = LogisticRegressionClassifier.from_assets(store)
        self._assets = store
        self._state = ServiceState.READY
        logger.info(
            "Inference service ready (vocabulary=%d, documents=%d)",
            store.vocabulary_size,
            store.corpus.document_count,
        )

    def health(self) -> dict:
        """Readiness probe payload."""
        return {
            "status": self._state.value,
            "vocabulary_size": self._assets.vocabulary_size if self._assets else None,
            "error": str(self._error) if self._error else None,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def preprocess(self, text: str) -> str:
        """Normalized token string for ``text``.

        Raises:
            NotReadyError: If the assets are not loaded.
            InvalidInputError: If ``text`` is not a non-empty string within
                the configured length limit.
        """
        self._check_ready()
        self._validate(text)
        return self._preprocessor.process(text)

    def vectorize(self, text: str) -> list[float]:
        """TF-IDF feature vector for ``text``.

        Raises:
            NotReadyError: If the assets are not loaded.
            InvalidInputError: If ``text`` is not a non-empty string within
                the configured length limit.
        """
        self._check_ready()
        document = self.preprocess(text)
        return self._vectorizer.transform(document)

    def classify(self, text: str) -> ClassificationResult:
        """Classify one document as fake (``1``) or real (``0``).

        Args:
            text: Plain article text.

        Returns:
            ClassificationResult with label and probability.

        Raises:
            NotReadyError: If the assets are not loaded.
            InvalidInputError: If ``text`` is not a non-empty string within
                the configured length limit.
        """
        self._check_ready()
        vector = self.vectorize(text)
        result = self._classifier.predict(vector)
        logger.debug(
            "Classified %d chars: label=%d probability=%.4f",
            len(text),
            result.label,
            result.probability,
        )
        return result

    def classify_batch(self, texts: list[str]) -> list[ClassificationResult]:
        """Classify several documents.

        Every text is validated before any is scored, so the call either
        returns a result for each text or raises without partial output.
        """
        self._check_ready()
        if isinstance(texts, str):
            raise InvalidInputError("classify_batch expects a list of strings, not a string")
        for position, text in enumerate(texts):
            try:
                self._validate(text)
            except InvalidInputError as exc:
                raise InvalidInputError(f"item {position}: {exc}") from None
        return [self.classify(text) for text in texts]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_ready(self) -> None:
        if self._state is not ServiceState.READY:
            raise NotReadyError(f"model assets are not loaded (state: {self._state.value})")

    def _validate(self, text: object) -> None:
        if not isinstance(text, str):
            raise InvalidInputError(f"text must be a string, got {type(text).__name__}")
        if not text:
            raise InvalidInputError("text must not be empty")
        limit = self._settings.max_text_length
        if limit is not None and len(text) > limit:
            raise InvalidInputError(
                f"text is {len(text):,} characters, limit is {limit:,}"
            )

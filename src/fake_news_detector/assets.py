"""Loading and validation of the offline-trained model artifacts.

Three JSON files are produced by the training pipeline:

- ``vocabulary.json``: ordered list of stemmed terms (feature positions)
- ``logistic_regression_model.json``: feature weights plus bias
- ``tfidf_state.json``: term-frequency records of the training documents,
  from which document frequencies are reconstructed, or an exported
  per-term IDF table

They are read concurrently, validated against each other, and frozen into a
single ``AssetStore`` that is shared read-only by every request.
"""

from __future__ import annotations

import json
import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .config import IdfFormula, Settings
from .errors import AssetLoadError

logger = logging.getLogger(__name__)

# Keys of a term-frequency record that hold bookkeeping, not term counts.
_RESERVED_KEY_PREFIX = "__"


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers have no size limit; anything past float range is unusable
        return False


# ---------------------------------------------------------------------------
# Corpus Statistics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CorpusStatistics:
    """Document frequencies of the training corpus.

    Built either from the training documents' term-frequency records (``df``
    is the number of records with a positive count for the term) or from an
    IDF table exported by the trainer, in which case ``idf()`` returns the
    table values verbatim.

    Attributes:
        document_count: Number of training documents (``N``).
        document_frequencies: Read-only ``{term: df}`` mapping.
        idf_table: Read-only ``{term: idf}`` mapping, or ``None``.
    """

    document_count: int
    document_frequencies: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    idf_table: Optional[Mapping[str, float]] = None

    def __post_init__(self) -> None:
        # Freeze caller-supplied dicts so nothing downstream can write to them.
        if not isinstance(self.document_frequencies, MappingProxyType):
            object.__setattr__(
                self, "document_frequencies", MappingProxyType(dict(self.document_frequencies))
            )
        if self.idf_table is not None and not isinstance(self.idf_table, MappingProxyType):
            object.__setattr__(self, "idf_table", MappingProxyType(dict(self.idf_table)))

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "CorpusStatistics":
        """Reconstruct document frequencies from term-frequency records.

        Raises:
            ValueError: If a record is not a mapping or holds a negative or
                non-numeric count.
        """
        doc_freq: dict[str, int] = {}
        n_docs = 0
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise ValueError(f"document record {position} is not an object")
            for term, count in record.items():
                if term.startswith(_RESERVED_KEY_PREFIX):
                    continue
                if not _is_number(count) or count < 0:
                    raise ValueError(
                        f"document record {position} has invalid count for {term!r}: {count!r}"
                    )
                if count > 0:
                    doc_freq[term] = doc_freq.get(term, 0) + 1
            n_docs += 1
        return cls(document_count=n_docs, document_frequencies=doc_freq)

    @classmethod
    def from_idf_table(cls, table: Mapping[str, Any]) -> "CorpusStatistics":
        """Wrap a ``{term: idf}`` table exported by the trainer."""
        idf: dict[str, float] = {}
        for term, value in table.items():
            if not _is_number(value):
                raise ValueError(f"idf value for {term!r} is not a finite number: {value!r}")
            idf[term] = float(value)
        return cls(document_count=0, idf_table=idf)

    @property
    def has_idf_table(self) -> bool:
        return self.idf_table is not None

    def document_frequency(self, term: str) -> int:
        """Number of training documents containing ``term``."""
        return self.document_frequencies.get(term, 0)

    def idf(self, term: str, formula: IdfFormula = IdfFormula.SMOOTH) -> float:
        """Inverse document frequency of ``term``.

        ``SMOOTH`` gives ``1 + ln(N / (1 + df))``; ``RAW`` gives
        ``ln(N / df)`` and ``0.0`` for unseen terms. An exported IDF table
        takes precedence over both.
        """
        if self.idf_table is not None:
            return self.idf_table.get(term, 0.0)
        df = self.document_frequency(term)
        if formula is IdfFormula.RAW:
            if df == 0:
                return 0.0
            return math.log(self.document_count / df)
        return 1 + math.log(self.document_count / (1 + df))

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "document_count": self.document_count,
            "document_frequencies": dict(self.document_frequencies),
        }
        if self.idf_table is not None:
            data["idf"] = dict(self.idf_table)
        return data


# ---------------------------------------------------------------------------
# Model Weights
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModelWeights:
    """Logistic regression parameters: ``V`` feature weights followed by the bias."""

    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.values) < 2:
            raise ValueError("model weights need at least one feature weight and a bias")
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))

    @property
    def coefficients(self) -> tuple[float, ...]:
        return self.values[:-1]

    @property
    def bias(self) -> float:
        return self.values[-1]

    def __len__(self) -> int:
        return len(self.values)


# ---------------------------------------------------------------------------
# Asset Store
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AssetStore:
    """Immutable bundle of everything inference needs.

    Construction validates the cross-artifact invariants, so an ``AssetStore``
    that exists is always servable.

    Attributes:
        vocabulary: Ordered, unique terms; position is the feature index.
        weights: ``len(vocabulary) + 1`` model parameters.
        corpus: Document frequency source for IDF.
        idf_formula: Formula the vectorizer applies to ``corpus``.
    """

    vocabulary: tuple[str, ...]
    weights: ModelWeights
    corpus: CorpusStatistics
    idf_formula: IdfFormula = IdfFormula.SMOOTH
    term_index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "vocabulary", tuple(self.vocabulary))
        if not self.vocabulary:
            raise AssetLoadError("vocabulary is empty")

        index: dict[str, int] = {}
        for position, term in enumerate(self.vocabulary):
            if term in index:
                raise AssetLoadError(
                    f"vocabulary term {term!r} appears at positions {index[term]} and {position}"
                )
            index[term] = position
        object.__setattr__(self, "term_index", MappingProxyType(index))

        if len(self.weights) != len(self.vocabulary) + 1:
            raise AssetLoadError(
                f"model has {len(self.weights)} weights but vocabulary has "
                f"{len(self.vocabulary)} terms (expected {len(self.vocabulary) + 1} weights)"
            )

        if self.corpus.has_idf_table:
            missing = [t for t in self.vocabulary if t not in self.corpus.idf_table]
            if missing:
                raise AssetLoadError(
                    f"idf table is missing {len(missing)} vocabulary terms, e.g. {missing[:5]}"
                )
        elif self.corpus.document_count < 1:
            raise AssetLoadError("corpus statistics contain no documents")

    @property
    def vocabulary_size(self) -> int:
        return len(self.vocabulary)

    @property
    def bias(self) -> float:
        return self.weights.bias

    def summary(self) -> dict:
        return {
            "vocabulary_size": self.vocabulary_size,
            "document_count": self.corpus.document_count,
            "idf_source": "table" if self.corpus.has_idf_table else self.idf_formula.value,
        }


# ---------------------------------------------------------------------------
# Artifact parsing
# ---------------------------------------------------------------------------


def read_json(path: Path) -> Any:
    """Read and decode a JSON artifact.

    Raises:
        AssetLoadError: If the file is missing, unreadable, or not JSON.
    """
    path = Path(path)
    if not path.is_file():
        raise AssetLoadError("artifact not found", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise AssetLoadError(f"invalid JSON at line {exc.lineno}: {exc.msg}", path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise AssetLoadError(f"cannot read artifact: {exc}", path) from exc


def parse_vocabulary(data: Any, path: Optional[Path] = None) -> tuple[str, ...]:
    """Validate a decoded vocabulary artifact."""
    if not isinstance(data, list):
        raise AssetLoadError("vocabulary must be a JSON array of strings", path)
    if not data:
        raise AssetLoadError("vocabulary is empty", path)
    for position, term in enumerate(data):
        if not isinstance(term, str) or not term:
            raise AssetLoadError(
                f"vocabulary entry {position} is not a non-empty string: {term!r}", path
            )
    return tuple(data)


def parse_weights(data: Any, path: Optional[Path] = None) -> ModelWeights:
    """Validate a decoded model artifact.

    Accepts a flat array ``[w_0, ..., w_{V-1}, bias]``, an object
    ``{"weights": [...], "bias": b}``, or a serialized one-vs-rest model
    ``{"classifiers": [{"weights": [[w_0], ...]}, ...]}``. The latter has no
    intercept, so its bias is ``0.0``.
    """
    if isinstance(data, Mapping) and "classifiers" in data:
        values = _one_vs_rest_weights(data["classifiers"], path) + [0.0]
    elif isinstance(data, Mapping):
        if "weights" not in data or "bias" not in data:
            raise AssetLoadError("model object must have 'weights' and 'bias' keys", path)
        weights, bias = data["weights"], data["bias"]
        if not isinstance(weights, list):
            raise AssetLoadError("model 'weights' must be a JSON array", path)
        values = list(weights) + [bias]
    elif isinstance(data, list):
        values = data
    else:
        raise AssetLoadError("model must be a JSON array or object", path)

    for position, value in enumerate(values):
        if not _is_number(value):
            raise AssetLoadError(
                f"model weight {position} is not a finite number: {value!r}", path
            )
    if len(values) < 2:
        raise AssetLoadError("model needs at least one feature weight and a bias", path)
    return ModelWeights(tuple(values))


def _one_vs_rest_weights(classifiers: Any, path: Optional[Path]) -> list:
    """Feature weights of the fake-news (class ``1``) scorer.

    A two-class model stores one scorer per class; a single scorer is the
    positive class already.
    """
    if not isinstance(classifiers, list) or not 1 <= len(classifiers) <= 2:
        raise AssetLoadError("model 'classifiers' must hold one or two binary classifiers", path)
    scorer = classifiers[-1]
    if not isinstance(scorer, Mapping) or not isinstance(scorer.get("weights"), list):
        raise AssetLoadError("classifier entry must have a 'weights' array", path)

    # weights are stored as a column matrix: [[w_0], [w_1], ...]
    weights = []
    for row in scorer["weights"]:
        if isinstance(row, list):
            if len(row) != 1:
                raise AssetLoadError("classifier weights must be a single column", path)
            row = row[0]
        weights.append(row)
    return weights


def parse_corpus(data: Any, path: Optional[Path] = None) -> CorpusStatistics:
    """Validate a decoded TF-IDF state artifact and rebuild corpus statistics."""
    if isinstance(data, Mapping):
        records = data.get("documents", data.get("savedDocuments"))
        if records is None:
            idf = data.get("idf")
            if isinstance(idf, Mapping):
                try:
                    return CorpusStatistics.from_idf_table(idf)
                except ValueError as exc:
                    raise AssetLoadError(str(exc), path) from exc
            raise AssetLoadError(
                "tfidf state has neither 'documents' nor an 'idf' table", path
            )
    else:
        records = data

    if not isinstance(records, list):
        raise AssetLoadError("tfidf state documents must be a JSON array", path)
    try:
        corpus = CorpusStatistics.from_records(records)
    except ValueError as exc:
        raise AssetLoadError(str(exc), path) from exc
    if corpus.document_count < 1:
        raise AssetLoadError("tfidf state contains no documents", path)
    return corpus


def load_assets(settings: Optional[Settings] = None) -> AssetStore:
    """Read, validate and freeze the three model artifacts.

    The files are read and parsed on a small thread pool; the store is built
    only after all three succeed.

    Args:
        settings: Artifact locations and IDF formula. Defaults to
            ``Settings()``.

    Returns:
        A validated, immutable AssetStore.

    Raises:
        AssetLoadError: If any artifact is missing, malformed, or the
            artifacts disagree on the vocabulary size.
    """
    settings = settings or Settings()
    started = time.perf_counter()
    logger.info(
        "Loading model assets: model=%s tfidf_state=%s vocabulary=%s",
        settings.model_path,
        settings.tfidf_state_path,
        settings.vocabulary_path,
    )

    def _load(parser, path: Path):
        data = read_json(path)
        try:
            return parser(data, path)
        except (ValueError, TypeError, OverflowError) as exc:
            raise AssetLoadError(f"malformed artifact: {exc}", path) from exc

    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="asset-loader") as pool:
        weights_future = pool.submit(_load, parse_weights, settings.model_path)
        corpus_future = pool.submit(_load, parse_corpus, settings.tfidf_state_path)
        vocab_future = pool.submit(_load, parse_vocabulary, settings.vocabulary_path)

        try:
            weights = weights_future.result()
            corpus = corpus_future.result()
            vocabulary = vocab_future.result()
        except AssetLoadError:
            logger.exception("Failed to load model assets")
            raise

    try:
        store = AssetStore(
            vocabulary=vocabulary,
            weights=weights,
            corpus=corpus,
            idf_formula=settings.idf_formula,
        )
    except AssetLoadError:
        logger.exception("Model assets are inconsistent")
        raise

    logger.info(
        "Loaded model assets in %.3fs: vocabulary=%d documents=%d idf=%s",
        time.perf_counter() - started,
        store.vocabulary_size,
        store.corpus.document_count,
        store.summary()["idf_source"],
    )
    return store

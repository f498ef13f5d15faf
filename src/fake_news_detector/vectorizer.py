"""TF-IDF feature extraction against the frozen training vocabulary."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Mapping

from .assets import AssetStore


@dataclass(frozen=True)
class TfidfVectorizer:
    """Serve-time TF-IDF vectorizer.

    Weights are ``tf * idf`` where ``tf`` is the raw count of a term in the
    preprocessed document and ``idf`` comes from the training corpus. Terms
    outside the vocabulary are ignored. IDF values for every vocabulary
    position are computed once at construction; ``transform`` only reads
    them, so the corpus statistics are never touched by a request.

    Example::

        vectorizer = TfidfVectorizer.from_assets(store)
        vector = vectorizer.transform("shock miracl cure")
        len(vector) == store.vocabulary_size  # True
    """

    term_index: Mapping[str, int]
    idf: tuple[float, ...]
    _size: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.idf) != len(self.term_index):
            raise ValueError(
                f"idf has {len(self.idf)} values for {len(self.term_index)} vocabulary terms"
            )
        object.__setattr__(self, "idf", tuple(self.idf))
        object.__setattr__(self, "_size", len(self.idf))

    @classmethod
    def from_assets(cls, store: AssetStore) -> "TfidfVectorizer":
        """Precompute per-position IDF from the store's corpus statistics."""
        idf = tuple(store.corpus.idf(term, store.idf_formula) for term in store.vocabulary)
        return cls(term_index=store.term_index, idf=idf)

    @property
    def size(self) -> int:
        """Dimensionality of the produced vectors (the vocabulary size)."""
        return self._size

    def term_counts(self, document: str) -> Counter[str]:
        """Raw in-document counts of the whitespace-separated terms."""
        return Counter(document.split())

    def transform(self, document: str) -> list[float]:
        """Vectorize one preprocessed document.

        Args:
            document: Space-joined stems as produced by ``TextPreprocessor``.

        Returns:
            Dense list of ``size`` TF-IDF weights, ``0.0`` where no
            vocabulary term occurred.
        """
        vector = [0.0] * self._size
        for term, count in self.term_counts(document).items():
            position = self.term_index.get(term)
            if position is None:
                continue
            vector[position] = count * self.idf[position]
        return vector

    def transform_batch(self, documents: list[str]) -> list[list[float]]:
        return [self.transform(doc) for doc in documents]


"""Data models for fake news classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DECISION_THRESHOLD = 0.5


class ServiceState(str, Enum):
    """Lifecycle states of the inference service."""

    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class Label(int, Enum):
    """Binary verdict produced by the classifier."""

    REAL = 0
    FAKE = 1


@dataclass(frozen=True)
class ClassificationResult:
    """Verdict for a single document.

    Attributes:
        label: ``1`` when the document is classified as fake news, else ``0``.
        probability: Model probability of the positive (fake) class.
    """

    label: int
    probability: float

    @classmethod
    def from_probability(cls, probability: float) -> "ClassificationResult":
        label = Label.FAKE if probability >= DECISION_THRESHOLD else Label.REAL
        return cls(label=int(label), probability=probability)

    @property
    def is_fake(self) -> bool:
        return self.label == Label.FAKE

    @property
    def verdict(self) -> str:
        """Human-readable name of the label."""
        return Label(self.label).name.lower()

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "probability": self.probability,
        }

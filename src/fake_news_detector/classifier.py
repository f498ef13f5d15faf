"""Logistic regression scoring of TF-IDF feature vectors."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .assets import AssetStore, ModelWeights
from .models import ClassificationResult


def sigmoid(z: float) -> float:
    """Logistic function ``1 / (1 + e^-z)`` that never overflows.

    ``math.exp`` is only ever called with a non-positive argument.
    """
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    ez = math.exp(z)
    return ez / (1.0 + ez)


@dataclass(frozen=True)
class LogisticRegressionClassifier:
    """Binary classifier over dense feature vectors.

    Args:
        weights: ``V`` feature weights followed by the bias term.
    """

    weights: ModelWeights

    @classmethod
    def from_assets(cls, store: AssetStore) -> "LogisticRegressionClassifier":
        return cls(weights=store.weights)

    @property
    def size(self) -> int:
        """Number of features the model expects."""
        return len(self.weights) - 1

    def decision_function(self, vector: list[float]) -> float:
        """Linear score ``w . x + b``.

        Raises:
            ValueError: If the vector length differs from the model size.
        """
        if len(vector) != self.size:
            raise ValueError(
                f"feature vector has {len(vector)} values, model expects {self.size}"
            )
        # zip stops at the vector length, so the trailing bias is skipped
        z = 0.0
        for x, w in zip(vector, self.weights.values):
            z += x * w
        return z + self.weights.bias

    def predict_proba(self, vector: list[float]) -> float:
        """Probability that the document is fake news."""
        return sigmoid(self.decision_function(vector))

    def predict(self, vector: list[float]) -> ClassificationResult:
        """Probability and thresholded label for one vector."""
        return ClassificationResult.from_probability(self.predict_proba(vector))

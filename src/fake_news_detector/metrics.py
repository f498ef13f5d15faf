"""Evaluation of the served model against labeled examples.

Reports the same figures the training scripts print after a run (accuracy,
precision, recall, F1 and the confusion counts) so a deployed artifact set can
be checked against a held-out file without retraining anything.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable


@dataclass
class BinaryMetrics:
    """Binary classification metrics with fake news (``1``) as the positive class."""

    tp: int = 0
    tn: int = 0
    fp: int = 0
    fn: int = 0

    @property
    def total(self) -> int:
        return self.tp + self.tn + self.fp + self.fn

    @property
    def accuracy(self) -> float:
        return (self.tp + self.tn) / self.total if self.total else 0.0

    @property
    def precision(self) -> float:
        return self.tp / (self.tp + self.fp) if (self.tp + self.fp) else 0.0

    @property
    def recall(self) -> float:
        return self.tp / (self.tp + self.fn) if (self.tp + self.fn) else 0.0

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if (p + r) else 0.0

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "precision": round(self.precision, 4),
            "recall": round(self.recall, 4),
            "f1": round(self.f1, 4),
            "tp": self.tp,
            "tn": self.tn,
            "fp": self.fp,
            "fn": self.fn,
            "total": self.total,
        }

    def summary(self) -> str:
        """Human-readable summary of metrics."""
        return "\n".join([
            f"Accuracy:  {self.accuracy:.2%}",
            f"Precision: {self.precision:.2%}",
            f"Recall:    {self.recall:.2%}",
            f"F1-score:  {self.f1:.2%}",
            f"TP: {self.tp}, TN: {self.tn}, FP: {self.fp}, FN: {self.fn}",
        ])


def compute_metrics(y_true: Iterable[int], y_pred: Iterable[int]) -> BinaryMetrics:
    """Confusion counts for ``0``/``1`` labels.

    Raises:
        ValueError: If the sequences differ in length or hold labels other
            than ``0`` and ``1``.
    """
    y_true = list(y_true)
    y_pred = list(y_pred)
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    metrics = BinaryMetrics()
    for true, pred in zip(y_true, y_pred):
        if true not in (0, 1) or pred not in (0, 1):
            raise ValueError(f"labels must be 0 or 1, got {true!r} / {pred!r}")
        if true == 1 and pred == 1:
            metrics.tp += 1
        elif true == 0 and pred == 0:
            metrics.tn += 1
        elif true == 0 and pred == 1:
            metrics.fp += 1
        else:
            metrics.fn += 1
    return metrics


def load_labeled_jsonl(path: str | Path) -> tuple[list[str], list[int]]:
    """Read ``{"text": ..., "label": 0|1}`` lines.

    Blank lines are skipped.

    Raises:
        ValueError: If a line is not JSON or lacks a string ``text`` and a
            ``0``/``1`` ``label``.
    """
    texts: list[str] = []
    labels: list[int] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"line {lineno}: invalid JSON ({exc.msg})") from exc
            if not isinstance(record, dict):
                raise ValueError(f"line {lineno}: expected an object")
            text, label = record.get("text"), record.get("label")
            if not isinstance(text, str):
                raise ValueError(f"line {lineno}: 'text' must be a string")
            if isinstance(label, bool) or label not in (0, 1):
                raise ValueError(f"line {lineno}: 'label' must be 0 or 1")
            texts.append(text)
            labels.append(int(label))
    return texts, labels


def evaluate(service, texts: list[str], labels: list[int]) -> BinaryMetrics:
    """Score ``texts`` with a ready ``InferenceService`` and compare to ``labels``."""
    results = service.classify_batch(texts)
    return compute_metrics(labels, [r.label for r in results])

"""Fake News Detector -- TF-IDF + logistic regression fake news classifier."""

__version__ = "0.1.0"

from .assets import AssetStore, CorpusStatistics, ModelWeights, load_assets
from .classifier import LogisticRegressionClassifier, sigmoid
from .config import IdfFormula, Settings
from .errors import (
    AssetLoadError,
    FakeNewsDetectorError,
    InvalidInputError,
    NotReadyError,
)
from .metrics import BinaryMetrics, compute_metrics
from .models import ClassificationResult, Label, ServiceState
from .preprocessing import STOP_WORDS, TextPreprocessor, preprocess
from .service import InferenceService
from .vectorizer import TfidfVectorizer

__all__ = [
    # Core
    "InferenceService",
    "ClassificationResult",
    "Label",
    "ServiceState",
    # Assets
    "AssetStore",
    "CorpusStatistics",
    "ModelWeights",
    "load_assets",
    # Pipeline stages
    "TextPreprocessor",
    "preprocess",
    "STOP_WORDS",
    "TfidfVectorizer",
    "LogisticRegressionClassifier",
    "sigmoid",
    # Configuration
    "Settings",
    "IdfFormula",
    # Errors
    "FakeNewsDetectorError",
    "AssetLoadError",
    "InvalidInputError",
    "NotReadyError",
    # Evaluation
    "BinaryMetrics",
    "compute_metrics",
]

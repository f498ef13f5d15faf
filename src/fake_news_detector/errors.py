"""Exception hierarchy for the fake news detector.

``AssetLoadError`` is raised once, at startup, and leaves the service in the
``failed`` state. ``InvalidInputError`` and ``NotReadyError`` are raised per
request and never change service state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class FakeNewsDetectorError(Exception):
    """Base class for all errors raised by this package."""


class AssetLoadError(FakeNewsDetectorError):
    """A model artifact is missing, unreadable, or fails validation.

    Attributes:
        path: The artifact that failed, when the failure is tied to one file.
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class InvalidInputError(FakeNewsDetectorError, ValueError):
    """The text handed to the classifier is empty, not a string, or too long."""


class NotReadyError(FakeNewsDetectorError, RuntimeError):
    """The service was asked to classify before its assets finished loading."""

# motionfeatures/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all core-domain exceptions."""


# ---- Validation / construction errors ----
class InvalidReadingStream(CoreError):
    """Raised when a ReadingStream is constructed with invalid inputs."""


class InvalidWindow(CoreError):
    """Raised when a Window is constructed with invalid inputs."""


class InvalidFeatureTable(CoreError):
    """Raised when a FeatureRecord / FeatureTable is constructed with invalid inputs."""


class InvalidConfiguration(CoreError):
    """Raised when window length, overlap or filter settings are out of range."""


# ---- Contract violations between coordinated pipelines ----
class WindowMismatch(CoreError, ValueError):
    """Raised when results built with different windowing are combined."""

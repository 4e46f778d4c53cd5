"""Exceptions raised by the spiral-arm analysis core.

Every error subclasses ``ValueError``.
"""

from __future__ import annotations


class ArmAnalysisError(ValueError):
    """Base class for invalid inputs to the arm analysis pipeline."""


class InvalidAngleDelta(ArmAnalysisError):
    """Raised when angle_delta is non-positive, non-finite, or normalizes to 0."""

    def __init__(self, angle_delta: float, reason: str = "must be a finite value > 0"):
        self.angle_delta = angle_delta
        super().__init__(f"angle_delta {reason}, got {angle_delta!r}")


class InvalidExtensionLength(ArmAnalysisError):
    """Raised when asked to extend a prime prefix to fewer entries than it has."""

    def __init__(self, target_length: int, known_length: int):
        self.target_length = target_length
        self.known_length = known_length
        super().__init__(
            f"target_length must be >= {known_length} (number of known primes), "
            f"got {target_length}"
        )


class PredictionCountOutOfRange(ArmAnalysisError):
    """Raised when a prediction count falls outside the accepted range."""

    def __init__(self, count: int, minimum: int = 1, maximum: int | None = None):
        self.count = count
        self.minimum = minimum
        self.maximum = maximum
        if maximum is None:
            bounds = f">= {minimum}"
        else:
            bounds = f"in [{minimum}, {maximum}]"
        super().__init__(f"prediction_count must be {bounds}, got {count}")


class InvalidGroupingPolicy(ArmAnalysisError):
    """Raised for an unknown grouping policy name or bad policy options."""

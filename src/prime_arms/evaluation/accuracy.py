"""Scoring of arm predictions against the actual continuation of the primes.

Ground truth comes from extending the known primes far enough to cover the
furthest prediction. A prediction counts as correct when it lands within
``max(0.3, 5% of the mean radius)`` of the true position.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from prime_arms.analysis.arms import SpiralArm
from prime_arms.core.positions import RADIUS_SCALE, position_at, validate_angle_delta
from prime_arms.core.sieve import extend_primes

DEFAULT_MIN_PRIMES = 10
DEFAULT_MIN_THRESHOLD = 0.3
DEFAULT_RELATIVE_THRESHOLD = 0.05


@dataclass(frozen=True)
class PredictionComparison:
    """One prediction set against the true prime at its index.

    Attributes:
        arm_index: Arm the prediction belongs to.
        step_ahead: Rotations beyond the arm's last known point.
        predicted_index: Sequence index of the prediction.
        predicted_x: Predicted x coordinate.
        predicted_y: Predicted y coordinate.
        actual_prime: True prime at predicted_index.
        actual_x: True x coordinate.
        actual_y: True y coordinate.
        distance: Predicted-to-actual distance.
        correct: Whether distance is below the correctness threshold.
    """
    arm_index: int
    step_ahead: int
    predicted_index: int
    predicted_x: float
    predicted_y: float
    actual_prime: int
    actual_x: float
    actual_y: float
    distance: float
    correct: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AccuracyReport:
    """Aggregate prediction accuracy.

    Attributes:
        total_predictions: Predictions compared with ground truth.
        correct_predictions: Predictions within the distance threshold.
        average_distance: Mean predicted-to-actual distance.
        accuracy_percent: Share of correct predictions, 0-100.
        comparisons: Per-prediction comparisons the totals were built from.
    """
    total_predictions: int = 0
    correct_predictions: int = 0
    average_distance: float = 0.0
    accuracy_percent: float = 0.0
    comparisons: tuple[PredictionComparison, ...] = ()

    @classmethod
    def empty(cls) -> "AccuracyReport":
        return cls()

    @classmethod
    def from_comparisons(cls, comparisons: Sequence[PredictionComparison]) -> "AccuracyReport":
        """Aggregate per-prediction comparisons into a report."""
        if not comparisons:
            return cls.empty()

        total = len(comparisons)
        correct = sum(1 for c in comparisons if c.correct)
        return cls(
            total_predictions=total,
            correct_predictions=correct,
            average_distance=sum(c.distance for c in comparisons) / total,
            accuracy_percent=100 * correct / total,
            comparisons=tuple(comparisons),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'total_predictions': self.total_predictions,
            'correct_predictions': self.correct_predictions,
            'average_distance': self.average_distance,
            'accuracy_percent': self.accuracy_percent,
            'comparisons': [c.to_dict() for c in self.comparisons],
        }

    def summary(self) -> str:
        """Get summary string."""
        return "\n".join([
            "Prediction accuracy",
            f"  Predictions scored: {self.total_predictions:,}",
            f"  Correct: {self.correct_predictions:,}",
            f"  Average distance: {self.average_distance:.4f}",
            f"  Accuracy: {self.accuracy_percent:.2f}%",
        ])


def correctness_threshold(
    predicted_radius: float,
    actual_radius: float,
    min_threshold: float = DEFAULT_MIN_THRESHOLD,
    relative_threshold: float = DEFAULT_RELATIVE_THRESHOLD,
) -> float:
    """Distance under which a prediction counts as correct."""
    mean_radius = (predicted_radius + actual_radius) / 2
    return max(min_threshold, mean_radius * relative_threshold)


def is_correct_prediction(
    distance: float,
    predicted_radius: float,
    actual_radius: float,
    min_threshold: float = DEFAULT_MIN_THRESHOLD,
    relative_threshold: float = DEFAULT_RELATIVE_THRESHOLD,
) -> bool:
    """True if distance is strictly below the correctness threshold."""
    threshold = correctness_threshold(
        predicted_radius, actual_radius, min_threshold, relative_threshold
    )
    return distance < threshold


def compare_predictions(
    primes: Sequence[int],
    angle_delta: float,
    arms: Sequence[SpiralArm],
    min_primes: int = DEFAULT_MIN_PRIMES,
    min_threshold: float = DEFAULT_MIN_THRESHOLD,
    relative_threshold: float = DEFAULT_RELATIVE_THRESHOLD,
    scale: float = RADIUS_SCALE,
) -> list[PredictionComparison]:
    """Set each arm prediction against the true prime at its index.

    Args:
        primes: Known ascending primes the arms were detected from.
        angle_delta: Angle step in degrees.
        arms: Arms carrying predictions.
        min_primes: Below this many known primes nothing is compared.
        min_threshold: Absolute floor of the correctness threshold.
        relative_threshold: Fraction of the mean radius used as threshold.
        scale: Radius per unit of prime value.

    Returns:
        One comparison per prediction, in arm then step order; empty if
        there are too few primes or no predictions.

    Raises:
        InvalidAngleDelta: If angle_delta is invalid.
    """
    validate_angle_delta(angle_delta)

    if len(primes) < min_primes or not arms:
        return []

    predictions = [q for arm in arms for q in arm.predictions]
    if not predictions:
        return []

    max_predicted_index = max(q.predicted_index for q in predictions)
    ground_truth = extend_primes(primes, max(len(primes), max_predicted_index + 1))

    comparisons = []
    for arm in arms:
        for prediction in arm.predictions:
            if not 0 <= prediction.predicted_index < len(ground_truth):
                continue

            actual = position_at(
                prediction.predicted_index,
                ground_truth[prediction.predicted_index],
                angle_delta,
                scale=scale,
            )
            distance = math.hypot(prediction.x - actual.x, prediction.y - actual.y)

            comparisons.append(PredictionComparison(
                arm_index=arm.arm_index,
                step_ahead=prediction.step_ahead,
                predicted_index=prediction.predicted_index,
                predicted_x=prediction.x,
                predicted_y=prediction.y,
                actual_prime=actual.prime,
                actual_x=actual.x,
                actual_y=actual.y,
                distance=distance,
                correct=is_correct_prediction(
                    distance,
                    prediction.radius,
                    actual.radius,
                    min_threshold,
                    relative_threshold,
                ),
            ))

    return comparisons


def score_predictions(
    primes: Sequence[int],
    angle_delta: float,
    arms: Sequence[SpiralArm],
    min_primes: int = DEFAULT_MIN_PRIMES,
    min_threshold: float = DEFAULT_MIN_THRESHOLD,
    relative_threshold: float = DEFAULT_RELATIVE_THRESHOLD,
    scale: float = RADIUS_SCALE,
) -> AccuracyReport:
    """Compare arm predictions with the true continuation of the primes.

    Takes the same arguments as compare_predictions and aggregates its
    comparisons, which are kept on the report.

    Returns:
        AccuracyReport; all zeros if there are too few primes or no arms.

    Raises:
        InvalidAngleDelta: If angle_delta is invalid.
    """
    comparisons = compare_predictions(
        primes,
        angle_delta,
        arms,
        min_primes=min_primes,
        min_threshold=min_threshold,
        relative_threshold=relative_threshold,
        scale=scale,
    )
    return AccuracyReport.from_comparisons(comparisons)

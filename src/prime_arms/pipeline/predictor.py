"""Extrapolation of spiral arms.

Each arm is continued one rotation at a time. The prime value of the next
point is projected from the recent gaps between consecutive arm primes: the
mean gap is used as a starting step and the change between the first and last
gap in the window as a constant per-step acceleration. This is a plain
second-difference projection meant for drawing, not a prime estimator - it is
expected to miss most actual primes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from prime_arms.analysis.arms import SpiralArm
from prime_arms.core.errors import PredictionCountOutOfRange
from prime_arms.core.positions import RADIUS_SCALE, PrimePosition, round_half_up

DEFAULT_GAP_WINDOW = 5


@dataclass(frozen=True)
class PredictedPoint:
    """A projected point on a spiral arm.

    Attributes:
        step_ahead: Rotations beyond the arm's last known point (1-based).
        predicted_index: Sequence index the point would occupy.
        x: Projected x coordinate.
        y: Projected y coordinate.
        predicted_prime_value: Projected (unrounded) prime value.
    """
    step_ahead: int
    predicted_index: int
    x: float
    y: float
    predicted_prime_value: float

    @property
    def predicted_prime(self) -> int:
        """Projected prime value rounded to the nearest integer."""
        return round_half_up(self.predicted_prime_value)

    @property
    def radius(self) -> float:
        return math.hypot(self.x, self.y)

    def __repr__(self):
        return (f"PredictedPoint(step={self.step_ahead}, index={self.predicted_index}, "
                f"prime~{self.predicted_prime_value:.2f})")


@dataclass(frozen=True)
class VectorPrediction:
    """Next point of an arm extrapolated from its last three positions."""
    x: float
    y: float
    predicted_prime: int


def gap_trend(primes: Sequence[int], window: int = DEFAULT_GAP_WINDOW) -> tuple[float, float]:
    """Mean gap and gap acceleration over the last ``window`` primes.

    Args:
        primes: Arm prime values, innermost first (at least 2).
        window: Number of trailing primes to look at.

    Returns:
        Tuple of (avg_gap, gap_acceleration). The acceleration is 0 when
        only one gap is available.
    """
    if len(primes) < 2:
        raise ValueError(f"Need at least 2 primes to measure gaps, got {len(primes)}")
    if window < 2:
        raise ValueError(f"window must be >= 2, got {window}")

    recent = primes[-min(window, len(primes)):]
    gaps = [recent[i] - recent[i - 1] for i in range(1, len(recent))]

    avg_gap = sum(gaps) / len(gaps)
    if len(gaps) > 1:
        gap_acceleration = (gaps[-1] - gaps[0]) / (len(gaps) - 1)
    else:
        gap_acceleration = 0.0

    return avg_gap, gap_acceleration


def predict_arm(
    points: Sequence[PrimePosition],
    steps_per_rotation: int,
    angle_delta_rad: float,
    prediction_count: int,
    window: int = DEFAULT_GAP_WINDOW,
    scale: float = RADIUS_SCALE,
) -> tuple[PredictedPoint, ...]:
    """Project the next points of one arm.

    Args:
        points: Arm points, innermost first.
        steps_per_rotation: Index steps per full turn.
        angle_delta_rad: Angle step in radians.
        prediction_count: Number of points to project (>= 1).
        window: Trailing points used to measure the gap trend.
        scale: Radius per unit of prime value.

    Returns:
        Predictions ordered by step_ahead; empty if the arm has fewer than
        2 points.

    Raises:
        PredictionCountOutOfRange: If prediction_count < 1.
    """
    if prediction_count < 1:
        raise PredictionCountOutOfRange(prediction_count)

    if len(points) < 2:
        return ()

    last = points[-1]
    avg_gap, gap_acceleration = gap_trend([p.prime for p in points], window)

    predictions = []
    value = float(last.prime)
    current_gap = avg_gap

    for step in range(1, prediction_count + 1):
        current_gap += gap_acceleration
        value += current_gap

        predicted_index = last.index + step * steps_per_rotation
        angle = predicted_index * angle_delta_rad
        radius = scale * value

        predictions.append(PredictedPoint(
            step_ahead=step,
            predicted_index=predicted_index,
            x=radius * math.cos(angle),
            y=radius * math.sin(angle),
            predicted_prime_value=value,
        ))

    return tuple(predictions)


def attach_predictions(
    arms: Sequence[SpiralArm],
    steps_per_rotation: int,
    angle_delta_rad: float,
    prediction_count: int,
    window: int = DEFAULT_GAP_WINDOW,
    scale: float = RADIUS_SCALE,
) -> list[SpiralArm]:
    """Return copies of the arms carrying their projected continuations."""
    return [
        arm.with_predictions(predict_arm(
            arm.points,
            steps_per_rotation,
            angle_delta_rad,
            prediction_count,
            window=window,
            scale=scale,
        ))
        for arm in arms
    ]


def extrapolate_by_vector(points: Sequence[PrimePosition]) -> VectorPrediction | None:
    """Continue an arm by constant change of its last displacement vector.

    With the last three points p1, p2, p3 and displacements v1 = p2 - p1,
    v2 = p3 - p2, the next point is p3 + v2 + (v2 - v1). The prime value is
    projected the same way from the last two prime gaps.

    Returns:
        VectorPrediction, or None if fewer than 3 points are given.
    """
    if len(points) < 3:
        return None

    p1, p2, p3 = points[-3], points[-2], points[-1]

    v1x, v1y = p2.x - p1.x, p2.y - p1.y
    v2x, v2y = p3.x - p2.x, p3.y - p2.y

    next_x = p3.x + v2x + (v2x - v1x)
    next_y = p3.y + v2y + (v2y - v1y)

    gap1 = p2.prime - p1.prime
    gap2 = p3.prime - p2.prime
    next_prime = p3.prime + gap2 + (gap2 - gap1)

    return VectorPrediction(x=next_x, y=next_y, predicted_prime=int(next_prime))

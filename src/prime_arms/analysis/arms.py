"""Spiral arm detection.

A spiral arm is a set of primes that keep coming back to the same angular
sector on successive turns of the spiral. Three grouping policies are
available. They produce different memberships for the same input:

- ``residue``: bucket by ``index mod steps_per_rotation``. An arm is a residue
  class of sequence indices.
- ``angular``: cluster by closeness of the absolute polar angle to a seed
  point, within a fixed tolerance.
- ``heading``: trace runs of points whose segment direction stays roughly
  constant, i.e. points that line up on a straight-ish ray.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, ClassVar, Sequence

from prime_arms.core.errors import InvalidGroupingPolicy
from prime_arms.core.positions import TWO_PI, PrimePosition, shortest_arc

if TYPE_CHECKING:
    from prime_arms.pipeline.predictor import PredictedPoint


@dataclass(frozen=True)
class SpiralArm:
    """A detected spiral arm.

    Attributes:
        arm_index: Residue class for residue arms, otherwise the ordinal of
            the arm in detection order.
        points: Member positions, innermost first.
        predictions: Extrapolated continuation, ordered by step_ahead.
    """
    arm_index: int
    points: tuple[PrimePosition, ...]
    predictions: tuple["PredictedPoint", ...] = ()

    @property
    def primes(self) -> list[int]:
        return [p.prime for p in self.points]

    @property
    def indices(self) -> list[int]:
        return [p.index for p in self.points]

    @property
    def last_point(self) -> PrimePosition:
        return self.points[-1]

    def with_predictions(self, predictions: Sequence["PredictedPoint"]) -> "SpiralArm":
        """Return a copy of this arm carrying the given predictions."""
        return replace(self, predictions=tuple(predictions))

    def to_dict(self) -> dict:
        return {
            'arm_index': self.arm_index,
            'points': [
                {'index': p.index, 'prime': p.prime, 'x': p.x, 'y': p.y}
                for p in self.points
            ],
            'predictions': [
                {
                    'step_ahead': q.step_ahead,
                    'predicted_index': q.predicted_index,
                    'x': q.x,
                    'y': q.y,
                    'predicted_prime_value': q.predicted_prime_value,
                }
                for q in self.predictions
            ],
        }


class GroupingPolicy:
    """Interface for arm grouping strategies.

    Subclasses set ``name`` and ``default_min_points`` and implement
    ``group``.
    """

    name: ClassVar[str] = ""
    default_min_points: ClassVar[int] = 2

    def __init__(self, min_points: int | None = None):
        if min_points is None:
            min_points = self.default_min_points
        if min_points < 1:
            raise InvalidGroupingPolicy(f"min_points must be >= 1, got {min_points}")
        self.min_points = min_points

    def group(
        self,
        positions: Sequence[PrimePosition],
        steps_per_rotation: int,
    ) -> list[SpiralArm]:
        """Partition positions into arms.

        Args:
            positions: Mapped positions in ascending index order.
            steps_per_rotation: Index steps per full turn.

        Returns:
            Arms without predictions.
        """
        raise NotImplementedError

    def describe(self) -> str:
        return f"{self.name} (min_points={self.min_points})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(min_points={self.min_points})"


class ResidueClassGrouping(GroupingPolicy):
    """Bucket points by ``index mod steps_per_rotation``.

    Each residue class is one arm. Input order is preserved inside a bucket,
    so points stay in ascending index (and radius) order. When
    ``360 / angle_delta`` is not an integer the rounded step count makes
    buckets drift slowly off their sector; that is accepted as is.
    """

    name = "residue"
    default_min_points = 2

    def group(self, positions, steps_per_rotation):
        if steps_per_rotation < 1:
            raise InvalidGroupingPolicy(
                f"steps_per_rotation must be >= 1, got {steps_per_rotation}"
            )

        buckets: dict[int, list[PrimePosition]] = {}
        for pos in positions:
            buckets.setdefault(pos.index % steps_per_rotation, []).append(pos)

        arms = [
            SpiralArm(arm_index=arm_index, points=tuple(points))
            for arm_index, points in buckets.items()
            if len(points) >= self.min_points
        ]
        arms.sort(key=lambda arm: arm.arm_index)
        return arms


class AngularToleranceGrouping(GroupingPolicy):
    """Cluster points whose polar angle is close to a seed point's angle.

    Points are scanned in index order. Every point not yet claimed seeds a
    cluster that claims all unclaimed points within ``tolerance`` radians of
    it (shortest arc, mod 2*pi). Claimed points stay claimed even when their
    cluster is too small to keep.
    """

    name = "angular"
    default_min_points = 3

    def __init__(self, min_points: int | None = None, tolerance: float = 0.1):
        super().__init__(min_points)
        if not math.isfinite(tolerance) or tolerance <= 0:
            raise InvalidGroupingPolicy(f"tolerance must be > 0, got {tolerance}")
        self.tolerance = tolerance

    def group(self, positions, steps_per_rotation):
        used = [False] * len(positions)
        arms = []

        for i, seed in enumerate(positions):
            if used[i]:
                continue

            seed_angle = seed.angle % TWO_PI
            members = []
            for j in range(i, len(positions)):
                if used[j]:
                    continue
                if shortest_arc(positions[j].angle, seed_angle) <= self.tolerance:
                    used[j] = True
                    members.append(positions[j])

            if len(members) >= self.min_points:
                members.sort(key=lambda p: (p.radius, p.index))
                arms.append(SpiralArm(arm_index=len(arms), points=tuple(members)))

        return arms

    def describe(self) -> str:
        return f"{self.name} (min_points={self.min_points}, tolerance={self.tolerance})"

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(min_points={self.min_points}, "
                f"tolerance={self.tolerance})")


class HeadingContinuityGrouping(GroupingPolicy):
    """Trace arms as runs of points with a near-constant heading.

    Starting from each unclaimed point, later unclaimed points are appended
    while the turn between the last segment and the segment to the candidate
    stays within ``max_turn`` radians. The first two points of a run are taken
    unconditionally. Appended points are claimed whether or not the run ends
    up long enough to keep; the start point is claimed only when it is.
    """

    name = "heading"
    default_min_points = 3

    def __init__(self, min_points: int | None = None, max_turn: float = 0.2):
        super().__init__(min_points)
        if not math.isfinite(max_turn) or not 0 < max_turn < math.pi:
            raise InvalidGroupingPolicy(f"max_turn must be in (0, pi), got {max_turn}")
        self.max_turn = max_turn

    def _continues(self, run: list[PrimePosition], candidate: PrimePosition) -> bool:
        if len(run) < 2:
            return True
        last, before = run[-1], run[-2]
        last_heading = math.atan2(last.y - before.y, last.x - before.x)
        heading = math.atan2(candidate.y - last.y, candidate.x - last.x)
        turn = abs(last_heading - heading)
        return turn <= self.max_turn or turn >= TWO_PI - self.max_turn

    def group(self, positions, steps_per_rotation):
        used = [False] * len(positions)
        arms = []

        for i, start in enumerate(positions):
            if used[i]:
                continue

            run = [start]
            for j in range(i + 1, len(positions)):
                if used[j]:
                    continue
                if self._continues(run, positions[j]):
                    run.append(positions[j])
                    used[j] = True

            if len(run) >= self.min_points:
                used[i] = True
                arms.append(SpiralArm(arm_index=len(arms), points=tuple(run)))

        return arms

    def describe(self) -> str:
        return f"{self.name} (min_points={self.min_points}, max_turn={self.max_turn})"

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(min_points={self.min_points}, "
                f"max_turn={self.max_turn})")


GROUPING_POLICIES: dict[str, type[GroupingPolicy]] = {
    ResidueClassGrouping.name: ResidueClassGrouping,
    AngularToleranceGrouping.name: AngularToleranceGrouping,
    HeadingContinuityGrouping.name: HeadingContinuityGrouping,
}


def get_grouping_policy(name: str | GroupingPolicy, **options) -> GroupingPolicy:
    """Build a grouping policy by name.

    Args:
        name: Registered policy name, or an already built policy (returned
            as is).
        **options: Constructor options for the policy, e.g. ``min_points``
            or ``tolerance``. ``None`` values are ignored.

    Returns:
        GroupingPolicy instance.

    Raises:
        InvalidGroupingPolicy: If the name is unknown or options don't apply.
    """
    if isinstance(name, GroupingPolicy):
        return name

    if name not in GROUPING_POLICIES:
        raise InvalidGroupingPolicy(
            f"Unknown grouping policy {name!r}; choose from {sorted(GROUPING_POLICIES)}"
        )

    options = {k: v for k, v in options.items() if v is not None}
    try:
        return GROUPING_POLICIES[name](**options)
    except TypeError as e:
        raise InvalidGroupingPolicy(f"Invalid options for policy {name!r}: {e}") from e


def group_arms(
    positions: Sequence[PrimePosition],
    steps_per_rotation: int,
    policy: str | GroupingPolicy = "residue",
) -> list[SpiralArm]:
    """Group mapped positions into spiral arms with the selected policy."""
    return get_grouping_policy(policy).group(positions, steps_per_rotation)

"""Core prime generation, positions and errors."""

from prime_arms.core.sieve import (
    generate_primes,
    generate_n_primes,
    extend_primes,
)
from prime_arms.core.positions import (
    PrimePosition,
    RADIUS_SCALE,
    map_positions,
    position_at,
    steps_per_rotation,
    angle_delta_radians,
)
from prime_arms.core.errors import (
    ArmAnalysisError,
    InvalidAngleDelta,
    InvalidExtensionLength,
    PredictionCountOutOfRange,
    InvalidGroupingPolicy,
)

__all__ = [
    "generate_primes",
    "generate_n_primes",
    "extend_primes",
    "PrimePosition",
    "RADIUS_SCALE",
    "map_positions",
    "position_at",
    "steps_per_rotation",
    "angle_delta_radians",
    "ArmAnalysisError",
    "InvalidAngleDelta",
    "InvalidExtensionLength",
    "PredictionCountOutOfRange",
    "InvalidGroupingPolicy",
]

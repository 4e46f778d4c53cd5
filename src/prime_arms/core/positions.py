"""Polar placement of a prime sequence.

Prime ``p_i`` at sequence index ``i`` is placed at

    angle  = i * angle_delta (degrees, converted to radians, never wrapped)
    radius = 0.01 * p_i

The angle keeps accumulating past 2*pi, which is what turns a fixed ring of
angular sectors into a spiral: every ``360 / angle_delta`` steps the walk comes
back to the same sector one step further out.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Literal

from prime_arms.core.errors import InvalidAngleDelta

RADIUS_SCALE = 0.01
TWO_PI = 2 * math.pi

AngleNormalization = Literal["none", "modulo"]
ANGLE_NORMALIZATIONS: tuple[str, ...] = ("none", "modulo")


@dataclass(frozen=True)
class PrimePosition:
    """A prime placed on the polar plot.

    Attributes:
        index: Position of the prime in the input sequence (0-based).
        prime: The prime value.
        angle: Polar angle in radians, unwrapped.
        radius: Distance from the origin.
        x: Cartesian x coordinate.
        y: Cartesian y coordinate.
    """
    index: int
    prime: int
    angle: float
    radius: float
    x: float
    y: float


def validate_angle_delta(angle_delta: float) -> float:
    """Return angle_delta as a float, raising InvalidAngleDelta if unusable."""
    try:
        value = float(angle_delta)
    except (TypeError, ValueError):
        raise InvalidAngleDelta(angle_delta, "must be a number") from None

    if not math.isfinite(value) or value <= 0:
        raise InvalidAngleDelta(angle_delta)
    return value


def angle_delta_radians(angle_delta: float) -> float:
    """Convert a validated angle step from degrees to radians."""
    return validate_angle_delta(angle_delta) * math.pi / 180


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def steps_per_rotation(
    angle_delta: float,
    normalization: AngleNormalization = "none",
) -> int:
    """Number of index steps that make up (approximately) one full turn.

    Args:
        angle_delta: Angle step in degrees.
        normalization: ``"none"`` uses angle_delta as given; ``"modulo"``
            reduces it modulo 360 first.

    Returns:
        ``round(360 / angle_delta)``, never less than 1.

    Raises:
        InvalidAngleDelta: If angle_delta is invalid, reduces to 0, or is so
            small that 360 / angle_delta overflows.
        ValueError: If normalization is unknown.
    """
    value = validate_angle_delta(angle_delta)

    if normalization == "modulo":
        value = value % 360.0
        if value == 0:
            raise InvalidAngleDelta(angle_delta, "must not be a multiple of 360")
    elif normalization != "none":
        raise ValueError(
            f"normalization must be one of {ANGLE_NORMALIZATIONS}, got {normalization!r}"
        )

    steps = 360.0 / value
    if not math.isfinite(steps):
        raise InvalidAngleDelta(angle_delta, "is too small to count steps per rotation")
    return max(1, round_half_up(steps))


def shortest_arc(a: float, b: float) -> float:
    """Absolute angular distance between two angles, in [0, pi]."""
    diff = (a - b) % TWO_PI
    return min(diff, TWO_PI - diff)


def position_at(
    index: int,
    prime: int,
    angle_delta: float,
    scale: float = RADIUS_SCALE,
) -> PrimePosition:
    """Place a single prime value at the given sequence index."""
    angle = index * angle_delta_radians(angle_delta)
    radius = scale * prime
    return PrimePosition(
        index=index,
        prime=prime,
        angle=angle,
        radius=radius,
        x=radius * math.cos(angle),
        y=radius * math.sin(angle),
    )


def map_positions(
    primes: Iterable[int],
    angle_delta: float,
    scale: float = RADIUS_SCALE,
) -> list[PrimePosition]:
    """Place every prime of an ordered sequence on the polar plot.

    Args:
        primes: Ascending prime sequence.
        angle_delta: Angle step between consecutive primes, in degrees.
        scale: Radius per unit of prime value.

    Returns:
        One PrimePosition per prime, in input order.

    Raises:
        InvalidAngleDelta: If angle_delta <= 0 or is not finite.
    """
    delta_rad = angle_delta_radians(angle_delta)

    positions = []
    for index, prime in enumerate(primes):
        prime = int(prime)
        angle = index * delta_rad
        radius = scale * prime
        positions.append(PrimePosition(
            index=index,
            prime=prime,
            angle=angle,
            radius=radius,
            x=radius * math.cos(angle),
            y=radius * math.sin(angle),
        ))

    return positions

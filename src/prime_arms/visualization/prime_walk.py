"""Prime walk: a turtle path driven by the prime sequence.

Starting at the origin facing along +x, the walker turns by ``angle_delta``
degrees before each step and then moves forward by ``prime * scale``. After
about ``360 / angle_delta`` steps the heading has come full circle, so vertices
one rotation apart can be compared to see how far the walk drifts per turn.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from prime_arms.core.positions import validate_angle_delta


class PrimeWalk:
    """Turtle walk over a prime sequence.

    Attributes:
        primes: Step lengths, in walk order.
        angle_delta: Turn before each step, in degrees.
        scale: Length per unit of prime value.
    """

    def __init__(self, primes: Sequence[int], angle_delta: float, scale: float = 1.0):
        """Initialize the walk.

        Args:
            primes: Ascending prime sequence.
            angle_delta: Turn per step in degrees.
            scale: Length per unit of prime value.

        Raises:
            InvalidAngleDelta: If angle_delta is invalid.
            ValueError: If scale <= 0.
        """
        if scale <= 0:
            raise ValueError(f"scale must be > 0, got {scale}")

        self.primes = np.asarray(primes, dtype=np.float64)
        self.angle_delta = validate_angle_delta(angle_delta)
        self.scale = scale
        self._vertices: tuple[np.ndarray, np.ndarray] | None = None

    @property
    def bends_per_rotation(self) -> int:
        """Whole steps that fit into one full turn (at least 1)."""
        return max(1, math.floor(360 / self.angle_delta))

    def vertices(self) -> tuple[np.ndarray, np.ndarray]:
        """Walk vertices, starting with the origin.

        Returns:
            Tuple of (x, y) arrays of length len(primes) + 1.
        """
        if self._vertices is not None:
            return self._vertices

        steps = np.arange(1, len(self.primes) + 1, dtype=np.float64)
        headings = np.deg2rad(steps * self.angle_delta)

        dx = self.primes * np.cos(headings) * self.scale
        dy = self.primes * np.sin(headings) * self.scale

        x = np.concatenate(([0.0], np.cumsum(dx)))
        y = np.concatenate(([0.0], np.cumsum(dy)))

        self._vertices = (x, y)
        return self._vertices

    def trace_route(self, start: int = 0) -> np.ndarray:
        """Vertex indices visited when hopping one rotation at a time.

        Args:
            start: First vertex index.

        Returns:
            Indices start, start + B, start + 2B, ... below the vertex count,
            where B is bends_per_rotation.
        """
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        return np.arange(start, len(self.primes) + 1, self.bends_per_rotation)

    def rotation_strides(self, start: int = 0) -> np.ndarray:
        """Distances between traced vertices one rotation apart.

        Args:
            start: First vertex index of the trace.

        Returns:
            Array with one distance per consecutive pair on the trace.
        """
        x, y = self.vertices()
        route = self.trace_route(start)
        if len(route) < 2:
            return np.array([], dtype=np.float64)

        return np.hypot(np.diff(x[route]), np.diff(y[route]))

    def render(self, image_size: int = 500, point_size: int = 1) -> np.ndarray:
        """Rasterize the walk vertices as white points on black.

        Args:
            image_size: Width/height of the image.
            point_size: Radius of each point in pixels.

        Returns:
            2D uint8 array.
        """
        if image_size < 10:
            raise ValueError(f"image_size must be >= 10, got {image_size}")

        x, y = self.vertices()
        image = np.zeros((image_size, image_size), dtype=np.uint8)

        extent = max(np.abs(x).max(), np.abs(y).max(), 1e-10)
        scale = (image_size / 2 - point_size - 5) / extent

        px = (x * scale + image_size / 2).astype(np.int32)
        py = (image_size / 2 - y * scale).astype(np.int32)

        for ix, iy in zip(px, py):
            for dx in range(-point_size + 1, point_size):
                for dy in range(-point_size + 1, point_size):
                    if dx*dx + dy*dy < point_size*point_size:
                        nx, ny = ix + dx, iy + dy
                        if 0 <= nx < image_size and 0 <= ny < image_size:
                            image[ny, nx] = 255

        return image


def walk_rotation_strides(
    primes: Sequence[int],
    angle_delta: float,
    start: int = 0,
    scale: float = 1.0,
) -> np.ndarray:
    """Convenience function returning the per-rotation strides of a walk."""
    return PrimeWalk(primes, angle_delta, scale).rotation_strides(start)

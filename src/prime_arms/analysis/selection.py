"""Picking a spiral arm from a point on the plot."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial import cKDTree

from prime_arms.analysis.arms import SpiralArm


def find_nearest_arm(
    arms: Sequence[SpiralArm],
    x: float,
    y: float,
    max_distance: float = 1.0,
) -> int | None:
    """Find the arm owning the point closest to (x, y).

    Args:
        arms: Detected arms.
        x: Query x coordinate in plot space.
        y: Query y coordinate in plot space.
        max_distance: Points further away than this (strictly) are ignored.

    Returns:
        Position of the matching arm in ``arms``, or None if no arm point
        lies within max_distance.
    """
    coords = []
    owners = []
    for arm_pos, arm in enumerate(arms):
        for point in arm.points:
            coords.append((point.x, point.y))
            owners.append(arm_pos)

    if not coords:
        return None

    tree = cKDTree(np.asarray(coords, dtype=np.float64))
    distance, nearest = tree.query([x, y], k=1)

    if not np.isfinite(distance) or distance >= max_distance:
        return None

    return owners[int(nearest)]

"""Visualization of spiral arm analyses and prime walks."""

from prime_arms.visualization.prime_walk import PrimeWalk, walk_rotation_strides
from prime_arms.visualization.renderer import (
    render_arms,
    save_arms_figure,
    rasterize_arms,
    save_raw_image,
)

__all__ = [
    "PrimeWalk",
    "walk_rotation_strides",
    "render_arms",
    "save_arms_figure",
    "rasterize_arms",
    "save_raw_image",
]

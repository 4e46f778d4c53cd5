"""Rendering of spiral arm analyses.

The analysis core produces plain value objects; this module is one consumer
of them and turns an ArmAnalysis into a matplotlib figure or a raw image.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import matplotlib.figure

    from prime_arms.pipeline.arm_pipeline import ArmAnalysis

ARM_COLOR = "#FFAA00"
SELECTED_ARM_COLOR = "#00FF00"
PREDICTION_COLOR = "#FF0000"
ACTUAL_COLOR = "#00FF00"
ERROR_COLOR = "#FFFF00"


def _extent(analysis: "ArmAnalysis") -> float:
    radii = [p.radius for arm in analysis.arms for p in arm.points]
    radii += [q.radius for arm in analysis.arms for q in arm.predictions]
    radii += [math.hypot(c.actual_x, c.actual_y) for c in analysis.report.comparisons]
    return max(radii, default=1.0) or 1.0


def render_arms(
    analysis: "ArmAnalysis",
    figsize: tuple[int, int] = (10, 10),
    title: str | None = None,
    selected: int | None = None,
    show_points: bool = True,
    show_errors: bool = True,
) -> "matplotlib.figure.Figure":
    """Draw arms as polylines with their predicted continuations.

    Scored predictions are joined to the true point at their index, so
    the error of each prediction is visible as a segment.

    Args:
        analysis: Result of an arm analysis.
        figsize: Figure size in inches (width, height).
        title: Optional title; defaults to a description of the run.
        selected: Position in analysis.arms of an arm to highlight.
        show_points: Draw a marker on every known arm point.
        show_errors: Draw the true point of each scored prediction and a
            segment from the prediction to it.

    Returns:
        Matplotlib Figure object.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=figsize)
    ax.set_facecolor("black")

    for arm_pos, arm in enumerate(analysis.arms):
        xs = [p.x for p in arm.points]
        ys = [p.y for p in arm.points]
        is_selected = arm_pos == selected

        ax.plot(
            xs, ys,
            color=SELECTED_ARM_COLOR if is_selected else ARM_COLOR,
            linewidth=2.0 if is_selected else 0.8,
        )
        if show_points:
            ax.scatter(xs, ys, s=4, color="white", zorder=3)

        if arm.predictions:
            px = [arm.last_point.x] + [q.x for q in arm.predictions]
            py = [arm.last_point.y] + [q.y for q in arm.predictions]
            ax.plot(px, py, color=PREDICTION_COLOR, linestyle="--", linewidth=0.8)
            ax.scatter(px[1:], py[1:], s=12, color=PREDICTION_COLOR, alpha=0.5, zorder=4)

    if show_errors:
        for comparison in analysis.report.comparisons:
            ax.plot(
                [comparison.predicted_x, comparison.actual_x],
                [comparison.predicted_y, comparison.actual_y],
                color=ERROR_COLOR, linewidth=0.8,
            )
        if analysis.report.comparisons:
            ax.scatter(
                [c.actual_x for c in analysis.report.comparisons],
                [c.actual_y for c in analysis.report.comparisons],
                s=12, color=ACTUAL_COLOR, alpha=0.5, zorder=4,
            )

    if title is None:
        title = (f"{analysis.policy} arms, angle_delta={analysis.angle_delta:g} "
                 f"({len(analysis.arms)} arms)")
    report = analysis.report
    ax.set_title(f"{title}\naccuracy {report.accuracy_percent:.1f}% "
                 f"({report.correct_predictions}/{report.total_predictions}), "
                 f"avg distance {report.average_distance:.3f}")

    limit = _extent(analysis) * 1.05
    ax.set_xlim(-limit, limit)
    ax.set_ylim(-limit, limit)
    ax.set_aspect("equal")

    fig.tight_layout()
    return fig


def save_arms_figure(
    analysis: "ArmAnalysis",
    path: str | Path,
    dpi: int = 100,
    **kwargs,
) -> None:
    """Save the arm figure to an image file.

    Args:
        analysis: Result of an arm analysis.
        path: Output file path (supports PNG, PDF, SVG, etc.).
        dpi: Resolution in dots per inch.
        **kwargs: Additional arguments passed to render_arms.
    """
    fig = render_arms(analysis, **kwargs)
    fig.savefig(path, dpi=dpi, bbox_inches="tight", pad_inches=0.1)

    import matplotlib.pyplot as plt
    plt.close(fig)


def rasterize_arms(
    analysis: "ArmAnalysis",
    image_size: int = 500,
    point_size: int = 1,
    arm_value: int = 255,
    prediction_value: int = 128,
) -> np.ndarray:
    """Rasterize arm points and predictions onto a grayscale image.

    Args:
        analysis: Result of an arm analysis.
        image_size: Width/height of the image.
        point_size: Radius of each point in pixels.
        arm_value: Gray level of known arm points.
        prediction_value: Gray level of predicted points.

    Returns:
        2D uint8 array with +y pointing up.
    """
    if image_size < 10:
        raise ValueError(f"image_size must be >= 10, got {image_size}")

    image = np.zeros((image_size, image_size), dtype=np.uint8)
    scale = (image_size / 2 - point_size - 5) / _extent(analysis)

    def stamp(x: float, y: float, value: int) -> None:
        ix = int(x * scale + image_size / 2)
        iy = int(image_size / 2 - y * scale)
        for dx in range(-point_size + 1, point_size):
            for dy in range(-point_size + 1, point_size):
                if dx*dx + dy*dy < point_size*point_size:
                    nx, ny = ix + dx, iy + dy
                    if 0 <= nx < image_size and 0 <= ny < image_size:
                        image[ny, nx] = max(image[ny, nx], value)

    for arm in analysis.arms:
        for q in arm.predictions:
            stamp(q.x, q.y, prediction_value)
        for p in arm.points:
            stamp(p.x, p.y, arm_value)

    return image


def save_raw_image(
    data: np.ndarray,
    path: str | Path,
) -> None:
    """Save raw array data as PNG without matplotlib.

    This is faster for large images and preserves exact pixel values.

    Args:
        data: 2D uint8 array.
        path: Output PNG file path.
    """
    from PIL import Image

    if data.dtype != np.uint8:
        if data.max() <= 1:
            data = (data * 255).astype(np.uint8)
        else:
            data = data.astype(np.uint8)

    img = Image.fromarray(data)
    img.save(path)

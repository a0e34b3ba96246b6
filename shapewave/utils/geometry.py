"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def as_points(points) -> NDArray[np.float64]:
    """Coerce a sequence of (x, y) pairs into an Nx2 float array."""
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 2))
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected an Nx2 point array, got shape {arr.shape}")
    return arr


def cross2(a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64] | float:
    """z-component of the 2D cross product. Broadcasts over leading axes."""
    return a[..., 0] * b[..., 1] - a[..., 1] * b[..., 0]


def signed_area(points: NDArray[np.float64]) -> float:
    """Shoelace formula over the closed loop. Positive = CCW, Negative = CW.

    Indices wrap modulo the length, so cyclic and non-cyclic loops give the
    same value.
    """
    if len(points) < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    xn = np.roll(x, -1)
    yn = np.roll(y, -1)
    return float(0.5 * np.sum(x * yn - xn * y))


def positive_area(points: NDArray[np.float64]) -> float:
    return abs(signed_area(points))


def winding_direction(points: NDArray[np.float64]) -> int:
    """Return 1 for CCW, -1 for CW, 0 if degenerate."""
    sa = signed_area(points)
    if sa > 0:
        return 1
    elif sa < 0:
        return -1
    return 0


def perimeter(points: NDArray[np.float64]) -> float:
    """Closed perimeter: every edge including last → first."""
    if len(points) < 2:
        return 0.0
    diffs = np.roll(points, -1, axis=0) - points
    return float(np.sum(np.hypot(diffs[:, 0], diffs[:, 1])))


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def distance(p: NDArray[np.float64], q: NDArray[np.float64]) -> float:
    return float(np.hypot(q[0] - p[0], q[1] - p[1]))


def line_distances(
    points: NDArray[np.float64],
    start: NDArray[np.float64],
    end: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Perpendicular distance of each point to the infinite line (start, end).

    A zero-length chord falls back to the point-to-point distance from start.
    """
    chord = end - start
    length = float(np.hypot(chord[0], chord[1]))
    vecs = points - start
    if length < 1e-12:
        return np.hypot(vecs[:, 0], vecs[:, 1])
    return np.abs(cross2(chord, vecs)) / length


def point_to_segment_distance(
    point: NDArray[np.float64],
    seg_start: NDArray[np.float64],
    seg_end: NDArray[np.float64],
) -> float:
    """Distance from a point to a line segment (projection clamped to [0, 1])."""
    d = seg_end - seg_start
    length_sq = float(d[0] * d[0] + d[1] * d[1])
    if length_sq == 0:
        return distance(point, seg_start)
    t = float(np.dot(point - seg_start, d)) / length_sq
    t = max(0.0, min(1.0, t))
    proj = seg_start + t * d
    return distance(point, proj)


def direction_angle(p1: NDArray[np.float64], p2: NDArray[np.float64]) -> float:
    """Angle of the vector p1 → p2 against the +x axis, in [0, 2π)."""
    return float(np.arctan2(p2[1] - p1[1], p2[0] - p1[0]) % (2 * np.pi))


def vertex_angle(
    p: NDArray[np.float64],
    p1: NDArray[np.float64],
    p2: NDArray[np.float64],
) -> float:
    """Unsigned angle at p between p → p1 and p → p2, folded into [0, π]."""
    v1 = p1 - p
    v2 = p2 - p
    return float(np.arctan2(abs(cross2(v1, v2)), float(np.dot(v1, v2))))


def area_ratio(a: float, b: float) -> float:
    """min/max of two areas, in (0, 1]. 0 when either area is zero."""
    if a <= 0 or b <= 0:
        return 0.0
    return min(a, b) / max(a, b)

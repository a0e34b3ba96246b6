"""Convex hull via Graham's scan.

Polar ordering uses cross products rather than trigonometry, so collinear
ties are exact and broken by distance from the start vertex.
"""

from __future__ import annotations

from functools import cmp_to_key

import numpy as np
from numpy.typing import NDArray

from shapewave.utils.loop import VertexLoop


def _cross(points: NDArray[np.float64], o: int, a: int, b: int) -> float:
    ox, oy = points[o]
    return float((points[a, 0] - ox) * (points[b, 1] - oy) - (points[a, 1] - oy) * (points[b, 0] - ox))


def _dist_sq(points: NDArray[np.float64], a: int, b: int) -> float:
    d = points[b] - points[a]
    return float(d[0] * d[0] + d[1] * d[1])


def graham_scan_indices(points: NDArray[np.float64]) -> list[int]:
    """Indices of the hull vertices, counter-clockwise from the lowest point."""
    n = len(points)
    if n < 3:
        return list(range(n))

    # Lowest y, then lowest x
    start = min(range(n), key=lambda i: (points[i, 1], points[i, 0]))
    rest = [i for i in range(n) if i != start]

    def by_polar_angle(a: int, b: int) -> int:
        cross = _cross(points, start, a, b)
        if cross == 0:
            da = _dist_sq(points, start, a)
            db = _dist_sq(points, start, b)
            return (da > db) - (da < db)
        return -1 if cross > 0 else 1

    rest.sort(key=cmp_to_key(by_polar_angle))

    hull = [start]
    for idx in rest:
        # Pop anything that is not a strict left turn
        while len(hull) >= 2 and _cross(points, hull[-2], hull[-1], idx) <= 0:
            hull.pop()
        hull.append(idx)

    # A collinear point may survive next to the wrap-around edge
    last = len(hull) - 1
    if last >= 2 and _cross(points, hull[last], hull[0], hull[1]) == 0:
        if _dist_sq(points, hull[0], hull[1]) < _dist_sq(points, hull[0], hull[last]):
            del hull[1]
        else:
            del hull[last]

    return hull


def convex_hull(loop: VertexLoop) -> VertexLoop:
    """Hull of a vertex loop. Vertices keep their provenance ids."""
    if len(loop) < 3:
        return loop
    return loop.take(graham_scan_indices(loop.non_cyclic().points))

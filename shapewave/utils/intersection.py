"""First self-intersecting loop of an open stroke."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon

from shapewave.utils.geometry import as_points, cross2, positive_area

MIN_POLYGON_AREA = 500.0  # ignore tiny loops


@dataclass(frozen=True)
class ExtractedPolygon:
    # Loop vertices: intersection point first, then stroke points i+1..j
    vertices: NDArray[np.float64]
    start_index: int
    end_index: int
    # None when the loop was produced by auto-closing the raw stroke
    intersection: tuple[float, float] | None
    is_simple: bool


def segment_intersections(
    p: NDArray[np.float64],
    q: NDArray[np.float64],
    starts: NDArray[np.float64],
    ends: NDArray[np.float64],
) -> tuple[NDArray[np.bool_], NDArray[np.float64]]:
    """Intersect segment p→q against many segments at once.

    Returns a hit mask and the parameter along p→q for each candidate.
    Touching endpoints count as hits. Parallel and collinear pairs have no
    single intersection point and are never hits.
    """
    r = q - p
    s = ends - starts
    denom = cross2(r, s)
    qp = starts - p
    parallel = np.abs(denom) < 1e-12
    safe = np.where(parallel, 1.0, denom)
    t = cross2(qp, s) / safe
    u = cross2(qp, r) / safe
    hit = ~parallel & (t >= 0) & (t <= 1) & (u >= 0) & (u <= 1)
    return hit, t


def is_simple_polygon(vertices: NDArray[np.float64]) -> bool:
    if len(vertices) < 3:
        return False
    return bool(Polygon(vertices).is_valid)


def extract_first_polygon(
    points,
    min_area: float = MIN_POLYGON_AREA,
    auto_close: bool = True,
) -> ExtractedPolygon | None:
    """Find the first self-intersection loop in a stroke.

    Scans segment i ascending, then j ≥ i + 2 ascending. The first hit whose
    loop has ≥ 3 vertices and area ≥ ``min_area`` wins; smaller loops are
    skipped and the scan continues. Without a qualifying loop the raw stroke
    is used as an already-closed loop when ``auto_close`` is set (still
    subject to the area check), otherwise None.
    """
    pts = as_points(points)
    n = len(pts)
    if n < 3:
        return None

    starts = pts[:-1]
    ends = pts[1:]

    for i in range(n - 3):
        hit, t = segment_intersections(pts[i], pts[i + 1], starts[i + 2 :], ends[i + 2 :])
        for k in np.flatnonzero(hit):
            j = i + 2 + int(k)
            crossing = pts[i] + t[k] * (pts[i + 1] - pts[i])
            vertices = np.vstack([crossing, pts[i + 1 : j + 1]])
            if len(vertices) < 3:
                continue
            if positive_area(vertices) < min_area:
                continue
            return ExtractedPolygon(
                vertices=vertices,
                start_index=i,
                end_index=j,
                intersection=(float(crossing[0]), float(crossing[1])),
                is_simple=is_simple_polygon(vertices),
            )

    if auto_close and positive_area(pts) >= min_area:
        return ExtractedPolygon(
            vertices=pts.copy(),
            start_index=0,
            end_index=n - 1,
            intersection=None,
            is_simple=is_simple_polygon(pts),
        )
    return None

"""Tip selection strategies.

Both strategies share one return contract, so callers switch heuristics by
changing a TipSelection value only.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from shapewave.utils.geometry import direction_angle, point_to_segment_distance, vertex_angle
from shapewave.utils.loop import VertexLoop


class TipSelection(str, enum.Enum):
    SMALLEST_ANGLE = "smallest_angle"
    CLOSEST_EDGE = "closest_edge"


@dataclass(frozen=True)
class Tip:
    index: int  # position in the polygon
    vertex_id: int  # provenance id
    point: tuple[float, float]
    angle: float  # interior angle, radians in [0, π]
    initial_rotation: float  # direction tip → predecessor, radians in [0, 2π)


def _tip_at(loop: VertexLoop, i: int) -> Tip:
    pts = loop.points
    n = len(pts)
    prev_pt = pts[(i - 1) % n]
    next_pt = pts[(i + 1) % n]
    return Tip(
        index=i,
        vertex_id=int(loop.ids[i]),
        point=(float(pts[i, 0]), float(pts[i, 1])),
        angle=vertex_angle(pts[i], next_pt, prev_pt),
        initial_rotation=direction_angle(pts[i], prev_pt),
    )


def tip_by_smallest_angle(loop: VertexLoop, reference: NDArray[np.float64] | None = None) -> Tip | None:
    """Vertex with the smallest interior angle. ``reference`` is unused."""
    loop = loop.non_cyclic()
    if len(loop) < 3:
        return None

    best = 0
    best_angle = math.inf
    pts = loop.points
    n = len(pts)
    for i in range(n):
        angle = vertex_angle(pts[i], pts[(i + 1) % n], pts[(i - 1) % n])
        if angle < best_angle:
            best_angle = angle
            best = i
    return _tip_at(loop, best)


def tip_by_closest_edge(loop: VertexLoop, reference: NDArray[np.float64] | None = None) -> Tip | None:
    """Vertex farthest from the edge nearest to ``reference``.

    For triangles this is the vertex opposite the nearest edge.
    """
    loop = loop.non_cyclic()
    if len(loop) < 3:
        return None
    if reference is None:
        raise ValueError("closest-edge tip selection needs a reference point")

    pts = loop.points
    n = len(pts)
    ref = np.asarray(reference, dtype=np.float64)

    edge_dists = [point_to_segment_distance(ref, pts[i], pts[(i + 1) % n]) for i in range(n)]
    edge = int(np.argmin(edge_dists))
    edge_start = pts[edge]
    edge_end = pts[(edge + 1) % n]

    tip_index = -1
    max_dist = -1.0
    for i in range(n):
        if i == edge or i == (edge + 1) % n:
            continue
        d = point_to_segment_distance(pts[i], edge_start, edge_end)
        if d > max_dist:
            max_dist = d
            tip_index = i

    if tip_index == -1:
        tip_index = (edge + 2) % n
    return _tip_at(loop, tip_index)


TIP_STRATEGIES: dict[TipSelection, Callable[[VertexLoop, NDArray[np.float64] | None], Tip | None]] = {
    TipSelection.SMALLEST_ANGLE: tip_by_smallest_angle,
    TipSelection.CLOSEST_EDGE: tip_by_closest_edge,
}


def select_tip(
    loop: VertexLoop,
    method: TipSelection,
    reference: NDArray[np.float64] | None = None,
) -> Tip | None:
    return TIP_STRATEGIES[TipSelection(method)](loop, reference)

"""Douglas-Peucker simplification and the two convergence strategies."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from shapewave.errors import SimplificationError
from shapewave.utils.geometry import bbox, line_distances
from shapewave.utils.loop import VertexLoop

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 1000
# Per-K cap inside the area-ratio search; an unreachable K is abandoned early
AREA_RATIO_MAX_ITERATIONS = 250
INCREMENT_DECAY = 0.8


def douglas_peucker_indices(points: NDArray[np.float64], epsilon: float) -> NDArray[np.int64]:
    """Ramer-Douglas-Peucker over an open chain. Returns kept indices in order.

    Uses an explicit stack of (start, end) ranges instead of recursion, so
    chain length is not bounded by the interpreter's recursion limit.
    """
    n = len(points)
    if n < 3:
        return np.arange(n, dtype=np.int64)

    keep = np.zeros(n, dtype=bool)
    keep[0] = True
    keep[-1] = True

    stack = [(0, n - 1)]
    while stack:
        s, e = stack.pop()
        if e <= s + 1:
            continue
        dists = line_distances(points[s + 1 : e], points[s], points[e])
        k = int(np.argmax(dists))
        if dists[k] > epsilon:
            split = s + 1 + k
            keep[split] = True
            stack.append((split, e))
            stack.append((s, split))

    return np.flatnonzero(keep)


def simplify_loop(loop: VertexLoop, epsilon: float) -> VertexLoop:
    """Simplify a closed loop, traversed as a chain from vertex 0 back to itself."""
    chain = loop.non_cyclic().cyclic()
    return chain.take(douglas_peucker_indices(chain.points, epsilon)).non_cyclic()


def starting_tolerance(loop: VertexLoop, factor: float = 0.1) -> tuple[float, float]:
    """(epsilon, increment) scaled to the loop's size.

    Radius is half the smaller bounding-box side, 1 for a degenerate box.
    """
    xmin, ymin, xmax, ymax = bbox(loop.points)
    radius = min(xmax - xmin, ymax - ymin) / 2 or 1.0
    epsilon = radius * factor
    return epsilon, epsilon * 0.1


def reduce_to_vertex_count(
    loop: VertexLoop,
    n: int,
    epsilon: float = 1.0,
    increment: float = 0.1,
    max_iterations: int = MAX_ITERATIONS,
) -> VertexLoop:
    """Simplify until at most ``n`` vertices remain.

    Each pass rotates the start vertex by one so that the first chord is not
    always anchored at the same point. Overshooting below ``n`` restarts from
    the original loop (rotated) with a slightly smaller, finer-stepped
    tolerance.

    Raises SimplificationError if ``max_iterations`` passes do not converge.
    """
    original = loop.non_cyclic()
    current = original
    eps = epsilon
    inc = increment
    iterations = 0

    while len(current) > n:
        if iterations >= max_iterations:
            raise SimplificationError(n, iterations, len(current), current)
        result = simplify_loop(current, eps)
        if len(result) >= n:
            current = result.rotated(1)
            eps += inc
        else:
            original = original.rotated(1)
            current = original
            eps -= inc
            inc *= INCREMENT_DECAY
            eps += inc
        iterations += 1

    logger.debug(
        "Reduced %d → %d vertices in %d iterations (eps=%.3f)",
        len(loop),
        len(current),
        iterations,
        eps,
    )
    return current


def reduce_until_area_ratio(
    loop: VertexLoop,
    reference_area: float,
    threshold: float,
    epsilon: float = 1.0,
    increment: float = 0.1,
    max_iterations: int = MAX_ITERATIONS,
) -> VertexLoop | None:
    """Smallest K ≥ 3 whose K-vertex simplification keeps ``threshold`` of the area.

    A K whose reduction does not converge within ``max_iterations`` (at most
    AREA_RATIO_MAX_ITERATIONS per K) is not a candidate; the search moves on
    to K + 1. Returns None when no K reaches the ratio or the reference area
    is zero.
    """
    loop = loop.non_cyclic()
    if reference_area <= 0 or len(loop) < 3:
        return None

    per_k = min(max_iterations, AREA_RATIO_MAX_ITERATIONS)
    for k in range(3, len(loop) + 1):
        try:
            simplified = reduce_to_vertex_count(loop, k, epsilon, increment, per_k)
        except SimplificationError as e:
            logger.debug("Skipping %d vertices: %s", k, e)
            continue
        if len(simplified) >= 3 and simplified.area / reference_area >= threshold:
            logger.debug(
                "Area ratio %.3f ≥ %.3f reached with %d vertices",
                simplified.area / reference_area,
                threshold,
                len(simplified),
            )
            return simplified
    return None

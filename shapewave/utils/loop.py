"""VertexLoop — polygon boundary with provenance ids, plus the normalizer.

Every vertex carries an integer provenance id. Ids are assigned once, when the
extracted polygon is normalized, and survive subsetting (hull, simplification),
reversal, rotation and translation. Derived loops can therefore be matched
back to the detailed contour by integer lookup instead of coordinate equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from shapewave.utils.geometry import as_points, perimeter, positive_area, signed_area

UNTAGGED = -1


@dataclass(frozen=True)
class VertexLoop:
    """Ordered polygon vertices. Nx2 points plus N provenance ids."""

    points: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    ids: NDArray[np.int64] = field(default_factory=lambda: np.empty(0, dtype=np.int64))

    def __post_init__(self) -> None:
        if len(self.points) != len(self.ids):
            raise ValueError(
                f"points/ids length mismatch: {len(self.points)} != {len(self.ids)}"
            )

    @classmethod
    def from_points(cls, points, ids=None) -> VertexLoop:
        pts = as_points(points)
        if ids is None:
            id_arr = np.full(len(pts), UNTAGGED, dtype=np.int64)
        else:
            id_arr = np.asarray(ids, dtype=np.int64)
        return cls(points=pts, ids=id_arr)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_cyclic(self) -> bool:
        return len(self.points) >= 2 and bool(np.array_equal(self.points[0], self.points[-1]))

    @property
    def signed_area(self) -> float:
        return signed_area(self.points)

    @property
    def area(self) -> float:
        return positive_area(self.points)

    @property
    def perimeter(self) -> float:
        return perimeter(self.non_cyclic().points)

    def tagged(self) -> VertexLoop:
        """Assign provenance ids 0..N-1 by current position."""
        return VertexLoop(self.points.copy(), np.arange(len(self.points), dtype=np.int64))

    def take(self, indices) -> VertexLoop:
        idx = np.asarray(indices, dtype=np.int64)
        return VertexLoop(self.points[idx], self.ids[idx])

    def reversed(self) -> VertexLoop:
        return VertexLoop(self.points[::-1].copy(), self.ids[::-1].copy())

    def rotated(self, shift: int) -> VertexLoop:
        """Cyclic shift so that element ``shift`` becomes element 0."""
        n = len(self.points)
        if n == 0:
            return self
        k = shift % n
        return VertexLoop(np.roll(self.points, -k, axis=0), np.roll(self.ids, -k))

    def translated(self, dx: float, dy: float) -> VertexLoop:
        return VertexLoop(self.points + np.array([dx, dy]), self.ids.copy())

    def position_of(self, vertex_id: int) -> int | None:
        """Position of the first vertex with the given provenance id."""
        if vertex_id == UNTAGGED:
            return None
        hits = np.flatnonzero(self.ids == vertex_id)
        if len(hits) == 0:
            return None
        return int(hits[0])

    def cyclic(self) -> VertexLoop:
        return ensure_cyclic(self)

    def non_cyclic(self) -> VertexLoop:
        return ensure_non_cyclic(self)

    def as_tuples(self) -> list[tuple[float, float]]:
        return [(float(x), float(y)) for x, y in self.points]


# --- Normalizer ---


def ensure_counter_clockwise(loop: VertexLoop) -> VertexLoop:
    if signed_area(loop.points) < 0:
        return loop.reversed()
    return loop


def ensure_cyclic(loop: VertexLoop) -> VertexLoop:
    if len(loop) == 0 or loop.is_cyclic:
        return loop
    return VertexLoop(
        np.vstack([loop.points, loop.points[:1]]),
        np.concatenate([loop.ids, loop.ids[:1]]),
    )


def ensure_non_cyclic(loop: VertexLoop) -> VertexLoop:
    if len(loop) < 2 or not loop.is_cyclic:
        return loop
    return VertexLoop(loop.points[:-1].copy(), loop.ids[:-1].copy())


def normalize(loop: VertexLoop, cyclic: bool = False) -> VertexLoop:
    """Orientation first, then cyclic form. Idempotent."""
    loop = ensure_counter_clockwise(loop)
    return ensure_cyclic(loop) if cyclic else ensure_non_cyclic(loop)


def recenter_on(loop: VertexLoop, vertex_id: int, dx: float, dy: float) -> VertexLoop:
    """Rotate so ``vertex_id`` comes first, then translate by (dx, dy)."""
    pos = loop.position_of(vertex_id)
    if pos is not None:
        loop = loop.rotated(pos)
    return loop.translated(dx, dy)

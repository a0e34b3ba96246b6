"""Shape-to-wave projection.

Every point of the detailed contour is projected onto the simplified polygon
edge it belongs to. The signed perpendicular offset becomes the amplitude and
the arc length along the simplified perimeter becomes the time axis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from shapewave.errors import WaveExtractionError
from shapewave.utils.geometry import cross2
from shapewave.utils.loop import VertexLoop

logger = logging.getLogger(__name__)

MAX_AMPLITUDE_SCALE = 20.0


@dataclass(frozen=True)
class Wave:
    """Arc-length ordered samples. Parallel arrays of equal length."""

    t: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    amplitude: NDArray[np.float64] = field(default_factory=lambda: np.empty(0))
    # Contour point and its projection onto the simplified edge, Nx2 each
    points: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    projected: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))

    def __len__(self) -> int:
        return len(self.t)

    @property
    def length(self) -> float:
        return float(self.t[-1]) if len(self.t) else 0.0


def project_onto_segment(
    points: NDArray[np.float64],
    start: NDArray[np.float64],
    end: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Project points onto segment start → end.

    Returns (t clamped to [0, 1], signed perpendicular amplitude, projected
    points). Positive amplitude means the point lies to the left of the
    directed edge. A zero-length edge projects everything onto ``start`` with
    the point distance as amplitude.
    """
    v = end - start
    w = points - start
    len_sq = float(v[0] * v[0] + v[1] * v[1])

    if len_sq == 0:
        t = np.zeros(len(points))
        amplitude = np.hypot(w[:, 0], w[:, 1])
        projected = np.repeat(start[None, :], len(points), axis=0)
        return t, amplitude, projected

    t = np.clip((w @ v) / len_sq, 0.0, 1.0)
    amplitude = cross2(v, w) / np.sqrt(len_sq)
    projected = start + t[:, None] * v
    return t, amplitude, projected


def _edge_run(contour: VertexLoop, start_pos: int, end_pos: int) -> NDArray[np.int64]:
    """Contour positions from start_pos to end_pos inclusive, wrapping around."""
    n = len(contour)
    if end_pos > start_pos:
        return np.arange(start_pos, end_pos + 1)
    return np.concatenate([np.arange(start_pos, n), np.arange(0, end_pos + 1)])


def extract_wave(contour: VertexLoop, simplified: VertexLoop) -> Wave:
    """Build the wave of ``contour`` around the edges of ``simplified``.

    Simplified vertices are located in the contour by provenance id. A vertex
    that cannot be found means the two loops did not come from the same
    analysis and raises WaveExtractionError. Amplitudes are cubed, keeping
    their sign, to emphasize sharp deviations over gentle ones. Each edge's
    samples are stably sorted by arc length, so ``t`` never decreases.
    """
    contour = contour.non_cyclic()
    simplified = simplified.non_cyclic()
    if len(simplified) < 3:
        raise WaveExtractionError(
            f"Simplified polygon needs at least 3 vertices, got {len(simplified)}"
        )

    positions = {int(vid): pos for pos, vid in reversed(list(enumerate(contour.ids)))}

    ts: list[NDArray[np.float64]] = []
    amps: list[NDArray[np.float64]] = []
    pts: list[NDArray[np.float64]] = []
    projs: list[NDArray[np.float64]] = []
    cumulative = 0.0

    n = len(simplified)
    for i in range(n):
        start_id = int(simplified.ids[i])
        end_id = int(simplified.ids[(i + 1) % n])
        start_pos = positions.get(start_id)
        end_pos = positions.get(end_id)
        if start_pos is None or end_pos is None:
            raise WaveExtractionError(
                f"Edge {i}: vertex id {start_id if start_pos is None else end_id} "
                "not found in contour"
            )
        if start_pos == end_pos:
            raise WaveExtractionError(f"Edge {i}: start and end map to the same contour vertex")

        p_start = simplified.points[i]
        p_end = simplified.points[(i + 1) % n]
        edge_length = float(np.hypot(*(p_end - p_start)))

        run = contour.points[_edge_run(contour, start_pos, end_pos)]
        t, amplitude, projected = project_onto_segment(run, p_start, p_end)
        # A contour that doubles back along the edge projects out of order
        order = np.argsort(t, kind="stable")

        ts.append(t[order] * edge_length + cumulative)
        amps.append(amplitude[order])
        pts.append(run[order])
        projs.append(projected[order])
        cumulative += edge_length

    wave = Wave(
        t=np.concatenate(ts),
        amplitude=np.concatenate(amps) ** 3,
        points=np.vstack(pts),
        projected=np.vstack(projs),
    )
    logger.debug("Extracted wave: %d samples over length %.1f", len(wave), cumulative)
    return wave


def scale_wave(wave: Wave, scale: float) -> Wave:
    """Exaggerate (> 1) or smooth (< 1) the wobble of a wave.

    Amplitudes and contour offsets from the simplified edge are scaled
    together. ``scale`` is clamped to [0, 20].
    """
    scale = max(0.0, min(MAX_AMPLITUDE_SCALE, float(scale)))
    return Wave(
        t=wave.t.copy(),
        amplitude=wave.amplitude * scale,
        points=wave.projected + (wave.points - wave.projected) * scale,
        projected=wave.projected.copy(),
    )


def position_at_progress(
    wave: Wave, progress: float
) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Cursor on the contour and on the simplified shape at ``progress`` in [0, 1).

    Linear interpolation between the bracketing samples. None for waves with
    fewer than 2 samples.
    """
    if len(wave) < 2:
        return None

    current_t = progress * wave.length
    # First i with t[i] <= current_t < t[i + 1], falling back to 0
    bracket = np.flatnonzero((wave.t[:-1] <= current_t) & (wave.t[1:] > current_t))
    i = int(bracket[0]) if len(bracket) else 0

    span = wave.t[i + 1] - wave.t[i]
    mu = (current_t - wave.t[i]) / span if span > 0 else 0.0

    pt = wave.points[i] + (wave.points[i + 1] - wave.points[i]) * mu
    proj = wave.projected[i] + (wave.projected[i + 1] - wave.projected[i]) * mu
    return (float(pt[0]), float(pt[1])), (float(proj[0]), float(proj[1]))

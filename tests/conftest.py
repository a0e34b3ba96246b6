"""Shared test fixtures — synthetic strokes."""

from __future__ import annotations

import math

import numpy as np
import pytest


def densify(corners, step: float = 10.0, closed: bool = True) -> np.ndarray:
    """Points every ``step`` along the edges between corners (corners included once)."""
    corners = np.asarray(corners, dtype=np.float64)
    pairs = list(zip(corners, np.roll(corners, -1, axis=0))) if closed else list(zip(corners[:-1], corners[1:]))
    out = []
    for p, q in pairs:
        m = max(1, int(round(np.hypot(*(q - p)) / step)))
        for k in range(m):
            out.append(p + (q - p) * k / m)
    if not closed:
        out.append(corners[-1])
    return np.array(out)


def wobbly(corners, amplitude: float = 5.0, steps: int = 20) -> np.ndarray:
    """Closed contour whose edges carry one full sine period of perpendicular wobble."""
    corners = np.asarray(corners, dtype=np.float64)
    out = []
    for p, q in zip(corners, np.roll(corners, -1, axis=0)):
        d = q - p
        normal = np.array([-d[1], d[0]]) / np.hypot(*d)
        for k in range(steps):
            s = k / steps
            out.append(p + d * s + normal * amplitude * math.sin(2 * math.pi * s))
    return np.array(out)


SQUARE = [(0.0, 0.0), (200.0, 0.0), (200.0, 200.0), (0.0, 200.0)]
TRIANGLE = [(0.0, 0.0), (200.0, 0.0), (100.0, 100.0 * math.sqrt(3))]
# Square pulled toward a triangle: short flat top
NEAR_TRIANGLE = [(0.0, 0.0), (200.0, 0.0), (105.0, 190.0), (95.0, 190.0)]

# Five points, segment 0 crosses segment 3 at the origin
CROSSING_STROKE = [(-50.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0), (0.0, -50.0)]


def triangle_stroke() -> np.ndarray:
    """Equilateral triangle traced once, overshooting so the end crosses the start.

    Starts at (-30, 0), runs along the base, up to the apex, back down past
    the first corner. The last segment crosses the first at the origin.
    """
    a, b, c = (np.array(p) for p in TRIANGLE)
    pts = [np.array([-30.0, 0.0])]
    pts += [a + (b - a) * k / 20 for k in range(1, 20)]
    pts += [b + (c - b) * k / 20 for k in range(20)]
    pts += [c + (a - c) * k / 20 for k in range(20)]
    pts.append(a + (a - c) / 20)
    return np.array(pts)


@pytest.fixture
def square_loop() -> np.ndarray:
    return densify(SQUARE)


@pytest.fixture
def near_triangle_loop() -> np.ndarray:
    return densify(NEAR_TRIANGLE)


@pytest.fixture
def crossing_stroke() -> list[tuple[float, float]]:
    return list(CROSSING_STROKE)


@pytest.fixture
def equilateral_stroke() -> np.ndarray:
    return triangle_stroke()


@pytest.fixture
def wobbly_triangle() -> np.ndarray:
    return wobbly(TRIANGLE)

"""Invariant violations.

Ordinary "this stroke is not a shape" outcomes are never exceptions; helpers
return None and the context is marked invalid. These are raised only when an
internal invariant breaks.
"""

from __future__ import annotations

from typing import Any


class ShapewaveError(Exception):
    """Base class for invariant violations inside the engine."""


class SimplificationError(ShapewaveError):
    """Vertex-count reduction hit its iteration cap without converging.

    ``result`` is the polygon the reduction had reached when it gave up.
    """

    def __init__(self, target: int, iterations: int, remaining: int, result: Any = None) -> None:
        super().__init__(
            f"Could not reduce polygon to {target} vertices in {iterations} iterations "
            f"({remaining} vertices left)"
        )
        self.target = target
        self.iterations = iterations
        self.remaining = remaining
        self.result = result


class WaveExtractionError(ShapewaveError):
    """A simplified vertex could not be located in the detailed contour."""

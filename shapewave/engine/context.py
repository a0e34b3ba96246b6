"""AnalysisContext — the single mutable state object flowing through all stages.

One context per finished stroke. Stages read what earlier stages wrote and
add their own results; nothing is shared between strokes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from shapewave.engine.config import AnalysisConfig
from shapewave.utils.geometry import as_points
from shapewave.utils.intersection import ExtractedPolygon
from shapewave.utils.loop import VertexLoop
from shapewave.utils.tip import Tip
from shapewave.utils.wave import Wave

logger = logging.getLogger(__name__)


@dataclass
class AnalysisContext:
    """Shared state for one stroke analysis."""

    # Raw stroke: Nx2 array of (x, y), translated onto the tip once one is chosen
    stroke: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    config: AnalysisConfig = field(default_factory=AnalysisConfig)

    # --- Layer 0: extraction ---
    extraction: ExtractedPolygon | None = None
    # Normalized (CCW, non-cyclic) first polygon with provenance ids 0..N-1
    first_polygon: VertexLoop | None = None

    # --- Layer 1: simplification ---
    hull: VertexLoop | None = None
    # Starting point for the final reduction (hull-derived or the first polygon)
    simplified: VertexLoop | None = None
    final_simplified: VertexLoop | None = None
    area_of_first_polygon: float = 0.0
    area_of_hull: float = 0.0
    area_of_final_simplified: float = 0.0
    length_of_final_simplified: float = 0.0
    # min/max of hull area and final area ("triangularity" for triangles)
    shape_ratio: float = 0.0
    validated: bool = False

    # --- Layer 2: orientation ---
    tip: Tip | None = None
    # Translation applied to every stage when re-centering on the tip
    offset: tuple[float, float] = (0.0, 0.0)

    # --- Layer 3: synthesis ---
    wave: Wave | None = None
    buffer: NDArray[np.float32] | None = None

    # --- Pipeline metadata ---
    rejection_reason: str = ""
    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_stroke(cls, points, config: AnalysisConfig | None = None) -> AnalysisContext:
        return cls(stroke=as_points(points), config=config or AnalysisConfig())

    @property
    def rejected(self) -> bool:
        return bool(self.rejection_reason) or bool(self.errors)

    @property
    def is_valid(self) -> bool:
        return self.validated and not self.rejected

    @property
    def first_point(self) -> NDArray[np.float64] | None:
        return self.stroke[0] if len(self.stroke) else None

    def reject(self, reason: str) -> None:
        """Mark the stroke as not forming a valid shape. First reason wins."""
        if not self.rejection_reason:
            self.rejection_reason = reason
            logger.debug("Stroke rejected: %s", reason)

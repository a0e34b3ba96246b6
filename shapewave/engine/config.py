"""Analysis configuration — passed explicitly into every pipeline run."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from shapewave.utils.intersection import MIN_POLYGON_AREA
from shapewave.utils.simplify import MAX_ITERATIONS
from shapewave.utils.tip import TipSelection
from shapewave.utils.waveform import DEFAULT_SAMPLE_RATE


class SimplificationMode(str, enum.Enum):
    # Reduce the hull to exactly target_vertex_count vertices
    VERTEX_COUNT = "vertex_count"
    # Fewest vertices that keep area_ratio_threshold of the reference area
    AREA_RATIO = "area_ratio"


class AreaReference(str, enum.Enum):
    CONVEX_HULL = "convex_hull"
    FIRST_POLYGON = "first_polygon"


@dataclass(frozen=True)
class AnalysisConfig:
    """Controls extraction, simplification, tip selection and rendering."""

    # Polygon extraction
    min_polygon_area: float = MIN_POLYGON_AREA
    auto_close: bool = True

    # Simplification
    simplification: SimplificationMode = SimplificationMode.AREA_RATIO
    target_vertex_count: int = 3
    area_ratio_threshold: float = 0.9
    area_reference: AreaReference = AreaReference.FIRST_POLYGON
    epsilon_factor: float = 0.1  # starting tolerance, fraction of half the bbox short side
    max_iterations: int = MAX_ITERATIONS

    # Validity
    min_perimeter: float = 100.0
    shape_ratio_threshold: float = 0.8  # vertex-count mode only

    # Tip
    tip_selection: TipSelection = TipSelection.CLOSEST_EDGE

    # Rendering
    render_waveform: bool = True
    sample_rate: int = DEFAULT_SAMPLE_RATE
    buffer_length: int = DEFAULT_SAMPLE_RATE  # one second
    reference_perimeter: float = 1000.0

    def __post_init__(self) -> None:
        if self.min_polygon_area < 0:
            raise ValueError("min_polygon_area must be >= 0")
        if self.target_vertex_count < 3:
            raise ValueError("target_vertex_count must be >= 3")
        if not 0 < self.area_ratio_threshold <= 1:
            raise ValueError("area_ratio_threshold must be in (0, 1]")
        if not 0 <= self.shape_ratio_threshold <= 1:
            raise ValueError("shape_ratio_threshold must be in [0, 1]")
        if self.epsilon_factor <= 0:
            raise ValueError("epsilon_factor must be > 0")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if self.buffer_length < 1 or self.sample_rate < 1:
            raise ValueError("buffer_length and sample_rate must be >= 1")
        if self.reference_perimeter <= 0:
            raise ValueError("reference_perimeter must be > 0")
        # Accept plain strings for the enum fields
        object.__setattr__(self, "simplification", SimplificationMode(self.simplification))
        object.__setattr__(self, "area_reference", AreaReference(self.area_reference))
        object.__setattr__(self, "tip_selection", TipSelection(self.tip_selection))

    @classmethod
    def triangle(cls, **overrides) -> AnalysisConfig:
        """Triangle preset: hull reduced to exactly three vertices."""
        base = cls(
            simplification=SimplificationMode.VERTEX_COUNT,
            target_vertex_count=3,
            tip_selection=TipSelection.SMALLEST_ANGLE,
        )
        return replace(base, **overrides)

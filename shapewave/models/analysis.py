"""Structured output of a stroke analysis, for rendering and playback collaborators."""

from __future__ import annotations

from pydantic import BaseModel, Field

Point = tuple[float, float]


class TipInfo(BaseModel):
    # Pre-translation position; equals -offset after re-centering
    point: Point = (0.0, 0.0)
    angle: float = 0.0
    initial_rotation: float = 0.0
    index: int = 0


class AnalysisResult(BaseModel):
    """Per-stroke analysis. Polygons are re-centered on the tip when valid."""

    is_valid: bool = False
    rejection_reason: str = ""
    errors: dict[str, str] = Field(default_factory=dict)

    # Polygons (non-cyclic, counter-clockwise)
    first_polygon: list[Point] | None = None
    first_polygon_is_simple: bool = False
    intersection: Point | None = None
    hull: list[Point] | None = None
    simplified: list[Point] | None = None
    final_simplified: list[Point] | None = None

    # Metrics
    area_of_first_polygon: float = 0.0
    area_of_hull: float = 0.0
    area_of_final_simplified: float = 0.0
    length_of_final_simplified: float = 0.0
    shape_ratio: float = 0.0

    # Orientation
    tip: TipInfo | None = None
    offset: Point = (0.0, 0.0)
    stroke: list[Point] = Field(default_factory=list)

    # Playback length in bars, snapped from the perimeter
    loop_bars: float = 0.0


class WaveSample(BaseModel):
    t: float
    amplitude: float
    point: Point
    projected: Point


class SynthesisOutput(BaseModel):
    """Wave samples plus one period of the rendered sample buffer."""

    wave: list[WaveSample] = Field(default_factory=list)
    buffer: list[float] = Field(default_factory=list)
    sample_rate: int = 44100
    length: float = 0.0

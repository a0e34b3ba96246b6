"""S3.01 — Wave Extraction.

Project the detailed contour onto the simplified polygon's edges. Arc length
along the simplified perimeter is the time axis, signed perpendicular offset
(cubed) the amplitude.
"""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.wave import extract_wave


@stage(
    id="S3.01",
    layer=Layer.SYNTHESIS,
    dependencies=["S2.02"],
    description="Project the contour onto the simplified shape as a wave",
)
def wave_extraction(ctx: AnalysisContext) -> None:
    if not ctx.is_valid or ctx.first_polygon is None or ctx.final_simplified is None:
        return

    ctx.wave = extract_wave(ctx.first_polygon, ctx.final_simplified)

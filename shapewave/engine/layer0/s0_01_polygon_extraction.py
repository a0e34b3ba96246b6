"""S0.01 — Polygon Extraction.

The first self-intersection of the stroke closes a loop: intersection point,
then every stroke point between the two crossing segments. Loops under the
minimum area are skipped. Without one, auto-close falls back to the raw stroke.
"""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.intersection import extract_first_polygon


@stage(
    id="S0.01",
    layer=Layer.EXTRACTION,
    description="Extract the first self-intersecting loop from the stroke",
)
def polygon_extraction(ctx: AnalysisContext) -> None:
    if len(ctx.stroke) < 3:
        ctx.reject(f"stroke has {len(ctx.stroke)} points, need at least 3")
        return

    extracted = extract_first_polygon(
        ctx.stroke,
        min_area=ctx.config.min_polygon_area,
        auto_close=ctx.config.auto_close,
    )
    if extracted is None:
        ctx.reject("no closed loop of sufficient area")
        return

    ctx.extraction = extracted

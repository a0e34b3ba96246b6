"""S0.02 — Normalization & Provenance.

Counter-clockwise winding via the shoelace sign, non-cyclic storage form.
Each vertex of the normalized loop is tagged with its position as a
provenance id; every derived loop keeps these ids.
"""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.loop import VertexLoop, normalize


@stage(
    id="S0.02",
    layer=Layer.EXTRACTION,
    dependencies=["S0.01"],
    description="Normalize winding and tag provenance ids",
)
def normalization(ctx: AnalysisContext) -> None:
    if ctx.rejected or ctx.extraction is None:
        return

    loop = normalize(VertexLoop.from_points(ctx.extraction.vertices)).tagged()
    if len(loop) < 3:
        ctx.reject("extracted loop has fewer than 3 distinct vertices")
        return

    ctx.first_polygon = loop
    ctx.area_of_first_polygon = loop.area

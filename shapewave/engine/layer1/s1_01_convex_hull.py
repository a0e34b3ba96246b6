"""S1.01 — Convex Hull.

Graham's scan over the first polygon. Hull area is the upper bound for any
simplification and the reference for the shape ratio.
"""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.hull import convex_hull


@stage(
    id="S1.01",
    layer=Layer.SIMPLIFICATION,
    dependencies=["S0.02"],
    description="Compute the convex hull of the first polygon",
)
def convex_hull_stage(ctx: AnalysisContext) -> None:
    if ctx.rejected or ctx.first_polygon is None:
        return

    ctx.hull = convex_hull(ctx.first_polygon)
    ctx.area_of_hull = ctx.hull.area

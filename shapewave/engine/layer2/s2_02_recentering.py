"""S2.02 — Re-centering on the Tip.

Translate the stroke and every stage polygon so the tip sits at the origin,
and rotate each polygon's vertex order so it starts at the tip.
"""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.loop import recenter_on


@stage(
    id="S2.02",
    layer=Layer.ORIENTATION,
    dependencies=["S2.01"],
    description="Translate and re-index all polygons onto the tip",
)
def recentering(ctx: AnalysisContext) -> None:
    if not ctx.is_valid or ctx.tip is None:
        return

    dx, dy = -ctx.tip.point[0], -ctx.tip.point[1]
    vid = ctx.tip.vertex_id

    ctx.stroke = ctx.stroke + (dx, dy)
    for name in ("first_polygon", "hull", "simplified", "final_simplified"):
        loop = getattr(ctx, name)
        if loop is not None:
            setattr(ctx, name, recenter_on(loop, vid, dx, dy))

    ctx.offset = (dx, dy)

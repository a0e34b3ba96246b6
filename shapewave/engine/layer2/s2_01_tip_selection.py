"""S2.01 — Tip Selection.

Smallest interior angle, or the vertex farthest from the edge nearest to the
stroke's first point. Also records the reference direction from the tip
toward its predecessor.
"""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.tip import select_tip


@stage(
    id="S2.01",
    layer=Layer.ORIENTATION,
    dependencies=["S1.03"],
    description="Pick the tip vertex and its reference direction",
)
def tip_selection(ctx: AnalysisContext) -> None:
    if not ctx.is_valid or ctx.final_simplified is None:
        return

    tip = select_tip(ctx.final_simplified, ctx.config.tip_selection, ctx.first_point)
    if tip is None:
        ctx.reject("no tip vertex")
        return

    ctx.tip = tip

"""S1.03 — Shape Metrics & Validity.

Areas, perimeter and the shape ratio (min/max of hull and final area; the
"triangularity" when reducing to three vertices). Decides whether the stroke
is a valid shape.
"""

from __future__ import annotations

from shapewave.engine.config import SimplificationMode
from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.geometry import area_ratio


@stage(
    id="S1.03",
    layer=Layer.SIMPLIFICATION,
    dependencies=["S1.02"],
    description="Compute areas, perimeter, shape ratio and validity",
)
def shape_metrics(ctx: AnalysisContext) -> None:
    # Runs after a non-converged S1.02 too, so the shape ratio is still reported
    if ctx.rejection_reason or ctx.final_simplified is None:
        return

    cfg = ctx.config
    final = ctx.final_simplified
    ctx.area_of_final_simplified = final.area
    ctx.length_of_final_simplified = final.perimeter
    ctx.shape_ratio = area_ratio(ctx.area_of_hull, ctx.area_of_final_simplified)

    if len(final) < 3:
        ctx.reject(f"simplified polygon has {len(final)} vertices")
        return

    if cfg.simplification is SimplificationMode.VERTEX_COUNT:
        if len(final) != cfg.target_vertex_count:
            ctx.reject(f"simplified polygon has {len(final)} vertices, expected {cfg.target_vertex_count}")
            return
        if ctx.shape_ratio <= cfg.shape_ratio_threshold:
            ctx.reject(f"shape ratio {ctx.shape_ratio:.2f} ≤ {cfg.shape_ratio_threshold:.2f}")
            return

    if ctx.length_of_final_simplified <= cfg.min_perimeter:
        ctx.reject(f"perimeter {ctx.length_of_final_simplified:.1f} ≤ {cfg.min_perimeter:.1f}")
        return

    ctx.validated = True

"""S1.02 — Simplification.

VERTEX_COUNT: Douglas-Peucker over the hull, then reduce to exactly N
vertices. A symmetric hull (square, parallelogram) never reaches N, so the
reduction is retried over the dense first polygon; if that fails too, the
polygon reached at the cap is kept and S1.03 judges it. AREA_RATIO: fewest
vertices of the first polygon that keep the configured share of the
reference area (hull or first polygon).
"""

from __future__ import annotations

import logging

from shapewave.engine.config import AreaReference, SimplificationMode
from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.errors import SimplificationError
from shapewave.utils.loop import VertexLoop, normalize
from shapewave.utils.simplify import (
    reduce_to_vertex_count,
    reduce_until_area_ratio,
    simplify_loop,
    starting_tolerance,
)

logger = logging.getLogger(__name__)


def _reduce_to_target(ctx: AnalysisContext, epsilon: float, increment: float) -> VertexLoop:
    cfg = ctx.config
    try:
        return reduce_to_vertex_count(
            ctx.simplified, cfg.target_vertex_count, epsilon, increment, cfg.max_iterations
        )
    except SimplificationError as e:
        logger.debug("Hull did not converge, retrying on the first polygon: %s", e)

    try:
        return reduce_to_vertex_count(
            ctx.first_polygon, cfg.target_vertex_count, epsilon, increment, cfg.max_iterations
        )
    except SimplificationError as e:
        logger.error("  S1.02 iteration cap reached: %s", e)
        ctx.errors["S1.02"] = str(e)
        return e.result


@stage(
    id="S1.02",
    layer=Layer.SIMPLIFICATION,
    dependencies=["S1.01"],
    description="Simplify the polygon to its representative shape",
)
def simplification(ctx: AnalysisContext) -> None:
    if ctx.rejected or ctx.first_polygon is None or ctx.hull is None:
        return

    cfg = ctx.config
    epsilon, increment = starting_tolerance(ctx.first_polygon, cfg.epsilon_factor)

    if cfg.simplification is SimplificationMode.VERTEX_COUNT:
        ctx.simplified = simplify_loop(ctx.hull, epsilon)
        final = _reduce_to_target(ctx, epsilon, increment)
    else:
        ctx.simplified = ctx.first_polygon
        if cfg.area_reference is AreaReference.CONVEX_HULL:
            reference = ctx.area_of_hull
        else:
            reference = ctx.area_of_first_polygon
        final = reduce_until_area_ratio(
            ctx.simplified,
            reference,
            cfg.area_ratio_threshold,
            epsilon,
            increment,
            cfg.max_iterations,
        )
        if final is None:
            ctx.reject(f"no simplification keeps {cfg.area_ratio_threshold:.0%} of the area")
            return

    ctx.final_simplified = normalize(final)
    logger.debug(
        "Simplified %d → %d vertices (%s)",
        len(ctx.first_polygon),
        len(ctx.final_simplified),
        cfg.simplification.value,
    )

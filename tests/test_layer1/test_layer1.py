"""Tests for Layer 1 stages — full pipeline through Layer 0+1."""

# Import all stages to trigger registration
import shapewave.engine.layer0.s0_01_polygon_extraction
import shapewave.engine.layer0.s0_02_normalization
import shapewave.engine.layer1.s1_01_convex_hull
import shapewave.engine.layer1.s1_02_simplification
import shapewave.engine.layer1.s1_03_shape_metrics

import logging

import numpy as np
import pytest

from shapewave.engine.config import AnalysisConfig, AreaReference
from shapewave.engine.context import AnalysisContext
from shapewave.engine.pipeline import Pipeline
from shapewave.engine.registry import Layer, get_registry
from tests.conftest import CROSSING_STROKE, NEAR_TRIANGLE, SQUARE, TRIANGLE, densify, triangle_stroke, wobbly


def _run(points, config=None) -> AnalysisContext:
    ctx = AnalysisContext.from_stroke(points, config)
    pipeline = Pipeline()
    pipeline.run_layer(ctx, Layer.EXTRACTION)
    pipeline.run_layer(ctx, Layer.SIMPLIFICATION)
    return ctx


def test_layer1_registers_3_stages():
    layer1 = get_registry().get_layer(Layer.SIMPLIFICATION)
    assert [s.id for s in layer1] == ["S1.01", "S1.02", "S1.03"]


def test_triangle_preset_accepts_equilateral_stroke():
    ctx = _run(triangle_stroke(), AnalysisConfig.triangle())

    assert ctx.is_valid
    assert len(ctx.final_simplified) == 3
    assert ctx.shape_ratio > 0.99
    assert ctx.length_of_final_simplified == pytest.approx(600.0, rel=1e-3)
    assert ctx.final_simplified.signed_area > 0


def test_triangle_preset_shape_ratio_threshold():
    ctx = _run(densify(NEAR_TRIANGLE), AnalysisConfig.triangle())
    assert ctx.is_valid
    assert 0.9 < ctx.shape_ratio < 0.99

    ctx = _run(densify(NEAR_TRIANGLE), AnalysisConfig.triangle(shape_ratio_threshold=0.99))
    assert not ctx.is_valid
    assert "shape ratio" in ctx.rejection_reason


def test_square_with_triangle_preset_is_rejected_by_shape_ratio():
    # The hull's four corners never become three; the dense contour does
    ctx = _run(densify(SQUARE), AnalysisConfig.triangle())

    assert not ctx.is_valid
    assert "S1.02" not in ctx.errors
    assert len(ctx.final_simplified) == 3
    assert ctx.shape_ratio < 0.7
    assert "shape ratio" in ctx.rejection_reason


def test_iteration_cap_keeps_polygon_and_records_error(caplog):
    corners = [(0.0, 0.0), (200.0, 0.0), (200.0, 200.0), (0.0, 200.0)]
    with caplog.at_level(logging.ERROR, logger="shapewave.engine.layer1.s1_02_simplification"):
        ctx = _run(corners, AnalysisConfig.triangle(max_iterations=50))

    assert "S1.02" in ctx.errors
    assert "iteration cap" in caplog.text
    assert not ctx.is_valid
    assert len(ctx.final_simplified) == 4
    assert ctx.shape_ratio == pytest.approx(1.0)
    assert "expected 3" in ctx.rejection_reason


@pytest.mark.parametrize(
    "points",
    [triangle_stroke(), wobbly(TRIANGLE), densify(NEAR_TRIANGLE), CROSSING_STROKE, densify(SQUARE)],
    ids=["equilateral", "wobbly", "near_triangle", "crossing", "square"],
)
@pytest.mark.parametrize(
    "config", [AnalysisConfig(), AnalysisConfig.triangle()], ids=["area_ratio", "triangle"]
)
def test_final_area_bounded_by_hull(points, config):
    ctx = _run(points, config)

    assert ctx.area_of_hull + 1e-6 >= ctx.area_of_final_simplified >= 0
    assert 0 < ctx.shape_ratio <= 1


def test_area_ratio_mode_keeps_square_corners():
    ctx = _run(densify(SQUARE))
    assert ctx.is_valid
    assert sorted(ctx.final_simplified.as_tuples()) == sorted(SQUARE)
    assert ctx.area_of_final_simplified == pytest.approx(40000.0)


def test_area_ratio_mode_smooths_wobble():
    ctx = _run(wobbly(TRIANGLE))
    assert ctx.is_valid
    assert len(ctx.final_simplified) == 3
    assert ctx.simplified is ctx.first_polygon


def test_area_ratio_against_hull():
    ctx = _run(densify(SQUARE), AnalysisConfig(area_reference=AreaReference.CONVEX_HULL))
    assert ctx.is_valid
    assert ctx.area_of_hull == pytest.approx(40000.0)


def test_final_vertices_trace_back_to_first_polygon():
    ctx = _run(wobbly(TRIANGLE))
    for pt, vid in zip(ctx.final_simplified.points, ctx.final_simplified.ids):
        np.testing.assert_array_equal(pt, ctx.first_polygon.points[vid])


def test_small_perimeter_rejected():
    ctx = _run(densify(SQUARE), AnalysisConfig(min_perimeter=1000.0))
    assert not ctx.is_valid
    assert "perimeter" in ctx.rejection_reason

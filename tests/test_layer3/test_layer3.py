"""Tests for Layer 3 stages — full pipeline through wave synthesis."""

# Import all stages to trigger registration
import shapewave.engine.layer0.s0_01_polygon_extraction
import shapewave.engine.layer0.s0_02_normalization
import shapewave.engine.layer1.s1_01_convex_hull
import shapewave.engine.layer1.s1_02_simplification
import shapewave.engine.layer1.s1_03_shape_metrics
import shapewave.engine.layer2.s2_01_tip_selection
import shapewave.engine.layer2.s2_02_recentering
import shapewave.engine.layer3.s3_01_wave_extraction
import shapewave.engine.layer3.s3_02_waveform_rendering

import numpy as np
import pytest

from shapewave.engine.config import AnalysisConfig
from shapewave.engine.context import AnalysisContext
from shapewave.engine.pipeline import Pipeline
from shapewave.engine.registry import Layer, get_registry
from tests.conftest import TRIANGLE, triangle_stroke, wobbly


def test_layer3_registers_2_stages():
    layer3 = get_registry().get_layer(Layer.SYNTHESIS)
    assert [s.id for s in layer3] == ["S3.01", "S3.02"]


def test_full_pipeline_wobbly_triangle():
    ctx = Pipeline().run(AnalysisContext.from_stroke(wobbly(TRIANGLE)))

    assert ctx.is_valid
    assert not ctx.errors
    assert ctx.wave.length == pytest.approx(ctx.length_of_final_simplified)
    assert np.all(np.diff(ctx.wave.t) >= 0)

    assert len(ctx.buffer) == 44100
    peak = float(np.max(np.abs(ctx.buffer)))
    assert 0.9 < peak <= 0.95 + 1e-6


def test_straight_edges_render_silence():
    ctx = Pipeline().run(AnalysisContext.from_stroke(triangle_stroke(), AnalysisConfig.triangle()))
    assert ctx.is_valid
    assert np.max(np.abs(ctx.wave.amplitude)) < 1e-6
    assert not ctx.buffer.any()


def test_rendering_can_be_switched_off():
    config = AnalysisConfig(render_waveform=False)
    ctx = Pipeline().run(AnalysisContext.from_stroke(wobbly(TRIANGLE), config))
    assert ctx.wave is not None
    assert ctx.buffer is None
    assert "S3.02" not in ctx.completed_stages


def test_custom_buffer_length():
    config = AnalysisConfig(buffer_length=1024)
    ctx = Pipeline().run(AnalysisContext.from_stroke(wobbly(TRIANGLE), config))
    assert len(ctx.buffer) == 1024


def test_rejected_stroke_has_no_wave():
    ctx = Pipeline().run(AnalysisContext.from_stroke([(0.0, 0.0), (100.0, 0.0), (200.0, 0.0), (50.0, 0.0)]))
    assert not ctx.is_valid
    assert ctx.wave is None
    assert ctx.buffer is None


def test_streaming_matches_run():
    ctx = AnalysisContext.from_stroke(wobbly(TRIANGLE))
    events = list(Pipeline().run_streaming(ctx))
    assert [e["stage_id"] for e in events] == [
        "S0.01", "S0.02", "S1.01", "S1.02", "S1.03", "S2.01", "S2.02", "S3.01", "S3.02",
    ]
    assert all(e["status"] == "ok" for e in events)
    assert ctx.is_valid

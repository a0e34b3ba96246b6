"""S3.02 — Waveform Rendering.

Resample the wave into a fixed-length buffer with cosine interpolation,
peak-normalized to 0.95.
"""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, stage
from shapewave.utils.waveform import render_waveform


@stage(
    id="S3.02",
    layer=Layer.SYNTHESIS,
    dependencies=["S3.01"],
    description="Render one period of the wave into a sample buffer",
)
def waveform_rendering(ctx: AnalysisContext) -> None:
    if not ctx.is_valid or ctx.wave is None:
        return

    ctx.buffer = render_waveform(ctx.wave, ctx.config.buffer_length)

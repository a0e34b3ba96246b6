"""Convert a finished AnalysisContext into output models."""

from __future__ import annotations

from shapewave.engine.context import AnalysisContext
from shapewave.models.analysis import AnalysisResult, SynthesisOutput, TipInfo, WaveSample
from shapewave.utils.loop import VertexLoop
from shapewave.utils.waveform import loop_bars


def _loop(loop: VertexLoop | None) -> list[tuple[float, float]] | None:
    return loop.as_tuples() if loop is not None else None


def to_analysis_result(ctx: AnalysisContext) -> AnalysisResult:
    extraction = ctx.extraction
    tip = None
    if ctx.tip is not None:
        tip = TipInfo(
            point=ctx.tip.point,
            angle=ctx.tip.angle,
            initial_rotation=ctx.tip.initial_rotation,
            index=ctx.tip.index,
        )

    return AnalysisResult(
        is_valid=ctx.is_valid,
        rejection_reason=ctx.rejection_reason,
        errors=dict(ctx.errors),
        first_polygon=_loop(ctx.first_polygon),
        first_polygon_is_simple=extraction.is_simple if extraction else False,
        intersection=extraction.intersection if extraction else None,
        hull=_loop(ctx.hull),
        simplified=_loop(ctx.simplified),
        final_simplified=_loop(ctx.final_simplified),
        area_of_first_polygon=ctx.area_of_first_polygon,
        area_of_hull=ctx.area_of_hull,
        area_of_final_simplified=ctx.area_of_final_simplified,
        length_of_final_simplified=ctx.length_of_final_simplified,
        shape_ratio=ctx.shape_ratio,
        tip=tip,
        offset=ctx.offset,
        stroke=[(float(x), float(y)) for x, y in ctx.stroke],
        loop_bars=(
            loop_bars(ctx.length_of_final_simplified, ctx.config.reference_perimeter)
            if ctx.is_valid
            else 0.0
        ),
    )


def to_synthesis_output(ctx: AnalysisContext) -> SynthesisOutput:
    wave = ctx.wave
    samples: list[WaveSample] = []
    if wave is not None:
        samples = [
            WaveSample(
                t=float(wave.t[i]),
                amplitude=float(wave.amplitude[i]),
                point=(float(wave.points[i, 0]), float(wave.points[i, 1])),
                projected=(float(wave.projected[i, 0]), float(wave.projected[i, 1])),
            )
            for i in range(len(wave))
        ]
    return SynthesisOutput(
        wave=samples,
        buffer=ctx.buffer.tolist() if ctx.buffer is not None else [],
        sample_rate=ctx.config.sample_rate,
        length=wave.length if wave is not None else 0.0,
    )

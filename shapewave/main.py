"""Library entry points: analyze a finished stroke, optionally render its wave."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from shapewave.config import settings
from shapewave.engine.config import AnalysisConfig
from shapewave.engine.context import AnalysisContext
from shapewave.engine.pipeline import Pipeline, create_pipeline
from shapewave.models.analysis import AnalysisResult, SynthesisOutput
from shapewave.models.formatter import to_analysis_result, to_synthesis_output

logger = logging.getLogger(__name__)

_pipeline: Pipeline | None = None


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from SHAPEWAVE_LOG_LEVEL (or ``level``)."""
    load_dotenv()
    name = (level or settings.shapewave_log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def get_pipeline() -> Pipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = create_pipeline()
    return _pipeline


def run_stroke(points, config: AnalysisConfig | None = None) -> AnalysisContext:
    """Run every stage on one stroke and return the raw context."""
    ctx = AnalysisContext.from_stroke(points, config)
    return get_pipeline().run(ctx)


def analyze_stroke(points, config: AnalysisConfig | None = None) -> AnalysisResult:
    """Analyze a finished stroke. Invalid strokes come back with is_valid=False."""
    return to_analysis_result(run_stroke(points, config))


def render_stroke(
    points, config: AnalysisConfig | None = None
) -> tuple[AnalysisResult, SynthesisOutput]:
    """Analyze a stroke and return its wave and sample buffer as well."""
    ctx = run_stroke(points, config)
    return to_analysis_result(ctx), to_synthesis_output(ctx)

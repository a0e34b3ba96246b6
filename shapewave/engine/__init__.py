"""shapewave stage engine."""

from shapewave.engine.config import AnalysisConfig, AreaReference, SimplificationMode
from shapewave.engine.context import AnalysisContext
from shapewave.engine.pipeline import Pipeline, create_pipeline, register_stages
from shapewave.engine.registry import Layer, get_registry, stage

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "AnalysisConfig",
    "AnalysisContext",
    "AreaReference",
    "SimplificationMode",
    "Pipeline",
    "create_pipeline",
    "register_stages",
]

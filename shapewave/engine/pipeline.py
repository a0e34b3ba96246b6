"""Pipeline orchestrator — runs stages in dependency order with config gating."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time
from collections.abc import Generator
from typing import Any

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, StageRegistry, get_registry
from shapewave.errors import ShapewaveError

logger = logging.getLogger(__name__)

STAGE_PACKAGES = ["layer0", "layer1", "layer2", "layer3"]


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    for layer_name in STAGE_PACKAGES:
        package = importlib.import_module(f"shapewave.engine.{layer_name}")
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package.__name__}.{module_name}")


class Pipeline:
    """Orchestrates the stage pipeline for one stroke at a time."""

    def __init__(self, registry: StageRegistry | None = None) -> None:
        self.registry = registry or get_registry()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        """Run every applicable stage on the given context.

        Invariant violations (ShapewaveError) are recorded and re-raised. Any
        other stage failure is recorded in ``ctx.errors`` and invalidates the
        analysis.
        """
        start = time.perf_counter()
        ordered = self._ordered(ctx)

        logger.info("Pipeline: %d stages queued for %d-point stroke", len(ordered), len(ctx.stroke))

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
                ctx.completed_stages.add(spec.id)
                elapsed = (time.perf_counter() - t0) * 1000
                logger.debug("  %s completed in %.1fms", spec.id, elapsed)
            except ShapewaveError as e:
                ctx.errors[spec.id] = str(e)
                logger.error("  %s invariant violated: %s", spec.id, e)
                raise
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages in %.0fms (valid=%s%s)",
            len(ctx.completed_stages),
            len(ordered),
            total,
            ctx.is_valid,
            f", {ctx.rejection_reason}" if ctx.rejection_reason else "",
        )
        return ctx

    def run_streaming(self, ctx: AnalysisContext) -> Generator[dict[str, Any], None, None]:
        """Run the pipeline, yielding a progress dict after each stage.

        The caller's ``ctx`` is mutated in-place, so after the generator is
        exhausted the context contains all results (same as ``run()``).
        """
        ordered = self._ordered(ctx)
        total = len(ordered)

        for i, spec in enumerate(ordered):
            t0 = time.perf_counter()
            status = "ok"
            error = ""
            try:
                spec.fn(ctx)
                ctx.completed_stages.add(spec.id)
            except ShapewaveError as e:
                ctx.errors[spec.id] = str(e)
                logger.error("  %s invariant violated: %s", spec.id, e)
                raise
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                status = "error"
                error = str(e)

            yield {
                "stage_id": spec.id,
                "description": spec.description,
                "layer": spec.layer.name,
                "index": i,
                "total": total,
                "elapsed_ms": round((time.perf_counter() - t0) * 1000, 1),
                "status": status,
                "error": error,
                "rejected": ctx.rejected,
            }

    def run_layer(self, ctx: AnalysisContext, layer: Layer) -> AnalysisContext:
        """Run only stages in a specific layer."""
        for spec in self.registry.get_layer(layer):
            try:
                spec.fn(ctx)
                ctx.completed_stages.add(spec.id)
            except ShapewaveError:
                raise
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
        return ctx

    def _ordered(self, ctx: AnalysisContext):
        return self.registry.resolve_order(skip=self._config_gate(ctx))

    def _config_gate(self, ctx: AnalysisContext) -> set[str]:
        """Stages the configuration switches off."""
        skip: set[str] = set()
        if not ctx.config.render_waveform:
            skip.add("S3.02")  # Waveform rendering
        return skip


def create_pipeline() -> Pipeline:
    """Factory: registers all stages and returns a pipeline over them."""
    register_stages()
    return Pipeline()

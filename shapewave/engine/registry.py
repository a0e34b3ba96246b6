"""Stage registry.

Each stage is one function, registered by decorator with its layer and the
stages whose results it reads:

    @stage(id="S1.01", layer=Layer.SIMPLIFICATION, dependencies=["S0.02"])
    def convex_hull_stage(ctx: AnalysisContext) -> None:
        ctx.hull = convex_hull(ctx.first_polygon)
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from graphlib import CycleError, TopologicalSorter
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from shapewave.engine.context import AnalysisContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    EXTRACTION = 0
    SIMPLIFICATION = 1
    ORIENTATION = 2
    SYNTHESIS = 3


@dataclass(frozen=True)
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["AnalysisContext"], None]
    dependencies: tuple[str, ...] = ()
    description: str = ""


class StageRegistry:
    """Stages by id. Filled at import time, read-only afterwards."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get_layer(self, layer: Layer) -> list[StageSpec]:
        return sorted((s for s in self._stages.values() if s.layer == layer), key=lambda s: s.id)

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=lambda s: (s.layer, s.id))

    def resolve_order(self, skip: Iterable[str] = ()) -> list[StageSpec]:
        """Run order: dependencies first, ties broken by (layer, id).

        Skipping a stage skips every stage that reads its results as well.
        Raises ValueError for an unregistered dependency or a cycle.
        """
        skipped = self._with_dependents(set(skip))
        sorter: TopologicalSorter[str] = TopologicalSorter()
        for spec in self._stages.values():
            if spec.id in skipped:
                continue
            unknown = [d for d in spec.dependencies if d not in self._stages]
            if unknown:
                raise ValueError(f"Stage {spec.id} depends on unregistered stage(s): {unknown}")
            sorter.add(spec.id, *spec.dependencies)

        try:
            sorter.prepare()
        except CycleError as e:
            raise ValueError(f"Circular dependency among stages: {e.args[1]}") from e

        ordered: list[StageSpec] = []
        while sorter.is_active():
            ready = sorted(sorter.get_ready(), key=lambda sid: (self._stages[sid].layer, sid))
            ordered.extend(self._stages[sid] for sid in ready)
            sorter.done(*ready)
        return ordered

    def _with_dependents(self, skipped: set[str]) -> set[str]:
        grown = True
        while grown:
            grown = False
            for spec in self._stages.values():
                if spec.id not in skipped and skipped.intersection(spec.dependencies):
                    skipped.add(spec.id)
                    grown = True
        return skipped


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: Iterable[str] = (),
    description: str = "",
):
    """Register the decorated function as a pipeline stage."""

    def decorator(fn: Callable[["AnalysisContext"], None]):
        _registry.register(
            StageSpec(id=id, layer=layer, fn=fn, dependencies=tuple(dependencies), description=description)
        )
        return fn

    return decorator

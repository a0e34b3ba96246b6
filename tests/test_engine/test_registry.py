"""Tests for the stage registry."""

import pytest

from shapewave.engine.context import AnalysisContext
from shapewave.engine.registry import Layer, StageRegistry, StageSpec


def _noop(ctx: AnalysisContext) -> None:
    pass


def _chain() -> StageRegistry:
    reg = StageRegistry()
    reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop))
    reg.register(StageSpec(id="S3.01", layer=Layer.SYNTHESIS, fn=_noop, dependencies=("S0.01",)))
    reg.register(StageSpec(id="S3.02", layer=Layer.SYNTHESIS, fn=_noop, dependencies=("S3.01",)))
    return reg


def test_duplicate_id_rejected():
    reg = StageRegistry()
    reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop))
    with pytest.raises(ValueError):
        reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop))


def test_get_layer():
    reg = _chain()
    assert [s.id for s in reg.get_layer(Layer.SYNTHESIS)] == ["S3.01", "S3.02"]
    assert reg.get_layer(Layer.ORIENTATION) == []


def test_resolve_order_puts_dependencies_first():
    reg = StageRegistry()
    # Dependency registered after its dependent, in a later layer
    reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop, dependencies=("S1.01",)))
    reg.register(StageSpec(id="S1.01", layer=Layer.SIMPLIFICATION, fn=_noop))
    assert [s.id for s in reg.resolve_order()] == ["S1.01", "S0.01"]


def test_resolve_order_breaks_ties_by_layer_then_id():
    reg = StageRegistry()
    for sid, layer in [("S2.01", Layer.ORIENTATION), ("S0.02", Layer.EXTRACTION), ("S0.01", Layer.EXTRACTION)]:
        reg.register(StageSpec(id=sid, layer=layer, fn=_noop))
    assert [s.id for s in reg.resolve_order()] == ["S0.01", "S0.02", "S2.01"]


def test_skip_also_skips_dependents():
    reg = _chain()
    assert [s.id for s in reg.resolve_order(skip={"S3.02"})] == ["S0.01", "S3.01"]
    assert [s.id for s in reg.resolve_order(skip={"S3.01"})] == ["S0.01"]


def test_unregistered_dependency_rejected():
    reg = StageRegistry()
    reg.register(StageSpec(id="S1.01", layer=Layer.SIMPLIFICATION, fn=_noop, dependencies=("S0.9",)))
    with pytest.raises(ValueError, match="S0.9"):
        reg.resolve_order()


def test_resolve_order_detects_cycle():
    reg = StageRegistry()
    reg.register(StageSpec(id="S0.01", layer=Layer.EXTRACTION, fn=_noop, dependencies=("S0.02",)))
    reg.register(StageSpec(id="S0.02", layer=Layer.EXTRACTION, fn=_noop, dependencies=("S0.01",)))
    with pytest.raises(ValueError, match="Circular"):
        reg.resolve_order()

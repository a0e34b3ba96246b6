"""Layer 1 — hull, simplification and shape metrics."""

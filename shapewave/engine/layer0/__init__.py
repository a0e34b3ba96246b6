"""Layer 0 — polygon extraction and normalization."""

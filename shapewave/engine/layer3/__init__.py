"""Layer 3 — wave extraction and waveform rendering."""

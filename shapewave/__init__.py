"""Shape-to-waveform stroke analysis engine."""

"""Layer 2 — tip selection and re-centering."""

"""Leaf helpers: geometry, loops, hull, simplification, tip, wave."""

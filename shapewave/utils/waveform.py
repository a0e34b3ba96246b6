"""Resample a wave into one period of a fixed-length sample buffer."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from shapewave.utils.wave import Wave

DEFAULT_SAMPLE_RATE = 44100
PEAK_LEVEL = 0.95
SILENCE_THRESHOLD = 0.001

# Pentatonic note lines for frequency-by-height mapping
FM_NOTES: list[tuple[str, float]] = [
    ("C3", 130.81),
    ("D3", 146.83),
    ("E3", 164.81),
    ("G3", 196.0),
    ("A3", 220.0),
    ("C4", 261.63),
    ("D4", 293.66),
    ("E4", 329.63),
    ("G4", 392.0),
    ("A4", 440.0),
    ("C5", 523.25),
    ("D5", 587.33),
]
DEFAULT_FREQUENCY = 220.0


def render_waveform(wave: Wave, length: int = DEFAULT_SAMPLE_RATE) -> NDArray[np.float32]:
    """Cosine-interpolated, peak-normalized resampling of ``wave``.

    Output index i reads the wave at arc length i / length × total. The peak
    magnitude is scaled to 0.95; a flat wave (peak ≤ 0.001) or one with fewer
    than 2 samples renders as silence. A non-positive ``length`` gives an
    empty buffer.
    """
    if length <= 0:
        return np.zeros(0, dtype=np.float32)
    buffer = np.zeros(length, dtype=np.float32)
    if len(wave) < 2:
        return buffer

    order = np.argsort(wave.t, kind="stable")
    t = wave.t[order]
    amp = wave.amplitude[order]

    peak = float(np.max(np.abs(amp)))
    if peak <= SILENCE_THRESHOLD:
        return buffer
    scale = PEAK_LEVEL / peak

    total = float(t[-1])
    query = np.arange(length) / length * total

    # Monotone cursor: lower bracket is the last sample strictly before the query
    lower = np.clip(np.searchsorted(t, query, side="left") - 1, 0, len(t) - 2)
    t1 = t[lower]
    t2 = t[lower + 1]
    span = t2 - t1
    mu = np.where(span > 0, (query - t1) / np.where(span > 0, span, 1.0), 0.0)

    mu2 = (1 - np.cos(mu * np.pi)) / 2
    values = amp[lower] * (1 - mu2) + amp[lower + 1] * mu2
    buffer[:] = np.clip(values * scale, -1.0, 1.0)
    return buffer


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def snap_to_integer_ratio(ratio: float) -> float:
    """1, 2, 3, … for ratios ≥ 1; 1/2, 1/3, … below."""
    if ratio >= 1:
        return float(max(1, _round_half_up(ratio)))
    n = max(2, _round_half_up(1 / ratio)) if ratio > 0 else 2
    return 1.0 / n


def loop_bars(perimeter: float, reference_perimeter: float = 1000.0) -> float:
    """Playback length in bars for a shape of the given perimeter."""
    if reference_perimeter <= 0:
        raise ValueError("reference_perimeter must be positive")
    return snap_to_integer_ratio(perimeter / reference_perimeter)


def frequency_lines(canvas_height: float, num_lines: int = 8) -> list[tuple[float, float, str]]:
    """(y, frequency, note name) of each evenly spaced note line."""
    notes = FM_NOTES[:num_lines]
    spacing = canvas_height / (num_lines + 1)
    return [((i + 1) * spacing, freq, name) for i, (name, freq) in enumerate(notes)]


def frequency_for_y(y: float, canvas_height: float, num_lines: int = 8) -> tuple[float, int, float]:
    """(frequency, line index, line y) of the note line closest to ``y``."""
    notes = FM_NOTES[:num_lines]
    spacing = canvas_height / (num_lines + 1)
    index = _round_half_up(y / spacing) - 1
    index = max(0, min(num_lines - 1, index))
    freq = notes[index][1] if index < len(notes) else DEFAULT_FREQUENCY
    return freq, index, (index + 1) * spacing

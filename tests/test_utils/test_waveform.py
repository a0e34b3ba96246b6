"""Tests for waveform rendering and playback helpers."""

import numpy as np
import pytest

from shapewave.utils.wave import Wave
from shapewave.utils.waveform import (
    FM_NOTES,
    frequency_for_y,
    frequency_lines,
    loop_bars,
    render_waveform,
    snap_to_integer_ratio,
)


def _wave(t, amplitude) -> Wave:
    t = np.asarray(t, dtype=float)
    return Wave(
        t=t,
        amplitude=np.asarray(amplitude, dtype=float),
        points=np.zeros((len(t), 2)),
        projected=np.zeros((len(t), 2)),
    )


def test_cosine_interpolation():
    buf = render_waveform(_wave([0, 1, 2], [0, 1, 0]), 4)
    assert buf.dtype == np.float32
    np.testing.assert_allclose(buf, [0.0, 0.475, 0.95, 0.475], atol=1e-6)


def test_unsorted_samples_are_ordered_by_t():
    a = render_waveform(_wave([0, 1, 2], [0, 1, 0]), 8)
    b = render_waveform(_wave([2, 0, 1], [0, 0, 1]), 8)
    np.testing.assert_array_equal(a, b)


def test_output_in_range_and_length():
    rng = np.random.default_rng(11)
    t = np.sort(rng.uniform(0, 500, 300))
    buf = render_waveform(_wave(t, rng.normal(0, 1000, 300)), 44100)
    assert len(buf) == 44100
    assert np.all(np.abs(buf) <= 0.95 + 1e-6)


def test_flat_wave_is_silent():
    buf = render_waveform(_wave([0, 1, 2], [0.0005, -0.0005, 0.0]), 16)
    assert not buf.any()


def test_short_wave_is_silent():
    assert not render_waveform(_wave([0], [5.0]), 16).any()
    assert len(render_waveform(Wave(), 16)) == 16


def test_non_positive_length_is_empty():
    wave = _wave([0, 1, 2], [0.0, 1.0, 0.0])
    assert len(render_waveform(wave, 0)) == 0
    assert len(render_waveform(wave, -5)) == 0


def test_snap_to_integer_ratio():
    assert snap_to_integer_ratio(2.4) == 2.0
    assert snap_to_integer_ratio(2.5) == 3.0
    assert snap_to_integer_ratio(1.0) == 1.0
    assert snap_to_integer_ratio(0.5) == 0.5
    assert snap_to_integer_ratio(0.3) == pytest.approx(1 / 3)
    assert snap_to_integer_ratio(0.9) == 0.5


def test_loop_bars():
    assert loop_bars(1000.0) == 1.0
    assert loop_bars(2600.0) == 3.0
    assert loop_bars(250.0) == 0.25
    with pytest.raises(ValueError):
        loop_bars(100.0, 0.0)


def test_frequency_for_y():
    assert frequency_for_y(100.0, 900.0) == (FM_NOTES[0][1], 0, 100.0)
    freq, index, line_y = frequency_for_y(850.0, 900.0)
    assert (index, line_y) == (7, 800.0)
    assert freq == FM_NOTES[7][1]
    assert frequency_for_y(-50.0, 900.0)[1] == 0


def test_frequency_lines():
    lines = frequency_lines(900.0)
    assert len(lines) == 8
    assert lines[0] == (100.0, 130.81, "C3")

"""
Tests for Shannon sampling and sinc reconstruction.
"""

import numpy as np
import pytest

from mathviz.config import SamplingConfig
from mathviz.sampling import (
    SamplingEngine,
    compute_sampling,
    is_aliasing,
    reconstruct_sample_and_hold,
    reconstruct_shannon_nyquist,
    sample_signal,
    sampling_frequency_from_control,
    sinc,
    smooth_reconstruction,
    time_grid,
)


CONFIG = SamplingConfig()


class TestSinc:

    def test_sinc_at_zero(self):
        assert sinc(0) == 1.0

    @pytest.mark.parametrize("k", [-3, -2, -1, 1, 2, 3, 10])
    def test_sinc_at_integers(self, k):
        assert sinc(k) == pytest.approx(0.0, abs=1e-12)

    def test_sinc_half(self):
        assert sinc(0.5) == pytest.approx(2 / np.pi)


class TestTimeGrid:

    def test_grid_covers_window(self):
        t, y = time_grid(CONFIG)
        assert t[0] == 0
        assert t[-1] == pytest.approx(CONFIG.time_end)
        assert len(t) == 601
        np.testing.assert_allclose(np.diff(t), CONFIG.time_step)
        np.testing.assert_allclose(y, np.sin(2 * np.pi * CONFIG.signal_frequency * t))

    def test_grid_is_read_only(self):
        t, y = time_grid(CONFIG)
        with pytest.raises(ValueError):
            y[0] = 5.0


class TestControlMapping:

    def test_edges_and_centre(self):
        assert sampling_frequency_from_control(0, 800, CONFIG) == pytest.approx(CONFIG.fs_min)
        assert sampling_frequency_from_control(800, 800, CONFIG) == pytest.approx(CONFIG.fs_max)
        assert sampling_frequency_from_control(400, 800, CONFIG) == pytest.approx(2.6)

    def test_outside_canvas_is_clamped(self):
        assert sampling_frequency_from_control(-50, 800, CONFIG) == pytest.approx(CONFIG.fs_min)
        assert sampling_frequency_from_control(5000, 800, CONFIG) == pytest.approx(CONFIG.fs_max)

    @pytest.mark.parametrize("position", [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_position_stays_in_range(self, position):
        fs = sampling_frequency_from_control(position, 800, CONFIG)
        assert CONFIG.fs_min <= fs <= CONFIG.fs_max

    def test_engine_nan_pointer(self):
        state = SamplingEngine().set_control_position(float('nan'))
        assert state.sampling_frequency == pytest.approx(CONFIG.fs_min)
        assert np.all(np.isfinite(state.reconstructed_signal))

    def test_zero_width_canvas(self):
        assert sampling_frequency_from_control(100, 0, CONFIG) == CONFIG.fs_min


class TestSampling:

    @pytest.mark.parametrize("fs", [0.1, 0.37, 1.0, 2.6, 5.1, 50.0, 1e6])
    def test_sample_count_bound(self, fs):
        times, values = sample_signal(fs, CONFIG)
        assert len(times) == len(values)
        assert 1 <= len(times) <= CONFIG.max_samples
        assert times[-1] <= CONFIG.time_end
        assert np.all(np.diff(times) > CONFIG.duplicate_tolerance)

    def test_cap_is_hit_for_high_rates(self):
        times, _ = sample_signal(1e6, CONFIG)
        assert len(times) == CONFIG.max_samples

    def test_custom_cap(self):
        times, _ = sample_signal(50.0, SamplingConfig(max_samples=20))
        assert len(times) == 20

    def test_endpoint_is_clamped(self):
        # Ts = 10 s > window: one sample at 0, one clamped onto the end
        times, values = sample_signal(0.1, CONFIG)
        np.testing.assert_allclose(times, [0.0, CONFIG.time_end])
        np.testing.assert_allclose(values, np.sin(2 * np.pi * CONFIG.signal_frequency * times))

    def test_regular_spacing(self):
        times, _ = sample_signal(2.0, CONFIG)
        assert len(times) == 13
        np.testing.assert_allclose(times, np.arange(13) * 0.5, atol=1e-9)

    def test_tiny_period_terminates(self):
        times, _ = sample_signal(1e12, CONFIG)
        assert 1 <= len(times) <= CONFIG.max_samples

    @pytest.mark.parametrize("fs", [0.0, -1.0, float('nan'), float('inf')])
    def test_unusable_rate(self, fs):
        times, values = sample_signal(fs, CONFIG)
        assert len(times) == 0
        assert len(values) == 0


class TestReconstruction:

    def test_length_matches_grid(self):
        t, _ = time_grid(CONFIG)
        for fs in (0.1, 0.8, 3.3):
            derived = compute_sampling(fs, CONFIG, t)
            assert len(derived.reconstructed_signal) == len(t)

    def test_interpolates_samples(self):
        """At a sample time every other sinc term vanishes."""
        times, values = sample_signal(2.0, CONFIG)
        rebuilt = reconstruct_shannon_nyquist(times, values, 2.0, times)
        np.testing.assert_allclose(rebuilt, values, atol=1e-9)

    def test_matches_original_above_nyquist(self):
        t, y = time_grid(CONFIG)
        derived = compute_sampling(5.0, CONFIG, t)
        # finite sample set: compare away from the window edges
        middle = (t >= 2.0) & (t <= 4.0)
        np.testing.assert_allclose(derived.reconstructed_signal[middle], y[middle], atol=0.1)

    def test_fails_below_nyquist(self):
        t, y = time_grid(CONFIG)
        derived = compute_sampling(0.6, CONFIG, t)
        middle = (t >= 2.0) & (t <= 4.0)
        assert np.max(np.abs(derived.reconstructed_signal[middle] - y[middle])) > 0.2

    @pytest.mark.parametrize("fs", [0.0, -2.0, float('nan'), float('inf')])
    def test_unusable_rate(self, fs):
        t, _ = time_grid(CONFIG)
        derived = compute_sampling(fs, CONFIG, t)
        assert len(derived.sampled_time_points) == 0
        assert len(derived.sampled_values) == 0
        assert len(derived.reconstructed_signal) == len(t)
        assert np.all(derived.reconstructed_signal == 0)
        assert derived.is_aliasing

    def test_no_samples_gives_zeros(self):
        t, _ = time_grid(CONFIG)
        assert np.all(reconstruct_shannon_nyquist([], [], 1.0, t) == 0)


class TestAliasing:

    def test_boundary(self):
        nyquist = CONFIG.nyquist_frequency
        assert compute_sampling(nyquist - 1e-6, CONFIG).is_aliasing
        assert not compute_sampling(nyquist + 1e-6, CONFIG).is_aliasing

    def test_non_positive_is_aliasing(self):
        assert is_aliasing(0.0, 1.0)
        assert is_aliasing(-3.0, 1.0)
        assert is_aliasing(float('nan'), 1.0)
        assert is_aliasing(float('inf'), 1.0)


class TestSampleAndHold:

    def test_staircase(self):
        times = np.array([0.0, 1.0, 2.0])
        values = np.array([1.0, -1.0, 0.5])
        t = np.array([0.0, 0.5, 0.99, 1.0, 1.5, 2.0, 2.7])
        np.testing.assert_array_equal(
            reconstruct_sample_and_hold(times, values, t),
            [1.0, 1.0, 1.0, -1.0, -1.0, 0.5, 0.5],
        )

    def test_no_samples(self):
        t, _ = time_grid(CONFIG)
        assert np.all(reconstruct_sample_and_hold([], [], t) == 0)


class TestSmoothing:

    def test_removes_high_frequency(self):
        t, y = time_grid(CONFIG)
        noisy = y + 0.5 * np.sin(2 * np.pi * 20 * t)
        smoothed = smooth_reconstruction(noisy, CONFIG.grid_rate, 2.0)
        middle = (t >= 1.0) & (t <= 5.0)
        assert np.max(np.abs(smoothed[middle] - y[middle])) < 0.1

    def test_cutoff_out_of_range_is_identity(self):
        _, y = time_grid(CONFIG)
        np.testing.assert_array_equal(smooth_reconstruction(y, CONFIG.grid_rate, 80.0), y)
        np.testing.assert_array_equal(smooth_reconstruction(y, CONFIG.grid_rate, 0.0), y)

    def test_short_signal_is_identity(self):
        y = np.arange(5.0)
        np.testing.assert_array_equal(smooth_reconstruction(y, 100.0, 2.0), y)


class TestSamplingEngine:

    def test_initial_state(self):
        engine = SamplingEngine()
        state = engine.state
        assert state.sampling_frequency == pytest.approx(2.6)
        assert state.nyquist_frequency == pytest.approx(1.0)
        assert not state.is_aliasing
        assert len(state.reconstructed_signal) == len(state.time_vector)
        assert state.canvas_width == 800
        assert state.canvas_height == 300

    def test_pointer_moves_recompute(self):
        engine = SamplingEngine()
        grid = engine.state.time_vector
        state = engine.set_control_position(0)
        assert state.sampling_frequency == pytest.approx(CONFIG.fs_min)
        assert state.is_aliasing
        assert state.time_vector is grid

    def test_canvas_resize_keeps_pointer_pixels(self):
        engine = SamplingEngine()
        engine.set_control_position(400)
        state = engine.set_canvas_width(1600)
        assert state.sampling_frequency == pytest.approx(CONFIG.fs_min + 0.25 * (CONFIG.fs_max - CONFIG.fs_min))

    def test_stale_result_is_discarded(self):
        engine = SamplingEngine()
        old_revision, old_fs = engine.request()
        engine.set_control_position(0)
        current = engine.state
        assert not engine.apply(old_revision, compute_sampling(old_fs, engine.config, engine.time_vector))
        assert engine.state.sampling_frequency == current.sampling_frequency

    def test_latest_result_is_applied(self):
        engine = SamplingEngine()
        engine.control_position = 800
        revision, fs = engine.request()
        assert engine.apply(revision, compute_sampling(fs, engine.config, engine.time_vector))
        assert engine.state.sampling_frequency == pytest.approx(CONFIG.fs_max)

    def test_listeners(self):
        engine = SamplingEngine()
        seen = []
        engine.subscribe(seen.append)
        engine.set_control_position(100)
        assert len(seen) == 1
        assert seen[0].sampling_frequency == engine.state.sampling_frequency

    def test_snapshot_keys(self):
        snapshot = SamplingEngine().state.as_dict()
        assert set(snapshot) == {
            'timeVector', 'originalSignal', 'sampledTimePoints', 'sampledValues',
            'reconstructedSignal', 'samplingFrequency', 'nyquistFrequency',
            'isAliasing', 'canvasWidth', 'canvasHeight',
        }
        assert len(snapshot['sampledTimePoints']) == len(snapshot['sampledValues'])

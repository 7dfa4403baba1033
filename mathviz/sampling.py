"""Shannon sampling and Whittaker-Shannon reconstruction of a sine wave."""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np
from scipy import signal as sc

from mathviz.config import SamplingConfig

logger = logging.getLogger(__name__)


def _usable_rate(fs) -> bool:
    # NaN, inf and fs <= 0 all mean "no sampling"
    return fs > 0 and math.isfinite(fs)


def sinc(x):
    """Normalized sinc, sin(pi*x) / (pi*x), with sinc(0) = 1."""
    return np.sinc(x)


def time_grid(config: SamplingConfig) -> Tuple[np.ndarray, np.ndarray]:
    """
    Builds the dense time grid and the reference signal sin(2*pi*f0*t) on it.

    Both arrays are read-only; they never change for a given config.
    """
    n_points = int(round(config.time_end / config.time_step)) + 1
    t = np.linspace(0, config.time_end, n_points)
    y = np.sin(2 * np.pi * config.signal_frequency * t)
    t.flags.writeable = False
    y.flags.writeable = False
    return t, y


def sampling_frequency_from_control(position: float, canvas_width: float,
                                    config: SamplingConfig) -> float:
    """
    Maps a pointer position on the canvas to a sampling frequency.

    Args:
        position (float): Pointer x coordinate, may lie outside the canvas.
        canvas_width (float): Width of the canvas the position refers to.
        config (SamplingConfig): Provides the [fs_min, fs_max] range.

    Returns:
        float: The sampling frequency, always inside [fs_min, fs_max].
    """
    position = float(position)
    canvas_width = float(canvas_width)
    if math.isnan(position):
        position = 0.0
    if not canvas_width > 0:
        return config.fs_min

    normalized = min(max(position, 0.0), canvas_width) / canvas_width
    fs = config.fs_min + normalized * (config.fs_max - config.fs_min)
    return min(max(fs, config.fs_min), config.fs_max)


def sample_signal(fs: float, config: SamplingConfig) -> Tuple[np.ndarray, np.ndarray]:
    """
    Samples the reference sine every 1/fs seconds from 0 to time_end.

    The last sample is clamped onto time_end, sample times closer than
    duplicate_tolerance to the previous one are dropped, and at most
    max_samples points are returned. fs <= 0, NaN or inf gives no samples.

    Args:
        fs (float): The sampling frequency (in Hz).
        config (SamplingConfig): Reference signal and limits.

    Returns:
        tuple: (sample times, sample values) as NumPy arrays of equal length.
    """
    fs = float(fs)
    if not _usable_rate(fs):
        return np.array([]), np.array([])

    t_end = config.time_end
    T_s = 1 / fs
    times: List[float] = []

    # Skipped duplicates still count, so the loop ends even when T_s is
    # below the duplicate tolerance.
    for step in range(2 * config.max_samples):
        t = step * T_s if step else 0.0
        if t > t_end + T_s / 2:
            break
        if t > t_end and times and times[-1] >= t_end:
            break
        t = min(t, t_end)
        if times and abs(t - times[-1]) < config.duplicate_tolerance:
            continue
        times.append(t)
        if len(times) >= config.max_samples:
            logger.debug("Sample cap of %d reached at fs=%g Hz", config.max_samples, fs)
            break

    t_sampled = np.array(times)
    y_sampled = np.sin(2 * np.pi * config.signal_frequency * t_sampled)
    return t_sampled, y_sampled


def reconstruct_shannon_nyquist(t_sampled, y_sampled, fs, t_reconstructed):
    """
    Reconstructs a sampled signal on a dense time grid with the Whittaker-Shannon formula.

    Args:
        t_sampled (numpy.ndarray): Times of the samples.
        y_sampled (numpy.ndarray): Values of the samples.
        fs (float): The sampling frequency (in Hz).
        t_reconstructed (numpy.ndarray): Times at which the signal is rebuilt.

    Returns:
        numpy.ndarray: Same length as t_reconstructed; all zeros without samples.
    """
    t_sampled = np.asarray(t_sampled, dtype=float)
    y_sampled = np.asarray(y_sampled, dtype=float)
    t_reconstructed = np.asarray(t_reconstructed, dtype=float)

    if len(t_sampled) == 0 or not _usable_rate(fs):
        return np.zeros_like(t_reconstructed)

    # One row per sample, one column per grid time:
    # sinc_matrix[n, k] = sinc(fs * (t_k - t_n))
    sinc_matrix = sinc(fs * (t_reconstructed[None, :] - t_sampled[:, None]))

    # Each grid point is the sum of every sample weighted by its sinc
    return np.sum(y_sampled[:, None] * sinc_matrix, axis=0)


def reconstruct_sample_and_hold(t_sampled, y_sampled, t_reconstructed):
    """
    Reconstructs a sampled signal by holding each sample until the next one.

    Args:
        t_sampled (numpy.ndarray): Increasing times of the samples.
        y_sampled (numpy.ndarray): Values of the samples.
        t_reconstructed (numpy.ndarray): Times at which the signal is rebuilt.

    Returns:
        numpy.ndarray: The staircase signal; all zeros without samples.
    """
    t_sampled = np.asarray(t_sampled, dtype=float)
    y_sampled = np.asarray(y_sampled, dtype=float)
    t_reconstructed = np.asarray(t_reconstructed, dtype=float)

    if len(t_sampled) == 0:
        return np.zeros_like(t_reconstructed)

    # Index of the latest sample taken at or before each grid time
    sample_indices = np.searchsorted(t_sampled, t_reconstructed, side='right') - 1
    sample_indices = np.clip(sample_indices, 0, len(y_sampled) - 1)
    return y_sampled[sample_indices]


def smooth_reconstruction(signal, grid_rate, cutoff, filter_order=5):
    """
    Applies a zero-phase Butterworth low-pass filter to a reconstructed signal.

    Args:
        signal (numpy.ndarray): Signal on the dense grid.
        grid_rate (float): Rate of the dense grid (in Hz).
        cutoff (float): Cutoff frequency of the filter (in Hz).
        filter_order (int, optional): Order of the Butterworth filter. Defaults to 5.

    Returns:
        numpy.ndarray: The filtered signal, or the input unchanged when the
        cutoff is not below the grid's Nyquist rate or the signal is too
        short for forward-backward filtering.
    """
    signal = np.asarray(signal, dtype=float)
    normal_cutoff = cutoff / (grid_rate / 2)
    if not 0 < normal_cutoff < 1:
        return signal

    b, a = sc.butter(filter_order, normal_cutoff, btype='low', analog=False)
    if len(signal) <= 3 * max(len(a), len(b)):
        return signal
    return sc.filtfilt(b, a, signal)


def is_aliasing(fs: float, nyquist_frequency: float) -> bool:
    return not _usable_rate(fs) or fs < nyquist_frequency


@dataclass
class SamplingDerived:
    sampling_frequency: float
    sampled_time_points: np.ndarray
    sampled_values: np.ndarray
    reconstructed_signal: np.ndarray
    is_aliasing: bool


def compute_sampling(fs: float, config: SamplingConfig,
                     time_vector: Optional[np.ndarray] = None) -> SamplingDerived:
    """Samples, reconstructs and classifies for one sampling frequency."""
    if time_vector is None:
        time_vector, _ = time_grid(config)
    fs = float(fs)
    t_sampled, y_sampled = sample_signal(fs, config)
    reconstructed = reconstruct_shannon_nyquist(t_sampled, y_sampled, fs, time_vector)
    return SamplingDerived(
        sampling_frequency=fs,
        sampled_time_points=t_sampled,
        sampled_values=y_sampled,
        reconstructed_signal=reconstructed,
        is_aliasing=is_aliasing(fs, config.nyquist_frequency),
    )


@dataclass
class SamplingState:
    time_vector: np.ndarray
    original_signal: np.ndarray
    sampled_time_points: np.ndarray
    sampled_values: np.ndarray
    reconstructed_signal: np.ndarray
    sampling_frequency: float
    nyquist_frequency: float
    is_aliasing: bool
    canvas_width: float
    canvas_height: float

    def as_dict(self) -> dict:
        return {
            'timeVector': self.time_vector.tolist(),
            'originalSignal': self.original_signal.tolist(),
            'sampledTimePoints': self.sampled_time_points.tolist(),
            'sampledValues': self.sampled_values.tolist(),
            'reconstructedSignal': self.reconstructed_signal.tolist(),
            'samplingFrequency': self.sampling_frequency,
            'nyquistFrequency': self.nyquist_frequency,
            'isAliasing': self.is_aliasing,
            'canvasWidth': self.canvas_width,
            'canvasHeight': self.canvas_height,
        }


class SamplingEngine:
    """
    Holds the sampling inputs (pointer position, canvas width) and the
    derived state. Every input change bumps ``revision``; a result is only
    installed if it was computed for the current revision.
    """

    def __init__(self, config: Optional[SamplingConfig] = None):
        self.config = config or SamplingConfig()
        self.time_vector, self.original_signal = time_grid(self.config)
        self.canvas_width = float(self.config.canvas_width)
        self.control_position = self.canvas_width / 2
        self.revision = 0
        self._listeners: List[Callable[[SamplingState], None]] = []
        self._derived: Optional[SamplingDerived] = None
        logger.info("Nyquist frequency: %g Hz", self.config.nyquist_frequency)
        self._recompute()

    @property
    def sampling_frequency(self) -> float:
        return sampling_frequency_from_control(
            self.control_position, self.canvas_width, self.config
        )

    @property
    def state(self) -> SamplingState:
        d = self._derived
        return SamplingState(
            time_vector=self.time_vector,
            original_signal=self.original_signal,
            sampled_time_points=d.sampled_time_points,
            sampled_values=d.sampled_values,
            reconstructed_signal=d.reconstructed_signal,
            sampling_frequency=d.sampling_frequency,
            nyquist_frequency=self.config.nyquist_frequency,
            is_aliasing=d.is_aliasing,
            canvas_width=self.canvas_width,
            canvas_height=float(self.config.canvas_height),
        )

    def subscribe(self, callback: Callable[[SamplingState], None]) -> None:
        self._listeners.append(callback)

    def set_control_position(self, position: float) -> SamplingState:
        self.control_position = float(position)
        return self._recompute()

    def set_canvas_width(self, width: float) -> SamplingState:
        # fs follows the pointer's relative position on the new canvas
        self.canvas_width = float(width)
        return self._recompute()

    def request(self) -> Tuple[int, float]:
        """Invalidate the current result and return (revision, fs) to compute."""
        self.revision += 1
        return self.revision, self.sampling_frequency

    def apply(self, revision: int, derived: SamplingDerived) -> bool:
        """Install ``derived`` unless a newer request has been made since."""
        if revision != self.revision:
            logger.debug("Discarding stale sampling result (revision %d, current %d)",
                         revision, self.revision)
            return False
        if self._derived is not None and self._derived.is_aliasing != derived.is_aliasing:
            logger.debug("Aliasing %s at fs=%g Hz",
                         "started" if derived.is_aliasing else "stopped",
                         derived.sampling_frequency)
        self._derived = derived
        state = self.state
        for callback in self._listeners:
            callback(state)
        return True

    def _recompute(self) -> SamplingState:
        revision, fs = self.request()
        self.apply(revision, compute_sampling(fs, self.config, self.time_vector))
        return self.state

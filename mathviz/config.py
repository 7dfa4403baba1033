"""
Visualization Constants
=======================

Centralized defaults for the three visualizations. The numerical cores
take one of the config dataclasses below so that thresholds and safety
caps can be tuned without touching the algorithms.

Usage:
    from mathviz.config import BasisConfig, SamplingConfig

    config = SamplingConfig(max_samples=500)
"""

from dataclasses import dataclass
from typing import Tuple


# =============================================================================
# BASIS TRANSFORMATION
# =============================================================================

DEGENERACY_THRESHOLD = 0.001   # |det M| below this -> no inverse, no dual basis
BASIS_SLIDER_RANGE = (-2.0, 2.0)
BASIS_SLIDER_STEP = 0.1
GRID_RANGE = 10                # grid lines drawn from -10 to 10 basis steps


# =============================================================================
# SHANNON SAMPLING
# =============================================================================

SHANNON_CANVAS_WIDTH = 800
SHANNON_CANVAS_HEIGHT = 300

SIGNAL_FREQUENCY = 0.5         # Hz, reference sine wave
TIME_END = 6.0                 # s
TIME_STEP = 1 / 100            # s, dense grid for original/reconstruction

FS_MIN = 0.1                   # Hz
FS_MAX = 5.1                   # Hz

MAX_SAMPLES = 1000             # hard stop for fs -> 0
DUPLICATE_TOLERANCE = 1e-9     # s, near-identical sample times are merged


# =============================================================================
# HILBERT SIGMOID
# =============================================================================

ALPHA_RANGE = (0.01, 0.3)
ALPHA_DEFAULT = 0.2
FREQUENCY_LIMIT = 3.0          # plot f in [-3, 3]
POINTS_PER_SIDE = 50


@dataclass(frozen=True)
class BasisConfig:
    degeneracy_threshold: float = DEGENERACY_THRESHOLD
    slider_min: float = BASIS_SLIDER_RANGE[0]
    slider_max: float = BASIS_SLIDER_RANGE[1]
    slider_step: float = BASIS_SLIDER_STEP
    default_e1: Tuple[float, float] = (1.0, 0.0)
    default_e2: Tuple[float, float] = (0.0, 1.0)
    default_probe: Tuple[float, float] = (1.0, 1.0)
    grid_range: int = GRID_RANGE

    def __post_init__(self):
        if self.degeneracy_threshold < 0:
            raise ValueError(f"degeneracy_threshold must be >= 0, got {self.degeneracy_threshold}")
        if self.slider_min >= self.slider_max:
            raise ValueError(f"slider range is empty: [{self.slider_min}, {self.slider_max}]")
        if self.slider_step <= 0:
            raise ValueError(f"slider_step must be positive, got {self.slider_step}")
        if self.grid_range < 1:
            raise ValueError(f"grid_range must be >= 1, got {self.grid_range}")


@dataclass(frozen=True)
class SamplingConfig:
    signal_frequency: float = SIGNAL_FREQUENCY
    time_end: float = TIME_END
    time_step: float = TIME_STEP
    fs_min: float = FS_MIN
    fs_max: float = FS_MAX
    max_samples: int = MAX_SAMPLES
    duplicate_tolerance: float = DUPLICATE_TOLERANCE
    canvas_width: float = SHANNON_CANVAS_WIDTH
    canvas_height: float = SHANNON_CANVAS_HEIGHT

    def __post_init__(self):
        if self.signal_frequency <= 0:
            raise ValueError(f"signal_frequency must be positive, got {self.signal_frequency}")
        if self.time_end <= 0 or self.time_step <= 0:
            raise ValueError(
                f"time_end and time_step must be positive, got {self.time_end}, {self.time_step}"
            )
        if self.time_step > self.time_end:
            raise ValueError(f"time_step {self.time_step} exceeds time_end {self.time_end}")
        if self.fs_min > self.fs_max:
            raise ValueError(f"fs_min {self.fs_min} > fs_max {self.fs_max}")
        if self.max_samples < 1:
            raise ValueError(f"max_samples must be >= 1, got {self.max_samples}")
        if self.duplicate_tolerance < 0:
            raise ValueError(f"duplicate_tolerance must be >= 0, got {self.duplicate_tolerance}")

    @property
    def nyquist_frequency(self) -> float:
        return 2 * self.signal_frequency

    @property
    def grid_rate(self) -> float:
        """Rate of the dense time grid in Hz."""
        return 1 / self.time_step


@dataclass(frozen=True)
class HilbertConfig:
    alpha_min: float = ALPHA_RANGE[0]
    alpha_max: float = ALPHA_RANGE[1]
    alpha_default: float = ALPHA_DEFAULT
    f_limit: float = FREQUENCY_LIMIT
    points_per_side: int = POINTS_PER_SIDE

    def __post_init__(self):
        if not self.alpha_min <= self.alpha_default <= self.alpha_max:
            raise ValueError(
                f"alpha_default {self.alpha_default} outside [{self.alpha_min}, {self.alpha_max}]"
            )
        if self.f_limit <= 0:
            raise ValueError(f"f_limit must be positive, got {self.f_limit}")
        if self.points_per_side < 1:
            raise ValueError(f"points_per_side must be >= 1, got {self.points_per_side}")

"""Smoothed sign function used to picture the Hilbert transform's -i*sgn(f).

G(f) = -exp(alpha * f) for f < 0 and exp(-alpha * f) for f >= 0. As alpha
goes to 0 the curve tends to sgn(f); the jump at f = 0 is kept.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from mathviz.config import HilbertConfig


@dataclass
class HilbertCurve:
    f_neg: np.ndarray
    g_neg: np.ndarray
    f_pos: np.ndarray
    g_pos: np.ndarray
    alpha: float


def frequency_axis(config: HilbertConfig) -> Tuple[np.ndarray, np.ndarray]:
    """Negative and positive frequency halves, both ending/starting at 0."""
    f_neg = np.linspace(-config.f_limit, 0, config.points_per_side + 1)
    f_pos = np.linspace(0, config.f_limit, config.points_per_side + 1)
    return f_neg, f_pos


def sigmoid_response(alpha: float, config: Optional[HilbertConfig] = None) -> HilbertCurve:
    config = config or HilbertConfig()
    alpha = min(max(float(alpha), config.alpha_min), config.alpha_max)
    f_neg, f_pos = frequency_axis(config)
    return HilbertCurve(
        f_neg=f_neg,
        g_neg=-np.exp(alpha * f_neg),
        f_pos=f_pos,
        g_pos=np.exp(-alpha * f_pos),
        alpha=alpha,
    )

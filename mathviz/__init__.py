"""Numerical cores behind the basis, Shannon sampling and Hilbert visualizations."""

from mathviz.basis import BasisController, BasisState, Vec2, recompute
from mathviz.config import BasisConfig, HilbertConfig, SamplingConfig
from mathviz.hilbert import HilbertCurve, sigmoid_response
from mathviz.sampling import (
    SamplingDerived,
    SamplingEngine,
    SamplingState,
    compute_sampling,
    reconstruct_shannon_nyquist,
    sample_signal,
    sinc,
)

__version__ = "0.1.0"

__all__ = [
    "BasisConfig",
    "BasisController",
    "BasisState",
    "HilbertConfig",
    "HilbertCurve",
    "SamplingConfig",
    "SamplingDerived",
    "SamplingEngine",
    "SamplingState",
    "Vec2",
    "compute_sampling",
    "reconstruct_shannon_nyquist",
    "recompute",
    "sample_signal",
    "sigmoid_response",
    "sinc",
]

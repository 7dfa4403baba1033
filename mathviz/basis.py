"""Primal/dual basis transformation of the plane.

Given two basis vectors e1, e2 (the columns of M) and a probe vector v in
standard coordinates, computes det M, M^-1, the dual basis (rows of M^-1)
and the contravariant (primal) and covariant (dual) components of v.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from mathviz.config import BasisConfig, DEGENERACY_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vec2:
    x: float
    y: float

    @classmethod
    def nan(cls) -> "Vec2":
        return cls(math.nan, math.nan)

    @classmethod
    def of(cls, pair) -> "Vec2":
        if isinstance(pair, Vec2):
            return pair
        x, y = pair
        return cls(float(x), float(y))

    @property
    def is_defined(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y])

    def as_dict(self) -> dict:
        return {'x': self.x, 'y': self.y}


def _nan_matrix() -> np.ndarray:
    return np.full((2, 2), np.nan)


@dataclass
class BasisState:
    """Snapshot of every quantity derived from (e1, e2, v_std).

    NaN entries mean "undefined, do not draw". ``is_invertible`` says the
    same thing for the inverse, the dual basis and ``v_primal`` at once.
    """

    e1: Vec2
    e2: Vec2
    det_m: float
    m_inv: np.ndarray
    epsilon1: Vec2
    epsilon2: Vec2
    v_std: Vec2
    v_primal: Vec2
    v_dual: Vec2
    is_invertible: bool

    @property
    def matrix(self) -> np.ndarray:
        """M with e1, e2 as columns."""
        return np.array([[self.e1.x, self.e2.x],
                         [self.e1.y, self.e2.y]])

    def as_dict(self) -> dict:
        return {
            'e1': self.e1.as_dict(),
            'e2': self.e2.as_dict(),
            'epsilon1': self.epsilon1.as_dict(),
            'epsilon2': self.epsilon2.as_dict(),
            'detM': self.det_m,
            'M_inv': self.m_inv.tolist(),
            'v_std': self.v_std.as_dict(),
            'v_primal': self.v_primal.as_dict(),
            'v_dual': self.v_dual.as_dict(),
            'valid': self.is_invertible,
        }


def recompute(e1, e2, v_std, threshold: float = DEGENERACY_THRESHOLD) -> BasisState:
    """
    Recomputes the full derived state of a 2D basis.

    Args:
        e1, e2: Basis vectors (Vec2 or (x, y) pairs). Parallel or zero
            vectors are valid input.
        v_std: Probe vector in standard coordinates.
        threshold: |det M| below which M is treated as singular.

    Returns:
        BasisState: Every field is rewritten. Never raises for numeric input.
    """
    e1, e2, v_std = Vec2.of(e1), Vec2.of(e2), Vec2.of(v_std)

    det = e1.x * e2.y - e1.y * e2.x

    # abs(nan) < threshold is False, so compare the other way round
    if not abs(det) >= threshold:
        logger.debug("Degenerate basis e1=%s e2=%s (det=%g)", e1, e2, det)
        m_inv = _nan_matrix()
        epsilon1 = epsilon2 = v_primal = Vec2.nan()
        invertible = False
    else:
        inv_det = 1.0 / det
        m_inv = inv_det * np.array([[e2.y, -e2.x],
                                    [-e1.y, e1.x]])
        epsilon1 = Vec2(float(m_inv[0, 0]), float(m_inv[0, 1]))
        epsilon2 = Vec2(float(m_inv[1, 0]), float(m_inv[1, 1]))
        v_primal = Vec2(epsilon1.dot(v_std), epsilon2.dot(v_std))
        invertible = True

    # Covariant components are projections, defined for any basis
    v_dual = Vec2(v_std.dot(e1), v_std.dot(e2))

    return BasisState(
        e1=e1,
        e2=e2,
        det_m=det,
        m_inv=m_inv,
        epsilon1=epsilon1,
        epsilon2=epsilon2,
        v_std=v_std,
        v_primal=v_primal,
        v_dual=v_dual,
        is_invertible=invertible,
    )


@dataclass
class BasisController:
    """Owns the basis inputs and keeps ``state`` in sync with them.

    Both input channels (basis vectors and probe vector) go through
    ``_recompute``, which always reads the current stored inputs.
    """

    config: BasisConfig = field(default_factory=BasisConfig)
    e1: Optional[Vec2] = None
    e2: Optional[Vec2] = None
    v_std: Optional[Vec2] = None
    state: Optional[BasisState] = field(default=None, init=False, compare=False)
    _listeners: List[Callable[[BasisState], None]] = field(
        default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.e1 = Vec2.of(self.e1 if self.e1 is not None else self.config.default_e1)
        self.e2 = Vec2.of(self.e2 if self.e2 is not None else self.config.default_e2)
        self.v_std = Vec2.of(self.v_std if self.v_std is not None else self.config.default_probe)
        self.state = self._recompute()

    def subscribe(self, callback: Callable[[BasisState], None]) -> None:
        self._listeners.append(callback)

    def set_basis(self, e1=None, e2=None) -> BasisState:
        if e1 is not None:
            self.e1 = Vec2.of(e1)
        if e2 is not None:
            self.e2 = Vec2.of(e2)
        return self._recompute()

    def set_basis_component(self, vector: str, axis: str, value: float) -> BasisState:
        """Set one slider value, e.g. ``('e2', 'x', 0.5)``."""
        if vector not in ('e1', 'e2') or axis not in ('x', 'y'):
            raise ValueError(f"Unknown basis component {vector}.{axis}")
        current = getattr(self, vector)
        if axis == 'x':
            updated = Vec2(float(value), current.y)
        else:
            updated = Vec2(current.x, float(value))
        setattr(self, vector, updated)
        return self._recompute()

    def set_probe(self, x: Optional[float] = None, y: Optional[float] = None) -> BasisState:
        self.v_std = Vec2(
            float(x) if x is not None else self.v_std.x,
            float(y) if y is not None else self.v_std.y,
        )
        return self._recompute()

    def reset_basis(self) -> BasisState:
        """Back to the default (identity) basis; the probe is kept."""
        self.e1 = Vec2.of(self.config.default_e1)
        self.e2 = Vec2.of(self.config.default_e2)
        return self._recompute()

    def _recompute(self) -> BasisState:
        self.state = recompute(self.e1, self.e2, self.v_std, self.config.degeneracy_threshold)
        for callback in self._listeners:
            callback(self.state)
        return self.state

"""Matplotlib figures for the three visualizations.

Figures only read snapshots; undefined (NaN) quantities are not drawn.
"""

import math

import matplotlib.pyplot as plt
import numpy as np

from mathviz.basis import Vec2
from mathviz.config import BasisConfig

I_HAT = Vec2(1.0, 0.0)
J_HAT = Vec2(0.0, 1.0)


def format_value(value, digits=2):
    """Number as text, "N/A" when undefined."""
    if value is None or not math.isfinite(value):
        return "N/A"
    return f"{value:.{digits}f}"


def _draw_grid(ax, basis1, basis2, grid_range, color, linewidth):
    # Lines i*b1 + s*b2 and s*b1 + i*b2 for s in [-range, range]
    b1, b2 = basis1.as_array(), basis2.as_array()
    for i in range(-grid_range, grid_range + 1):
        p1, p2 = i * b1 - grid_range * b2, i * b1 + grid_range * b2
        ax.plot([p1[0], p2[0]], [p1[1], p2[1]], color=color, linewidth=linewidth)
        p3, p4 = -grid_range * b1 + i * b2, grid_range * b1 + i * b2
        ax.plot([p3[0], p4[0]], [p3[1], p4[1]], color=color, linewidth=linewidth)


def _draw_vector(ax, vec, color, label):
    if not vec.is_defined:
        return
    ax.quiver(0, 0, vec.x, vec.y, angles='xy', scale_units='xy', scale=1, color=color)
    ax.annotate(label, (vec.x, vec.y), color=color, fontsize=12,
                xytext=(4, 4), textcoords='offset points')


def plot_basis(state, config=None):
    """Standard, primal and dual grids with the basis and probe vectors."""
    config = config or BasisConfig()
    view = max(config.slider_max, abs(config.slider_min)) * 2.5

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.set_xlim(-view, view)
    ax.set_ylim(-view, view)
    ax.set_aspect('equal', adjustable='box')

    _draw_grid(ax, I_HAT, J_HAT, config.grid_range, '0.85', 0.8)
    _draw_grid(ax, state.e1, state.e2, config.grid_range, (0, 0, 1, 0.4), 1.0)
    if state.is_invertible:
        _draw_grid(ax, state.epsilon1, state.epsilon2, config.grid_range, (1, 0, 0, 0.4), 1.0)

    _draw_vector(ax, state.e1, 'blue', r'$e_1$')
    _draw_vector(ax, state.e2, 'blue', r'$e_2$')
    _draw_vector(ax, state.epsilon1, 'red', r'$\epsilon^1$')
    _draw_vector(ax, state.epsilon2, 'red', r'$\epsilon^2$')
    _draw_vector(ax, state.v_std, 'green', r'$v$')

    ax.set_title(f"det M = {format_value(state.det_m)}")
    return fig


def plot_sampling(state):
    """Original signal, samples as stems and the sinc reconstruction."""
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(state.time_vector, state.original_signal, color='orange', linestyle='-', label='original signal')
    if len(state.sampled_time_points):
        ax.stem(state.sampled_time_points, state.sampled_values, linefmt='b-', markerfmt='bo', basefmt=' ')

    finite = np.isfinite(state.reconstructed_signal)
    ax.plot(state.time_vector[finite], state.reconstructed_signal[finite],
            color='steelblue', linestyle='-', label='reconstructed signal')

    title = f"fs = {state.sampling_frequency:.2f} Hz, Nyquist = {state.nyquist_frequency:.2f} Hz"
    if state.is_aliasing:
        ax.set_title(title + "  -  aliasing (fs < Nyquist)", color='red')
    else:
        ax.set_title(title)
    ax.set_xlim(0, state.time_vector[-1])
    ax.set_ylim(-1.6, 1.6)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Amplitude")
    ax.legend(loc='upper right')
    ax.grid()
    return fig


def plot_hilbert(curve, config):
    fig, ax = plt.subplots(figsize=(9, 6))
    ax.plot(np.concatenate([curve.f_neg, curve.f_pos]),
            np.concatenate([curve.g_neg, curve.g_pos]),
            color=(242 / 255, 125 / 255, 50 / 255), linewidth=3)
    ax.axhline(0, color='black', linewidth=1)
    ax.axvline(0, color='black', linewidth=1)
    ax.set_xlim(-config.f_limit, config.f_limit)
    ax.set_ylim(-2, 2)
    ax.set_xlabel("f")
    ax.set_ylabel("G(f)")
    ax.set_title(f"alpha: {curve.alpha:.3f}")
    ax.grid()
    return fig


def matrix_latex(m):
    if not np.all(np.isfinite(m)):
        return r"\text{N/A}"
    return (r"\begin{pmatrix} %s & %s \\ %s & %s \end{pmatrix}"
            % tuple(format_value(v) for v in np.ravel(m)))


def vector_latex(v, row=False):
    if not v.is_defined:
        return r"\text{N/A}"
    sep = "&" if row else r"\\"
    return r"\begin{pmatrix} %s %s %s \end{pmatrix}" % (format_value(v.x), sep, format_value(v.y))


def contravariant_latex(state):
    """v' = M^-1 v with the current numbers."""
    return (r"\mathbf v' = M^{-1}\mathbf v : \quad "
            + vector_latex(state.v_primal) + " = "
            + matrix_latex(state.m_inv) + vector_latex(state.v_std))


def covariant_latex(state):
    """omega' = omega M with the current numbers."""
    return (r"\boldsymbol\omega' = \boldsymbol\omega M : \quad "
            + vector_latex(state.v_dual, row=True) + " = "
            + vector_latex(state.v_std, row=True) + matrix_latex(state.matrix))

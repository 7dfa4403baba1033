import io
import logging

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st
from scipy.io import wavfile

from mathviz.basis import BasisController
from mathviz.config import BasisConfig, HilbertConfig, SamplingConfig
from mathviz.hilbert import sigmoid_response
from mathviz.plotting import (
    contravariant_latex,
    covariant_latex,
    format_value,
    matrix_latex,
    plot_basis,
    plot_hilbert,
    plot_sampling,
    vector_latex,
)
from mathviz.sampling import (
    SamplingEngine,
    reconstruct_sample_and_hold,
    smooth_reconstruction,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

BASIS_CONFIG = BasisConfig()
SAMPLING_CONFIG = SamplingConfig()
HILBERT_CONFIG = HilbertConfig()

#%% Controllers kept across reruns
# Widgets only report new values through callbacks; the controllers own the
# inputs and recompute everything on each change.
def init_controllers():
    if "basis" not in st.session_state:
        controller = BasisController(config=BASIS_CONFIG)
        st.session_state.basis = controller
        st.session_state.e1x, st.session_state.e1y = controller.e1.x, controller.e1.y
        st.session_state.e2x, st.session_state.e2y = controller.e2.x, controller.e2.y
        st.session_state.vx, st.session_state.vy = controller.v_std.x, controller.v_std.y
    if "sampling" not in st.session_state:
        engine = SamplingEngine(SAMPLING_CONFIG)
        st.session_state.sampling = engine
        st.session_state.pointer_x = int(engine.control_position)


def on_basis_slider(vector, axis):
    value = st.session_state[f"{vector}{axis}"]
    st.session_state.basis.set_basis_component(vector, axis, value)


def on_probe_slider():
    st.session_state.basis.set_probe(st.session_state.vx, st.session_state.vy)


def on_reset_basis():
    controller = st.session_state.basis
    controller.reset_basis()
    st.session_state.e1x, st.session_state.e1y = controller.e1.x, controller.e1.y
    st.session_state.e2x, st.session_state.e2y = controller.e2.x, controller.e2.y


def on_pointer_move():
    st.session_state.sampling.set_control_position(st.session_state.pointer_x)


#%% Printings on streamlit
st.set_page_config(layout="wide")                                              # puts streamlit in widescreen by default
st.title("Mathematical visualizations")
init_controllers()

tab_basis, tab_shannon, tab_hilbert = st.tabs(
    ["Primal and dual basis", "Shannon sampling theorem", "Hilbert transform sgn"]
)

##### Primal / dual basis
with tab_basis:
    st.markdown("""
        Move the components of the primal basis vectors $e_1, e_2$ and of a vector $v$.
        The dual basis $\\epsilon^1, \\epsilon^2$ is given by the rows of $M^{-1}$, where $M$ has $e_1, e_2$ as columns.
    """)
    celControls, celCanvas, celInfo = st.columns([1, 2, 2])

    with celControls:
        lo, hi, step = BASIS_CONFIG.slider_min, BASIS_CONFIG.slider_max, BASIS_CONFIG.slider_step
        for vector in ("e1", "e2"):
            for axis in ("x", "y"):
                st.slider(f"{vector}.{axis}", lo, hi, step=step, key=f"{vector}{axis}",
                          on_change=on_basis_slider, args=(vector, axis))
        st.button("Reset Basis", on_click=on_reset_basis)
        st.slider("v.x", 2 * lo, 2 * hi, step=step, key="vx", on_change=on_probe_slider)
        st.slider("v.y", 2 * lo, 2 * hi, step=step, key="vy", on_change=on_probe_slider)

    basis_state = st.session_state.basis.state

    with celCanvas:
        fig_basis = plot_basis(basis_state, BASIS_CONFIG)
        st.pyplot(fig_basis)
        plt.close(fig_basis)

    with celInfo:
        st.latex(r"\det M = " + format_value(basis_state.det_m))
        if not basis_state.is_invertible:
            st.warning("The basis is degenerate: the dual basis and primal components are undefined.")
        st.latex(r"M^{-1} = " + matrix_latex(basis_state.m_inv))
        st.latex(r"\epsilon^1 = " + vector_latex(basis_state.epsilon1, row=True)
                 + r",\quad \epsilon^2 = " + vector_latex(basis_state.epsilon2, row=True))
        st.latex(contravariant_latex(basis_state))
        st.latex(covariant_latex(basis_state))

##### Shannon sampling theorem
with tab_shannon:
    st.latex(r"x(t) = \sum_{n} x(t_n) \operatorname{sinc} \left( f_s (t - t_n) \right)")
    st.slider("Pointer position on the canvas (move left/right to change the sampling frequency fs)",
              0, int(SAMPLING_CONFIG.canvas_width), key="pointer_x", on_change=on_pointer_move)

    sampling_state = st.session_state.sampling.state
    celSignal, celCompare = st.columns(2)

    with celSignal:
        st.write(f"Sampling Frequency (fs): {sampling_state.sampling_frequency:.2f} Hz")
        st.write(f"Nyquist Frequency: {sampling_state.nyquist_frequency:.2f} Hz")
        if sampling_state.is_aliasing:
            st.error("Aliasing occurs! (fs < Nyquist)")
        fig_sampling = plot_sampling(sampling_state)
        st.pyplot(fig_sampling)
        plt.close(fig_sampling)

    with celCompare:
        # 'sample & hold' and smoothed reconstructions for comparison
        cutoff = st.slider("Cutoff frequency of Butterworth filter (Hz)", 0.1, 5.0, 1.0)
        y_hold = reconstruct_sample_and_hold(sampling_state.sampled_time_points,
                                             sampling_state.sampled_values,
                                             sampling_state.time_vector)
        y_hold_smoothed = smooth_reconstruction(y_hold, SAMPLING_CONFIG.grid_rate, cutoff)

        fig_hold, ax_hold = plt.subplots(figsize=(10, 4))
        ax_hold.plot(sampling_state.time_vector, sampling_state.original_signal, color='sandybrown', linestyle='--', label='original signal')
        ax_hold.plot(sampling_state.time_vector, y_hold, color='steelblue', linestyle='-', label='sample & hold')
        ax_hold.plot(sampling_state.time_vector, y_hold_smoothed, color='seagreen', linestyle='-', label='filtered sample & hold')
        ax_hold.set_xlabel("Time (s)")
        ax_hold.set_ylabel("Amplitude")
        ax_hold.legend(loc='upper right')
        ax_hold.grid()
        st.pyplot(fig_hold)
        plt.close(fig_hold)

        # export of the sinc reconstruction at the grid rate
        wav_file = io.BytesIO()
        wavfile.write(wav_file, int(SAMPLING_CONFIG.grid_rate), sampling_state.reconstructed_signal.astype(np.float32))
        st.download_button("Download reconstruction (WAV)", wav_file.getvalue(),
                           file_name="reconstruction.wav", mime="audio/wav")

    with st.expander("More detailed explanation"):
        st.markdown(r"""
            - The reference signal is $\sin(2\pi f_0 t)$ with $f_0 = %.2f$ Hz, so the Nyquist rate is $2 f_0 = %.2f$ Hz.
            - Samples are taken every $T_s = 1/f_s$ seconds; the last one is placed exactly at the end of the window.
            - Each grid point of the reconstruction is the sum of every sample weighted by a shifted sinc. Only a finite
              number of samples is available, so the reconstruction degrades near the window edges.
            - Below the Nyquist rate the reconstruction follows a lower-frequency alias of the signal.
        """ % (SAMPLING_CONFIG.signal_frequency, SAMPLING_CONFIG.nyquist_frequency))

##### Hilbert transform sgn
with tab_hilbert:
    alpha = st.slider("alpha", HILBERT_CONFIG.alpha_min, HILBERT_CONFIG.alpha_max,
                      HILBERT_CONFIG.alpha_default, step=0.001, format="%.3f")
    st.latex(r"G(f) = \begin{cases} -e^{\alpha f} & f < 0 \\ e^{-\alpha f} & f \geq 0 \end{cases}")
    fig_hilbert = plot_hilbert(sigmoid_response(alpha, HILBERT_CONFIG), HILBERT_CONFIG)
    st.pyplot(fig_hilbert)
    plt.close(fig_hilbert)

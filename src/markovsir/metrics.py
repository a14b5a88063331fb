"""
===========================================================
metrics.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Summary statistics of a simulated epidemic and the
    classical final-size relation of the SIR model.

    Defines:
        - summarize(): peak, final size, duration of one trajectory
        - final_size_relation(): solves z = 1 - exp(-R0 z)
        - expected_final_size(): final size in individuals

Notes:
    - final size is the cumulative number ever infected, i.e.
      the drop in S over a closed-population run.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import numpy as np
from scipy.optimize import brentq
from typing import Dict, Optional

from .parameters import SIRParameters
from .trajectory import Trajectory


def summarize(trajectory: Trajectory, threshold: float = 0.01) -> Dict[str, Optional[float]]:
    """
    Compute key epidemic metrics from one trajectory.

    Parameters
    ----------
    trajectory : Trajectory
        Simulation output
    threshold : float
        Fraction of the peak below which the epidemic counts as over

    Returns
    -------
    metrics : dict
        - peak_time: time at which I is largest
        - peak_infected: largest I
        - peak_prevalence: peak_infected / N
        - final_size: number ever infected (S_0 - S_end)
        - attack_rate: final_size / N
        - epidemic_duration: time until I drops below threshold * peak
        - extinction_time: first time I == 0, None if never
    """
    t, S, I, R = trajectory.times, trajectory.S, trajectory.I, trajectory.R
    N = float(S[0] + I[0] + R[0])
    peak_idx = int(np.argmax(I))
    peak_infected = float(I[peak_idx])

    # everyone who left S was infected, whether recovered yet or not
    final_size = float(S[0] - S[-1])

    below = np.flatnonzero(I[peak_idx:] < threshold * peak_infected)
    if below.size > 0:
        epidemic_duration = float(t[peak_idx + below[0]] - t[0])
    else:
        epidemic_duration = float(t[-1] - t[0])

    extinct = np.flatnonzero(I == 0)
    extinction_time = float(t[extinct[0]]) if extinct.size > 0 else None

    return {
        "peak_time": float(t[peak_idx]),
        "peak_infected": peak_infected,
        "peak_prevalence": peak_infected / N if N > 0 else 0.0,
        "final_size": final_size,
        "attack_rate": final_size / N if N > 0 else 0.0,
        "epidemic_duration": epidemic_duration,
        "extinction_time": extinction_time,
    }


def final_size_relation(R0: float) -> float:
    """
    Fraction z of an initially fully susceptible population ever infected
    in the deterministic SIR limit: z = 1 - exp(-R0 * z).
    Zero when R0 <= 1.
    """
    if not R0 > 1:
        return 0.0
    if np.isinf(R0):
        return 1.0
    f = lambda z: z + np.expm1(-R0 * z)
    # f(0+) < 0 for R0 > 1 and f(1) = exp(-R0) > 0
    return float(brentq(f, 1e-12, 1.0, xtol=1e-14))


def expected_final_size(params: SIRParameters, N: float) -> float:
    """Expected number ever infected in a population of size N"""
    return N * final_size_relation(params.R0)

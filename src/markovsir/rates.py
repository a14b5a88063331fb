"""
===========================================================
rates.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Conversion between instantaneous per-capita rates and
    per-step transition probabilities for discrete-time
    compartmental models.

    For an event with exponentially distributed waiting time
    and rate r, the probability it happens within a step of
    length t is p = 1 - exp(-r*t).

Example Usage:
    from markovsir.rates import rate_to_proportion
    p_rec = rate_to_proportion(0.25, 0.1)   # ~0.0247

Notes:
    - Negative or NaN rates give 0, an infinite rate gives 1.
    - Results are always clamped into [0, 1].
    - Works on scalars and numpy arrays.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import numpy as np
from typing import Union

ArrayLike = Union[float, np.ndarray]


def rate_to_proportion(r: ArrayLike, t: float = 1.0) -> ArrayLike:
    """
    Probability that an event with rate r occurs within a time step t.

    Parameters
    ----------
    r : float or np.ndarray
        Instantaneous per-capita rate (per unit time)
    t : float
        Length of the time step

    Returns
    -------
    p : float or np.ndarray
        Transition probability in [0, 1]. A scalar input gives a float.
    """
    r_arr = np.asarray(r, dtype=float)
    with np.errstate(invalid="ignore", over="ignore"):
        p = -np.expm1(-r_arr * t)
    # r < 0 and NaN rates degrade to "no event"; +inf to "certain event"
    p = np.where(np.isnan(r_arr) | (r_arr < 0), 0.0, p)
    p = np.where(np.isposinf(r_arr), 1.0, p)
    p = np.where(np.isnan(p), 0.0, p)
    p = np.clip(p, 0.0, 1.0)
    if p.ndim == 0:
        return float(p)
    return p


def proportion_to_rate(p: ArrayLike, t: float = 1.0) -> ArrayLike:
    """Inverse of rate_to_proportion: the rate giving probability p per step t"""
    p_arr = np.clip(np.asarray(p, dtype=float), 0.0, 1.0)
    with np.errstate(divide="ignore"):
        r = -np.log1p(-p_arr) / t
    if r.ndim == 0:
        return float(r)
    return r

"""
===========================================================
gillespie.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Continuous-time Markov jump process version of the SIR
    model, simulated exactly with Gillespie's direct method
    (stochastic simulation algorithm, SSA).

    Events and hazards:
        infection  S -> I   beta * c * I / N * S
        recovery   I -> R   gamma * I

    At each event the waiting time is Exponential(total hazard)
    and the event type is chosen in proportion to its hazard.

Example Usage:
    from markovsir import SIRConfig
    from markovsir.gillespie import simulate_gillespie
    res = simulate_gillespie(SIRConfig())      # runs to config.t_max
    traj = res.sample(dt=0.1, n_steps=400)     # onto the k*dt grid

Notes:
    - Randomness comes only from the Generator passed in (or one
      built from config.seed), as in the discrete-time driver.
    - Each event moves exactly one individual, so S + I + R is
      conserved and no count can go negative.
    - The process stops early once both hazards are zero (I == 0).
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import warnings
import numpy as np
from typing import Optional, Tuple

from .parameters import InvalidParameterError, SIRConfig, SIRParameters
from .state import SIRState
from .trajectory import DegeneratePopulationWarning, Trajectory

# state change of each event: infection, recovery
TRANSITIONS = np.array([[-1, 1, 0],
                        [0, -1, 1]])


def sir_rates(state: SIRState, params: SIRParameters) -> Tuple[float, float]:
    """Hazards (infection, recovery) of the jump process in a given state"""
    S, I, R = state
    N = S + I + R
    if N == 0:
        return 0.0, 0.0
    infection = params.effective_beta * I / N * S
    recovery = params.gamma * I
    return float(infection), float(recovery)


class GillespieResult:
    """
    Event-level output of one SSA run.

    Attributes:
    times: np.ndarray. Event times, starting with 0.0
    states: np.ndarray. Integer (S, I, R) rows after each event, shape (n_events + 1, 3)
    t_max: float. End of the simulated time window
    """
    def __init__(self, times: np.ndarray, states: np.ndarray, t_max: float):
        self.times = times
        self.states = states
        self.t_max = float(t_max)

    def __len__(self) -> int:
        return len(self.times)

    @property
    def n_events(self) -> int:
        return len(self.times) - 1

    @property
    def final_state(self) -> SIRState:
        S, I, R = self.states[-1]
        return SIRState(int(S), int(I), int(R))

    def state_at(self, t: float) -> SIRState:
        """State in force at time t (the last event at or before t)"""
        k = int(np.searchsorted(self.times, t, side="right")) - 1
        S, I, R = self.states[max(k, 0)]
        return SIRState(int(S), int(I), int(R))

    def sample(self, dt: float, n_steps: int) -> Trajectory:
        """Sample the piecewise-constant path onto t = 0, dt, ..., n_steps*dt"""
        if n_steps <= 0:
            raise InvalidParameterError(f"n_steps must be positive, got {n_steps}")
        grid = np.arange(n_steps + 1) * dt
        idx = np.searchsorted(self.times, grid, side="right") - 1
        rows = self.states[np.maximum(idx, 0)]
        traj = Trajectory(dt, SIRState(*(int(x) for x in rows[0])))
        for S, I, R in rows[1:]:
            traj.append(SIRState(int(S), int(I), int(R)))
        return traj


def simulate_gillespie(config: SIRConfig, t_max: Optional[float] = None,
                       rng: Optional[np.random.Generator] = None) -> GillespieResult:
    """
    Exact stochastic simulation of the SIR jump process.

    Parameters
    ----------
    config : SIRConfig
        Rates, initial state and seed (dt and n_steps only set the default t_max)
    t_max : float, optional
        End of the time window. Defaults to config.t_max = n_steps * dt
    rng : np.random.Generator, optional
        Generator to draw from. If None, one is built from config.seed

    Returns
    -------
    result : GillespieResult
    """
    if t_max is None:
        t_max = config.t_max
    if not np.isfinite(t_max) or t_max <= 0:
        raise InvalidParameterError(f"t_max must be positive and finite, got {t_max}")
    if rng is None:
        rng = config.make_rng()
    params = config.parameters

    state = config.initial_state
    if state.total == 0:
        warnings.warn("Total population is zero; no events can occur",
                      DegeneratePopulationWarning, stacklevel=2)

    t = 0.0
    times = [0.0]
    states = [tuple(state)]
    while True:
        a_inf, a_rec = sir_rates(state, params)
        a_total = a_inf + a_rec
        if a_total <= 0:
            break
        t += rng.exponential(1.0 / a_total)
        if t > t_max:
            break
        event = 0 if rng.random() * a_total < a_inf else 1
        state = SIRState(*(int(x) for x in np.add(state, TRANSITIONS[event])))
        times.append(t)
        states.append(tuple(state))

    return GillespieResult(np.asarray(times, dtype=float),
                           np.asarray(states, dtype=np.int64).reshape(-1, 3),
                           t_max)


def gillespie_trajectory(config: SIRConfig,
                         rng: Optional[np.random.Generator] = None) -> Trajectory:
    """SSA run sampled onto the config's k*dt grid (n_steps + 1 rows)"""
    result = simulate_gillespie(config, t_max=config.t_max, rng=rng)
    return result.sample(config.dt, config.n_steps)

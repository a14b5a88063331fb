"""
===========================================================
trajectory.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Trajectory record and the discrete-time driver that
    produces it by applying a step function n_steps times.

Example Usage:
    from markovsir import SIRConfig, simulate
    traj = simulate(SIRConfig(seed=1234))
    df = traj.to_dataframe()      # columns t, S, I, R

Notes:
    - Output always has n_steps + 1 rows, t = 0, dt, ..., n_steps*dt.
    - Randomness comes only from the Generator owned by the run
      (built from config.seed unless one is passed in).
    - A population of zero freezes the state and raises a
      DegeneratePopulationWarning instead of failing.
    - stop_when_extinct=True freezes the state once I == 0.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import warnings
import numpy as np
import pandas as pd
from typing import Iterator, List, Optional, Tuple, Union

from .parameters import SIRConfig
from .state import SIRState
from .steps import StepFunction, get_step


class DegeneratePopulationWarning(RuntimeWarning):
    """Total population is zero; the trajectory is held constant"""


class Trajectory:
    """
    Ordered, append-only sequence of (t, S, I, R) rows.

    Parameters:
    -----------
    dt: float
        Length of one time step; row k has time k * dt
    initial_state: SIRState
        State at t = 0
    """
    def __init__(self, dt: float, initial_state: SIRState):
        self.dt = float(dt)
        self._states: List[SIRState] = [SIRState(*initial_state)]

    def append(self, state: SIRState):
        self._states.append(SIRState(*state))

    def __len__(self) -> int:
        return len(self._states)

    def __getitem__(self, k):
        if isinstance(k, slice):
            return [self[j] for j in range(len(self._states))[k]]
        # raises IndexError for anything outside [-n, n)
        k = range(len(self._states))[k]
        S, I, R = self._states[k]
        return (k * self.dt, S, I, R)

    def __iter__(self) -> Iterator[Tuple[float, float, float, float]]:
        for k in range(len(self._states)):
            yield self[k]

    def __repr__(self):
        return f"Trajectory(n={len(self)}, dt={self.dt}, final={self.final_state})"

    @property
    def states(self) -> List[SIRState]:
        return list(self._states)

    @property
    def final_state(self) -> SIRState:
        return self._states[-1]

    @property
    def times(self) -> np.ndarray:
        return np.arange(len(self._states)) * self.dt

    @property
    def S(self) -> np.ndarray:
        return np.array([s.S for s in self._states])

    @property
    def I(self) -> np.ndarray:
        return np.array([s.I for s in self._states])

    @property
    def R(self) -> np.ndarray:
        return np.array([s.R for s in self._states])

    @property
    def incidence(self) -> np.ndarray:
        """New infections per step (-ΔS); 0 at t = 0"""
        S = self.S
        inc = np.zeros_like(S)
        inc[1:] = S[:-1] - S[1:]
        return inc

    def to_array(self) -> np.ndarray:
        """Array of shape (n, 4) with columns t, S, I, R"""
        return np.column_stack([self.times, self.S, self.I, self.R])

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({"t": self.times, "S": self.S, "I": self.I, "R": self.R})


def simulate(config: SIRConfig,
             step: Union[str, StepFunction] = "binomial",
             rng: Optional[np.random.Generator] = None,
             stop_when_extinct: bool = False) -> Trajectory:
    """
    Run one discrete-time SIR trajectory.

    Parameters
    ----------
    config : SIRConfig
        Parameters, initial state, number of steps and seed
    step : str or StepFunction
        "binomial" (default), "poisson", "deterministic" or an instance
    rng : np.random.Generator, optional
        Generator to draw from. If None, one is built from config.seed
    stop_when_extinct : bool
        If True, hold the state constant once no infected remain

    Returns
    -------
    trajectory : Trajectory
        n_steps + 1 rows, the first being the initial state
    """
    stepper = get_step(step)
    params = config.parameters
    if rng is None:
        rng = config.make_rng()

    state = config.initial_state
    if not stepper.integer_counts:
        state = state.as_floats()
    N0 = state.total

    traj = Trajectory(params.dt, state)
    frozen = False
    if N0 == 0:
        warnings.warn("Total population is zero; trajectory held constant",
                      DegeneratePopulationWarning, stacklevel=2)
        frozen = True

    for _ in range(config.n_steps):
        if not frozen:
            if stop_when_extinct and state.I == 0:
                frozen = True
            else:
                state = stepper.advance(state, params, rng)
                if stepper.integer_counts:
                    assert state.total == N0, "population not conserved"
        traj.append(state)
    return traj


def simulate_sir(s0: int = 990, i0: int = 10, r0: int = 0,
                 beta: float = 0.05, contact_rate: float = 10.0, gamma: float = 0.25,
                 dt: float = 0.1, n_steps: int = 400, seed: int = 1234,
                 step: Union[str, StepFunction] = "binomial",
                 stop_when_extinct: bool = False) -> Trajectory:
    """Keyword convenience wrapper around simulate()"""
    config = SIRConfig(beta=beta, contact_rate=contact_rate, gamma=gamma, dt=dt,
                       n_steps=n_steps, s0=s0, i0=i0, r0=r0, seed=seed)
    return simulate(config, step=step, rng=None, stop_when_extinct=stop_when_extinct)

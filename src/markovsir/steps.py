"""
===========================================================
steps.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    One-step update rules ("step functions") for the
    discrete-time SIR model. Every flavour advances an
    SIRState by exactly one time step of length dt:

        p_inf = 1 - exp(-beta * c * I / N * dt)
        p_rec = 1 - exp(-gamma * dt)
        S' = S - infections
        I' = I + infections - recoveries
        R' = R + recoveries

    Flavours:
        - BinomialStep: infections ~ Binomial(S, p_inf),
                        recoveries ~ Binomial(I, p_rec)
        - PoissonStep: Poisson counts with means S*p_inf and
                       I*p_rec, bounded by S and I
        - DeterministicStep: expected-value map (no noise)

API:
    step.advance(state, params, rng) -> SIRState
    get_step("binomial" | "poisson" | "deterministic")

Notes:
    - Draws are bounded by the population they come from, so
      counts can never go negative and S + I + R is conserved.
    - N == 0 is a degenerate state: returned unchanged.
    - All randomness comes from the numpy Generator passed in.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, Type, Union

from .parameters import SIRParameters
from .rates import rate_to_proportion
from .state import SIRState


def transition_probabilities(state: SIRState, params: SIRParameters) -> Tuple[float, float]:
    """Per-individual infection and recovery probabilities for one step"""
    S, I, R = state
    N = S + I + R
    p_inf = rate_to_proportion(params.effective_beta * I / N, params.dt)
    p_rec = rate_to_proportion(params.gamma, params.dt)
    return p_inf, p_rec


class StepFunction(ABC):
    """Advances an SIRState by one discrete time step"""

    #: whether the flavour works on integer counts
    integer_counts: bool = True

    @abstractmethod
    def transitions(self, state: SIRState, params: SIRParameters,
                    rng: Optional[np.random.Generator]) -> Tuple[float, float]:
        """Return (new_infections, new_recoveries) for one step"""

    def advance(self, state: SIRState, params: SIRParameters,
                rng: Optional[np.random.Generator] = None) -> SIRState:
        S, I, R = state
        if S + I + R == 0:
            return state
        infections, recoveries = self.transitions(state, params, rng)
        return SIRState(S - infections, I + infections - recoveries, R + recoveries)

    def __repr__(self):
        return f"{type(self).__name__}()"


class BinomialStep(StepFunction):
    """Chain-binomial step: each susceptible and infected decides independently"""

    def transitions(self, state, params, rng):
        S, I, _ = state
        p_inf, p_rec = transition_probabilities(state, params)
        infections = int(rng.binomial(int(S), p_inf))
        recoveries = int(rng.binomial(int(I), p_rec))
        return infections, recoveries


class PoissonStep(StepFunction):
    """Poisson (tau-leap style) step with draws capped at the available population"""

    def transitions(self, state, params, rng):
        S, I, _ = state
        p_inf, p_rec = transition_probabilities(state, params)
        infections = min(int(rng.poisson(S * p_inf)), int(S))
        recoveries = min(int(rng.poisson(I * p_rec)), int(I))
        return infections, recoveries


class DeterministicStep(StepFunction):
    """Expected-value function map on real-valued compartments"""

    integer_counts = False

    def transitions(self, state, params, rng=None):
        S, I, _ = state
        p_inf, p_rec = transition_probabilities(state, params)
        return p_inf * S, p_rec * I

    def advance(self, state, params, rng=None):
        return super().advance(state.as_floats(), params, rng)


STEP_FUNCTIONS: Dict[str, Type[StepFunction]] = {
    "binomial": BinomialStep,
    "poisson": PoissonStep,
    "deterministic": DeterministicStep,
}


def get_step(step: Union[str, StepFunction]) -> StepFunction:
    """Resolve a step flavour by name, or pass a StepFunction instance through"""
    if isinstance(step, StepFunction):
        return step
    try:
        return STEP_FUNCTIONS[step]()
    except (KeyError, TypeError):
        raise ValueError(f"Unknown step function {step!r}; "
                         f"expected one of {sorted(STEP_FUNCTIONS)}") from None

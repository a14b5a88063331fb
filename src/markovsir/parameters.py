"""
===========================================================
parameters.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================
Model Parameters and Run Configuration for the Markov SIR Model

Two immutable records:
    SIRParameters: the rates of the model (beta, c, gamma) and
                   the time step dt, i.e. the p = [β, c, γ, δt]
                   vector used by the step functions.
    SIRConfig:     everything needed for one simulation run:
                   parameters, initial conditions, number of
                   steps and the random seed.

All values are checked when the record is built, so an invalid
configuration fails before any simulation work starts.

Default values reproduce the canonical example: 1000 people,
10 initially infected, beta=0.05, c=10, gamma=0.25, dt=0.1,
400 steps and seed 1234.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import math
import numbers
import numpy as np
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Mapping

from .rates import rate_to_proportion
from .state import SIRState


class InvalidParameterError(ValueError):
    """Raised when a model parameter or run setting is out of range"""


def _check_rate(name: str, value: float):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}")
    if math.isnan(value) or value < 0:
        raise InvalidParameterError(f"{name} must be non-negative, got {value}")


def _check_count(name: str, value: int):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidParameterError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class SIRParameters:
    """
    Rates and time step of the discrete-time SIR model.

    Attributes:
    beta: float. Transmission coefficient. In mass-action models beta * c is
        an infection rate, so beta may exceed 1; contact-based models read
        it as a per-contact transmission probability and require beta <= 1
    contact_rate: float. Contacts per individual per unit time (c)
    gamma: float. Per-capita recovery rate (1/gamma = mean infectious period)
    dt: float. Length of one discrete time step
    """
    beta: float = 0.05
    contact_rate: float = 10.0
    gamma: float = 0.25
    dt: float = 0.1

    def __post_init__(self):
        _check_rate("beta", self.beta)
        _check_rate("contact_rate", self.contact_rate)
        _check_rate("gamma", self.gamma)
        _check_rate("dt", self.dt)
        if self.dt == 0 or math.isinf(self.dt):
            raise InvalidParameterError(f"dt must be positive and finite, got {self.dt}")

    @property
    def effective_beta(self) -> float:
        """Combined transmission rate beta * c"""
        return self.beta * self.contact_rate

    @property
    def R0(self) -> float:
        """Basic reproduction number beta * c / gamma"""
        return self.effective_beta / self.gamma if self.gamma > 0 else np.inf

    @property
    def recovery_probability(self) -> float:
        """Per-step probability that one infected individual recovers"""
        return rate_to_proportion(self.gamma, self.dt)

    def infection_probability(self, I: float, N: float) -> float:
        """Per-step probability that one susceptible is infected, given I and N"""
        return rate_to_proportion(self.effective_beta * I / N, self.dt)


@dataclass(frozen=True)
class SIRConfig:
    """
    Complete configuration of one simulation run.

    Attributes:
    beta, contact_rate, gamma, dt: see SIRParameters
    n_steps: int. Number of discrete steps to run (> 0)
    s0, i0, r0: int. Initial compartment counts
    seed: int. Seed of the run's random number generator
    """
    beta: float = 0.05
    contact_rate: float = 10.0
    gamma: float = 0.25
    dt: float = 0.1
    n_steps: int = 400
    s0: int = 990
    i0: int = 10
    r0: int = 0
    seed: int = 1234

    def __post_init__(self):
        # rates and dt are checked by SIRParameters
        SIRParameters(self.beta, self.contact_rate, self.gamma, self.dt)
        if isinstance(self.n_steps, bool) or not isinstance(self.n_steps, numbers.Integral):
            raise InvalidParameterError(f"n_steps must be an integer, got {self.n_steps!r}")
        if self.n_steps <= 0:
            raise InvalidParameterError(f"n_steps must be positive, got {self.n_steps}")
        _check_count("s0", self.s0)
        _check_count("i0", self.i0)
        _check_count("r0", self.r0)
        if isinstance(self.seed, bool) or not isinstance(self.seed, numbers.Integral):
            raise InvalidParameterError(f"seed must be an integer, got {self.seed!r}")
        if self.seed < 0:
            raise InvalidParameterError(f"seed must be non-negative, got {self.seed}")

    @property
    def parameters(self) -> SIRParameters:
        return SIRParameters(beta=self.beta, contact_rate=self.contact_rate,
                             gamma=self.gamma, dt=self.dt)

    @property
    def initial_state(self) -> SIRState:
        return SIRState(int(self.s0), int(self.i0), int(self.r0))

    @property
    def N(self) -> int:
        return int(self.s0 + self.i0 + self.r0)

    @property
    def t_max(self) -> float:
        return self.n_steps * self.dt

    def make_rng(self) -> np.random.Generator:
        """Fresh random number generator owned by a single run"""
        return np.random.default_rng(self.seed)

    def replace(self, **changes) -> "SIRConfig":
        """Copy of this configuration with some fields changed (re-validated)"""
        values = self.to_dict()
        values.update(changes)
        return SIRConfig.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "SIRConfig":
        """Build a configuration from a mapping, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise InvalidParameterError(f"Unknown configuration keys: {unknown}")
        return cls(**dict(values))

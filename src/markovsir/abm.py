"""
===========================================================
abm.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================
Agent-Based Discrete-Time SIR Model
===================================

Individual-level counterpart of the chain-binomial model. Each
agent carries its own disease state; at every step

- a susceptible is infected either
    * "mass_action": with probability 1 - exp(-beta*c*I/N*dt), or
    * "contacts": by meeting Poisson(c*dt) random other agents,
      each infected contact transmitting with probability beta
- an infected recovers with probability 1 - exp(-gamma*dt)

Updates are synchronous: every decision in a step looks at the
statuses at the start of that step. Agent statuses are held in a
numpy int8 vector so the mass-action mode is fully vectorized.

License: MIT
===========================================================
"""

from __future__ import annotations
import numpy as np
from enum import IntEnum
from typing import Optional, Union

from .parameters import InvalidParameterError, SIRParameters, _check_count
from .rates import rate_to_proportion
from .state import SIRState
from .trajectory import Trajectory

INFECTION_MODES = ("mass_action", "contacts")


class DiseaseState(IntEnum):
    """Enumeration for SIR disease states"""
    SUSCEPTIBLE = 0
    INFECTED = 1
    RECOVERED = 2


class AgentBasedSIR:
    """
    Agent-based SIR simulator.

    Parameters:
    params: SIRParameters. beta, contact rate, gamma and dt
    n_agents: int. Population size
    i0: int. Initially infected agents
    r0: int. Initially recovered agents
    infection_mode: str. "mass_action" (default) or "contacts"
    """
    def __init__(self, params: SIRParameters, n_agents: int, i0: int,
                 r0: int = 0, infection_mode: str = "mass_action"):
        _check_count("n_agents", n_agents)
        _check_count("i0", i0)
        _check_count("r0", r0)
        if i0 + r0 > n_agents:
            raise InvalidParameterError(
                f"i0 + r0 = {i0 + r0} exceeds the number of agents ({n_agents})")
        if infection_mode not in INFECTION_MODES:
            raise ValueError(f"infection_mode must be one of {INFECTION_MODES}, "
                             f"got {infection_mode!r}")
        if infection_mode == "contacts" and params.beta > 1:
            # beta is a per-contact transmission probability in this mode
            raise InvalidParameterError(
                f"beta must be at most 1 for contact-based infection, got {params.beta}")
        self.params = params
        self.n_agents = int(n_agents)
        self.infection_mode = infection_mode
        self.status = np.full(self.n_agents, DiseaseState.SUSCEPTIBLE, dtype=np.int8)
        self.status[:i0] = DiseaseState.INFECTED
        self.status[i0:i0 + r0] = DiseaseState.RECOVERED

    def counts(self) -> SIRState:
        """Current (S, I, R) counts"""
        c = np.bincount(self.status, minlength=3)
        return SIRState(int(c[0]), int(c[1]), int(c[2]))

    def _infected_by_mass_action(self, susceptible: np.ndarray, n_infected: int,
                                 rng: np.random.Generator) -> np.ndarray:
        p_inf = rate_to_proportion(self.params.effective_beta * n_infected / self.n_agents,
                                   self.params.dt)
        return susceptible[rng.random(susceptible.size) < p_inf]

    def _infected_by_contacts(self, susceptible: np.ndarray, old_status: np.ndarray,
                              rng: np.random.Generator) -> np.ndarray:
        if self.n_agents < 2:
            return susceptible[:0]
        n_contacts = rng.poisson(self.params.contact_rate * self.params.dt, size=susceptible.size)
        infected = []
        for agent, k in zip(susceptible, n_contacts):
            if k == 0:
                continue
            # sample from everyone else without replacement
            others = rng.choice(self.n_agents - 1, size=min(int(k), self.n_agents - 1),
                                replace=False)
            others[others >= agent] += 1
            n_inf_contacts = int(np.sum(old_status[others] == DiseaseState.INFECTED))
            if n_inf_contacts and rng.random() < 1 - (1 - self.params.beta) ** n_inf_contacts:
                infected.append(agent)
        return np.asarray(infected, dtype=int)

    def step(self, rng: np.random.Generator) -> SIRState:
        """Advance all agents by one time step and return the new counts"""
        if self.n_agents == 0:
            return self.counts()
        old_status = self.status.copy()
        susceptible = np.flatnonzero(old_status == DiseaseState.SUSCEPTIBLE)
        infected = np.flatnonzero(old_status == DiseaseState.INFECTED)

        if self.infection_mode == "mass_action":
            newly_infected = self._infected_by_mass_action(susceptible, infected.size, rng)
        else:
            newly_infected = self._infected_by_contacts(susceptible, old_status, rng)

        p_rec = self.params.recovery_probability
        recovering = infected[rng.random(infected.size) < p_rec]

        self.status[newly_infected] = DiseaseState.INFECTED
        self.status[recovering] = DiseaseState.RECOVERED
        return self.counts()

    def simulate(self, n_steps: int,
                 rng: Optional[Union[np.random.Generator, int]] = None) -> Trajectory:
        """
        Run n_steps steps from the current statuses.

        Parameters:
        n_steps: int. Number of steps (> 0)
        rng: Generator or int seed, optional. Source of randomness

        Returns:
        trajectory: Trajectory. n_steps + 1 rows of counts
        """
        if n_steps <= 0:
            raise InvalidParameterError(f"n_steps must be positive, got {n_steps}")
        rng = np.random.default_rng(rng)
        traj = Trajectory(self.params.dt, self.counts())
        for _ in range(n_steps):
            traj.append(self.step(rng))
        return traj

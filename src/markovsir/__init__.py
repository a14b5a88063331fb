"""
===========================================================
markovsir
===========================================================
Discrete-time stochastic SIR ("Markov chain SIR") models:
chain-binomial, Poisson and deterministic step functions,
a Gillespie jump-process simulator, an agent-based variant,
ensembles and summary metrics.

License: MIT
===========================================================
"""

from .rates import rate_to_proportion, proportion_to_rate
from .state import SIRState
from .parameters import InvalidParameterError, SIRParameters, SIRConfig
from .steps import (
    StepFunction,
    BinomialStep,
    PoissonStep,
    DeterministicStep,
    get_step)
from .trajectory import (
    DegeneratePopulationWarning,
    Trajectory,
    simulate,
    simulate_sir)
from .abm import AgentBasedSIR, DiseaseState
from .gillespie import (
    GillespieResult,
    gillespie_trajectory,
    simulate_gillespie,
    sir_rates)
from .ensemble import Ensemble, run_ensemble, parameter_sweep
from .metrics import summarize, final_size_relation, expected_final_size

__version__ = "0.1.0"

"""
===========================================================
state.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================
Compartment state record for the SIR model.

- S: Susceptible individuals
- I: Infected (and infectious) individuals
- R: Recovered (and immune) individuals

License: MIT
===========================================================
"""

from typing import NamedTuple, Union

Count = Union[int, float]


class SIRState(NamedTuple):
    """Immutable (S, I, R) compartment counts at one time step"""
    S: Count
    I: Count
    R: Count

    @property
    def total(self) -> Count:
        """Total population N = S + I + R"""
        return self.S + self.I + self.R

    def as_floats(self) -> "SIRState":
        return SIRState(float(self.S), float(self.I), float(self.R))

"""Shared fixtures for the markovsir test suite."""

import numpy as np
import pytest

from markovsir import SIRConfig


@pytest.fixture
def canonical_config():
    # 1000 people, 10 infected, R0 = 0.05 * 10 / 0.25 = 2
    return SIRConfig(beta=0.05, contact_rate=10.0, gamma=0.25, dt=0.1,
                     n_steps=400, s0=990, i0=10, r0=0, seed=1234)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture(params=["binomial", "poisson"])
def stochastic_step(request):
    return request.param

import numpy as np
import pytest

from markovsir import (
    BinomialStep,
    DeterministicStep,
    PoissonStep,
    SIRParameters,
    SIRState,
    StepFunction,
    get_step)
from markovsir.steps import transition_probabilities

PARAMS = SIRParameters(beta=0.05, contact_rate=10.0, gamma=0.25, dt=0.1)


def test_transition_probabilities():
    p_inf, p_rec = transition_probabilities(SIRState(990, 10, 0), PARAMS)
    assert p_inf == pytest.approx(1 - np.exp(-0.5 * 10 / 1000 * 0.1))
    assert p_rec == pytest.approx(1 - np.exp(-0.025))


@pytest.mark.parametrize("flavour", [BinomialStep, PoissonStep])
def test_stochastic_step_conserves_and_bounds(flavour, rng):
    step = flavour()
    state = SIRState(990, 10, 0)
    for _ in range(500):
        new_inf, new_rec = step.transitions(state, PARAMS, rng)
        assert 0 <= new_inf <= state.S
        assert 0 <= new_rec <= state.I
        nxt = step.advance(state, PARAMS, rng)
        assert nxt.total == 1000
        assert min(nxt) >= 0
        assert nxt.R >= state.R
        state = nxt


def test_poisson_draws_capped_at_population(rng):
    # huge rates: Poisson means close to S and I, raw draws often exceed them
    params = SIRParameters(beta=1.0, contact_rate=1000.0, gamma=1000.0, dt=1.0)
    step = PoissonStep()
    for _ in range(200):
        nxt = step.advance(SIRState(5, 5, 0), params, rng)
        assert min(nxt) >= 0
        assert nxt.total == 10


def test_binomial_step_reproducible():
    step = BinomialStep()
    a = step.advance(SIRState(990, 10, 0), PARAMS, np.random.default_rng(1))
    b = step.advance(SIRState(990, 10, 0), PARAMS, np.random.default_rng(1))
    assert a == b


def test_binomial_step_returns_ints(rng):
    nxt = BinomialStep().advance(SIRState(990, 10, 0), PARAMS, rng)
    assert all(isinstance(x, int) for x in nxt)


def test_binomial_mean_infections():
    rng = np.random.default_rng(2024)
    params = SIRParameters(beta=0.5, contact_rate=1.0, gamma=0.5, dt=1.0)
    state = SIRState(500, 500, 0)
    p_inf, p_rec = transition_probabilities(state, params)
    draws = np.array([BinomialStep().transitions(state, params, rng) for _ in range(2000)])
    assert draws[:, 0].mean() == pytest.approx(500 * p_inf, rel=0.02)
    assert draws[:, 1].mean() == pytest.approx(500 * p_rec, rel=0.02)


@pytest.mark.parametrize("flavour", [BinomialStep, PoissonStep, DeterministicStep])
def test_empty_population_unchanged(flavour, rng):
    state = SIRState(0, 0, 0)
    assert flavour().advance(state, PARAMS, rng) == state


def test_no_transmission_without_beta(rng):
    params = SIRParameters(beta=0.0, contact_rate=10.0, gamma=0.25, dt=0.1)
    nxt = BinomialStep().advance(SIRState(990, 10, 0), params, rng)
    assert nxt.S == 990
    assert nxt.I <= 10


def test_deterministic_step_expected_value():
    state = SIRState(990.0, 10.0, 0.0)
    p_inf, p_rec = transition_probabilities(state, PARAMS)
    nxt = DeterministicStep().advance(state, PARAMS)
    assert nxt.S == pytest.approx(990 - p_inf * 990)
    assert nxt.I == pytest.approx(10 + p_inf * 990 - p_rec * 10)
    assert nxt.R == pytest.approx(p_rec * 10)
    assert nxt.total == pytest.approx(1000.0)


def test_deterministic_step_accepts_integer_state():
    nxt = DeterministicStep().advance(SIRState(990, 10, 0), PARAMS)
    assert isinstance(nxt.S, float)


def test_get_step():
    assert isinstance(get_step("binomial"), BinomialStep)
    assert isinstance(get_step("poisson"), PoissonStep)
    assert isinstance(get_step("deterministic"), DeterministicStep)
    custom = BinomialStep()
    assert get_step(custom) is custom
    with pytest.raises(ValueError, match="Unknown step"):
        get_step("gillespie")


def test_custom_step_function(rng):
    class NothingHappens(StepFunction):
        def transitions(self, state, params, rng):
            return 0, 0

    state = SIRState(3, 2, 1)
    assert NothingHappens().advance(state, PARAMS, rng) == state

import numpy as np
import pytest

from markovsir import AgentBasedSIR, DiseaseState, InvalidParameterError, SIRParameters, SIRState

PARAMS = SIRParameters(beta=0.05, contact_rate=10.0, gamma=0.25, dt=0.1)


def test_initial_counts():
    model = AgentBasedSIR(PARAMS, n_agents=1000, i0=10, r0=5)
    assert model.counts() == SIRState(985, 10, 5)
    assert model.status.dtype == np.int8


@pytest.mark.parametrize("mode", ["mass_action", "contacts"])
def test_conservation_and_bounds(mode):
    model = AgentBasedSIR(PARAMS, n_agents=300, i0=10, infection_mode=mode)
    traj = model.simulate(200, rng=7)
    assert len(traj) == 201
    arr = traj.to_array()[:, 1:]
    assert np.all(arr >= 0)
    assert np.all(arr.sum(axis=1) == 300)
    assert np.all(np.diff(traj.R) >= 0)
    assert np.all(np.diff(traj.S) <= 0)


@pytest.mark.parametrize("mode", ["mass_action", "contacts"])
def test_reproducible(mode):
    a = AgentBasedSIR(PARAMS, 200, 5, infection_mode=mode).simulate(100, rng=3)
    b = AgentBasedSIR(PARAMS, 200, 5, infection_mode=mode).simulate(100, rng=np.random.default_rng(3))
    assert a.states == b.states


def test_mass_action_epidemic_grows():
    traj = AgentBasedSIR(PARAMS, 1000, 10).simulate(400, rng=1234)
    assert traj.I.max() > 10
    assert traj.I[-1] < traj.I.max()


def test_no_transmission_without_beta():
    params = SIRParameters(beta=0.0, contact_rate=10.0, gamma=0.25, dt=0.1)
    for mode in ("mass_action", "contacts"):
        traj = AgentBasedSIR(params, 100, 10, infection_mode=mode).simulate(50, rng=0)
        assert np.all(traj.S == 90)


def test_step_updates_status_vector():
    model = AgentBasedSIR(SIRParameters(gamma=1e6, dt=1.0), 20, 20)
    counts = model.step(np.random.default_rng(0))
    assert counts == SIRState(0, 0, 20)
    assert np.all(model.status == DiseaseState.RECOVERED)


def test_empty_population():
    traj = AgentBasedSIR(PARAMS, 0, 0).simulate(5, rng=0)
    assert all(s == SIRState(0, 0, 0) for s in traj.states)


def test_validation():
    with pytest.raises(InvalidParameterError):
        AgentBasedSIR(PARAMS, n_agents=10, i0=8, r0=5)
    with pytest.raises(InvalidParameterError):
        AgentBasedSIR(PARAMS, n_agents=10, i0=-1)
    with pytest.raises(ValueError):
        AgentBasedSIR(PARAMS, n_agents=10, i0=1, infection_mode="network")
    with pytest.raises(InvalidParameterError):
        AgentBasedSIR(PARAMS, n_agents=10, i0=1).simulate(0)


def test_contacts_mode_rejects_beta_above_one():
    params = SIRParameters(beta=2.0, contact_rate=500.0, gamma=0.0, dt=0.1)
    with pytest.raises(InvalidParameterError, match="at most 1"):
        AgentBasedSIR(params, n_agents=100, i0=50, infection_mode="contacts")
    # mass action reads beta * c as a rate, so beta > 1 is fine there
    model = AgentBasedSIR(params, n_agents=100, i0=50)
    assert model.step(np.random.default_rng(0)).S == 0


def test_contacts_mode_certain_transmission():
    # beta = 1 and many contacts: every susceptible meets several infected agents
    params = SIRParameters(beta=1.0, contact_rate=500.0, gamma=0.0, dt=0.1)
    model = AgentBasedSIR(params, n_agents=100, i0=50, infection_mode="contacts")
    assert model.step(np.random.default_rng(0)) == SIRState(0, 100, 0)


@pytest.mark.parametrize("kwargs", [{"i0": 1.5}, {"n_agents": 10.0}, {"r0": True}])
def test_non_integer_counts_rejected(kwargs):
    args = {"n_agents": 10, "i0": 1, "r0": 0}
    args.update(kwargs)
    with pytest.raises(InvalidParameterError, match="integer"):
        AgentBasedSIR(PARAMS, **args)

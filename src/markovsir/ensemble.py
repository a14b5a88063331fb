"""
===========================================================
ensemble.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================

Description:
    Monte Carlo ensembles of independent stochastic SIR
    trajectories and parameter sweeps over (beta, gamma).

Example Usage:
    from markovsir import SIRConfig
    from markovsir.ensemble import run_ensemble, parameter_sweep
    ens = run_ensemble(SIRConfig(), n_runs=100)
    band = ens.quantiles("I", q=(0.05, 0.5, 0.95))
    df = parameter_sweep(SIRConfig(), betas, gammas, n_runs=20)

Notes:
    - Run k always draws from child k of SeedSequence(config.seed),
      so results are identical whether run serially or in a pool.
    - Trajectories share nothing; a pool only needs the config.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import numpy as np
import pandas as pd
from multiprocessing import Pool
from typing import Dict, List, Optional, Sequence, Union

from . import config as settings
from .metrics import summarize
from .parameters import SIRConfig
from .steps import StepFunction, get_step
from .trajectory import Trajectory, simulate


def _run_one(args) -> Trajectory:
    config, step, seed_seq = args
    return simulate(config, step=step, rng=np.random.default_rng(seed_seq))


class Ensemble:
    """Collection of independent trajectories sharing one configuration"""
    def __init__(self, config: SIRConfig, trajectories: List[Trajectory]):
        self.config = config
        self.trajectories = trajectories

    def __len__(self) -> int:
        return len(self.trajectories)

    def __iter__(self):
        return iter(self.trajectories)

    @property
    def times(self) -> np.ndarray:
        return np.arange(self.config.n_steps + 1) * self.config.dt

    def to_array(self) -> np.ndarray:
        """Array of shape (n_runs, n_steps + 1, 3) holding S, I, R"""
        return np.stack([np.column_stack([tr.S, tr.I, tr.R]) for tr in self.trajectories])

    def to_dataframe(self) -> pd.DataFrame:
        """Long format: one row per (run, t)"""
        frames = []
        for k, tr in enumerate(self.trajectories):
            df = tr.to_dataframe()
            df.insert(0, "run", k)
            frames.append(df)
        return pd.concat(frames, ignore_index=True)

    def quantiles(self, compartment: str = "I",
                  q: Sequence[float] = (0.05, 0.5, 0.95)) -> pd.DataFrame:
        """Pointwise quantiles of one compartment across runs, indexed by t"""
        idx = "SIR".find(compartment)
        if len(compartment) != 1 or idx < 0:
            raise ValueError("compartment must be 'S', 'I' or 'R'")
        values = self.to_array()[:, :, idx]
        qs = np.quantile(values, q, axis=0)
        df = pd.DataFrame(qs.T, columns=[float(x) for x in q])
        df.index = pd.Index(self.times, name="t")
        return df

    def summaries(self) -> pd.DataFrame:
        """One row of summarize() metrics per run"""
        records = [summarize(tr) for tr in self.trajectories]
        df = pd.DataFrame.from_records(records)
        df.insert(0, "run", range(len(records)))
        return df


def run_ensemble(config: SIRConfig, n_runs: int,
                 step: Union[str, StepFunction] = "binomial",
                 processes: Optional[int] = None) -> Ensemble:
    """
    Simulate n_runs independent trajectories.

    Parameters
    ----------
    config : SIRConfig
        Shared configuration; config.seed seeds the whole ensemble
    n_runs : int
        Number of trajectories (> 0)
    step : str or StepFunction
        Step flavour for every run
    processes : int, optional
        None or 1 runs serially; 0 uses config.POOL_NCORES workers;
        > 1 uses that many worker processes

    Returns
    -------
    ensemble : Ensemble
    """
    if n_runs <= 0:
        raise ValueError(f"n_runs must be positive, got {n_runs}")
    if processes is not None and processes < 0:
        raise ValueError(f"processes must be non-negative, got {processes}")
    get_step(step)

    children = np.random.SeedSequence(config.seed).spawn(n_runs)
    jobs = [(config, step, child) for child in children]

    if processes == 0:
        processes = settings.POOL_NCORES
    if processes is None or processes == 1:
        trajectories = [_run_one(job) for job in jobs]
    else:
        with Pool(processes) as pool:
            trajectories = pool.map(_run_one, jobs)
    return Ensemble(config, trajectories)


def parameter_sweep(config: SIRConfig, betas: Sequence[float], gammas: Sequence[float],
                    n_runs: int = 10, step: Union[str, StepFunction] = "binomial",
                    processes: Optional[int] = None) -> pd.DataFrame:
    """
    Evaluate ensembles across a grid of (beta, gamma) values. Returns a tidy
    DataFrame with one row per parameter combo holding mean summary metrics.
    """
    records: List[Dict[str, float]] = []
    for b in betas:
        for g in gammas:
            cfg = config.replace(beta=float(b), gamma=float(g))
            summ = run_ensemble(cfg, n_runs, step=step, processes=processes).summaries()
            rec = {
                "beta": float(b),
                "gamma": float(g),
                "R0": cfg.parameters.R0,
            }
            for col in ("peak_time", "peak_infected", "final_size", "attack_rate",
                        "epidemic_duration"):
                rec[f"mean_{col}"] = float(summ[col].mean())
            rec["extinction_fraction"] = float(summ["extinction_time"].notna().mean())
            records.append(rec)
    df = pd.DataFrame.from_records(records)
    return df.sort_values(["beta", "gamma"]).reset_index(drop=True)

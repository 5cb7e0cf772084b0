from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import asdict, replace

import pandas as pd

from ..config import LSMConfig
from ..instruments.vanilla import make_vanilla_payoff
from ..models.binomial_crr import american_binomial_price
from ..models.stochastic_processes import GeometricBrownianMotion
from ..numerics.basis import make_laguerre_set
from ..pricers.lsm import LSMPricer
from ..types import LSMResult, OptionType
from .convergence import (
    BasisConvergencePoint,
    OutOfSampleTrial,
    PathConvergencePoint,
)

# (spot, sigma, maturity, finite-difference American put value), K=40, r=6%
LS2001_CASES: tuple[tuple[float, float, float, float], ...] = (
    (36.0, 0.20, 1.0, 4.478),
    (36.0, 0.20, 2.0, 4.840),
    (36.0, 0.40, 1.0, 7.101),
    (36.0, 0.40, 2.0, 8.508),
    (38.0, 0.20, 1.0, 3.250),
    (38.0, 0.20, 2.0, 3.745),
    (38.0, 0.40, 1.0, 6.148),
    (38.0, 0.40, 2.0, 7.670),
    (40.0, 0.20, 1.0, 2.314),
    (40.0, 0.20, 2.0, 2.885),
    (40.0, 0.40, 1.0, 5.312),
    (40.0, 0.40, 2.0, 6.920),
    (42.0, 0.20, 1.0, 1.617),
    (42.0, 0.20, 2.0, 2.212),
    (42.0, 0.40, 1.0, 4.582),
    (42.0, 0.40, 2.0, 6.248),
    (44.0, 0.20, 1.0, 1.110),
    (44.0, 0.20, 2.0, 1.690),
    (44.0, 0.40, 1.0, 3.948),
    (44.0, 0.40, 2.0, 5.647),
)


def result_frame(rows: Iterable[tuple[str, float, LSMResult]]) -> pd.DataFrame:
    """Tidy table of ``(label, spot, result)`` rows.

    Columns: case, spot, american, european, premium, se, european_se,
    n_paths, degenerate_dates.
    """
    records = []
    for label, spot, res in rows:
        d = asdict(res)
        records.append(
            {
                "case": label,
                "spot": float(spot),
                "american": d["option_value"],
                "european": d["european_value"],
                "premium": d["early_exercise_premium"],
                "se": d["standard_error"],
                "european_se": d["european_standard_error"],
                "n_paths": d["n_paths"],
                "degenerate_dates": d["degenerate_dates"],
            }
        )
    return pd.DataFrame(records)


def basis_convergence_table(points: Sequence[BasisConvergencePoint]) -> pd.DataFrame:
    df = pd.DataFrame(points, columns=["m", "value", "se"])
    df["change"] = df["value"].diff()
    return df


def path_convergence_table(points: Sequence[PathConvergencePoint]) -> pd.DataFrame:
    """Path-count sweep with the ``SE * sqrt(N)`` column (flat if SE ~ 1/sqrt(N))."""
    df = pd.DataFrame(points, columns=["n_paths", "value", "se"])
    df["se_sqrt_n"] = df["se"] * df["n_paths"].map(lambda n: math.sqrt(float(n)))
    return df.sort_values("n_paths").reset_index(drop=True)


def out_of_sample_table(trials: Sequence[OutOfSampleTrial]) -> pd.DataFrame:
    rows = []
    for i, (ins, oos) in enumerate(trials, start=1):
        se = math.hypot(ins.standard_error, oos.standard_error)
        diff = oos.option_value - ins.option_value
        rows.append(
            {
                "trial": i,
                "in_sample": ins.option_value,
                "out_of_sample": oos.option_value,
                "diff": diff,
                "se_diff": se,
                "z": diff / se if se > 0 else float("nan"),
            }
        )
    return pd.DataFrame(rows)


def benchmark_table(
    config: LSMConfig,
    *,
    cases: Iterable[tuple[float, float, float, float]] = LS2001_CASES,
    strike: float = 40.0,
    dates_per_year: int = 50,
    basis_size: int = 3,
    binomial_steps: int | None = None,
) -> pd.DataFrame:
    """
    Longstaff-Schwartz (2001, Table 1) American put benchmark.

    For every ``(spot, sigma, maturity, fd_ref)`` case a fresh pricer is built
    with ``dates_per_year * maturity`` exercise dates and the configuration's
    path count, rate and seed.

    Parameters
    ----------
    binomial_steps
        If given, also price each case on a CRR tree with that many steps and
        report it in a ``binomial`` column.

    Returns
    -------
    pandas.DataFrame
        Columns: spot, sigma, maturity, lsm, fd_ref, diff, se, z (and binomial).
    """
    rows = []
    for spot, sigma, T, fd_ref in cases:
        cfg = replace(
            config,
            maturity=float(T),
            n_exercise_dates=max(1, int(round(dates_per_year * T))),
        )
        payoff = make_vanilla_payoff(OptionType.PUT, K=strike)
        pricer = LSMPricer(
            cfg,
            GeometricBrownianMotion(rate=cfg.rate, sigma=sigma),
            payoff,
            make_laguerre_set(basis_size),
        )
        res = pricer.price(spot)
        diff = res.option_value - fd_ref
        row = {
            "spot": spot,
            "sigma": sigma,
            "maturity": T,
            "lsm": res.option_value,
            "fd_ref": fd_ref,
            "diff": diff,
            "se": res.standard_error,
            "z": diff / res.standard_error if res.standard_error > 0 else float("nan"),
        }
        if binomial_steps is not None:
            row["binomial"] = american_binomial_price(
                payoff, spot=spot, r=cfg.rate, sigma=sigma, T=T, n_steps=binomial_steps
            )
        rows.append(row)
    return pd.DataFrame(rows)


__all__ = [
    "LS2001_CASES",
    "result_frame",
    "basis_convergence_table",
    "path_convergence_table",
    "out_of_sample_table",
    "benchmark_table",
]

"""Convergence diagnostics for the LSM pricer.

Each driver is a thin outer loop around :meth:`LSMPricer.price` that varies a
single axis (basis-set size, path count, or the path set used to fit the
exercise policy) and returns an ordered list of small records. The drivers
are pure: they only read the caller's configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import NamedTuple

from ..config import LSMConfig, RandomConfig
from ..instruments.vanilla import make_vanilla_payoff
from ..models.stochastic_processes import GeometricBrownianMotion
from ..numerics.basis import MAX_ORDER, make_laguerre_set
from ..pricers.lsm import LSMPricer
from ..types import LSMResult, OptionType

LOGGER = logging.getLogger(__name__)

DEFAULT_BASIS_SIZE = 3


class BasisConvergencePoint(NamedTuple):
    m: int
    value: float
    standard_error: float


class PathConvergencePoint(NamedTuple):
    n_paths: int
    value: float
    standard_error: float


class OutOfSampleTrial(NamedTuple):
    in_sample: LSMResult
    out_of_sample: LSMResult


def _make_pricer(
    config: LSMConfig,
    strike: float,
    sigma: float,
    m: int,
    kind: OptionType,
) -> LSMPricer:
    return LSMPricer(
        config,
        GeometricBrownianMotion(rate=config.rate, sigma=sigma),
        make_vanilla_payoff(kind, K=strike),
        make_laguerre_set(m),
    )


def _with_seed(config: LSMConfig, seed: int) -> LSMConfig:
    return replace(config, random=RandomConfig(seed=seed, rng_type=config.random.rng_type))


def analyze_by_basis_functions(
    config: LSMConfig,
    spot: float,
    strike: float,
    sigma: float,
    max_m: int,
    *,
    kind: OptionType = OptionType.PUT,
) -> list[BasisConvergencePoint]:
    """Value and standard error for Laguerre sets of size ``M = 1..max_m``.

    Every ``M`` uses a fresh pricer with the same configuration (hence the
    same paths), so differences between rows come from the exercise policy.
    """
    if isinstance(max_m, bool) or not isinstance(max_m, int) or not 1 <= max_m <= MAX_ORDER + 1:
        raise ValueError(f"max_m must be an integer in [1, {MAX_ORDER + 1}], got {max_m!r}")

    rows: list[BasisConvergencePoint] = []
    for m in range(1, max_m + 1):
        res = _make_pricer(config, strike, sigma, m, kind).price(spot)
        LOGGER.debug("basis convergence M=%d value=%.6f se=%.6f", m, res.option_value, res.standard_error)
        rows.append(BasisConvergencePoint(m, res.option_value, res.standard_error))
    return rows


def analyze_by_path_count(
    config: LSMConfig,
    spot: float,
    strike: float,
    sigma: float,
    path_counts: Iterable[int],
    *,
    kind: OptionType = OptionType.PUT,
) -> list[PathConvergencePoint]:
    """Value and standard error for each requested path count (3-term Laguerre)."""
    counts = [int(n) for n in path_counts]
    if not counts:
        raise ValueError("path_counts must not be empty")

    rows: list[PathConvergencePoint] = []
    for n in counts:
        cfg = replace(config, n_paths=n)
        res = _make_pricer(cfg, strike, sigma, DEFAULT_BASIS_SIZE, kind).price(spot)
        LOGGER.debug("path convergence N=%d value=%.6f se=%.6f", n, res.option_value, res.standard_error)
        rows.append(PathConvergencePoint(n, res.option_value, res.standard_error))
    return rows


def out_of_sample_test(
    config: LSMConfig,
    spot: float,
    strike: float,
    sigma: float,
    n_trials: int,
    *,
    kind: OptionType = OptionType.PUT,
) -> list[OutOfSampleTrial]:
    """
    Compare in-sample LSM values with out-of-sample values of the same policy.

    Trial ``i`` fits the exercise policy on the paths of seed
    ``config.seed + 2*i`` and then prices that fixed policy, without
    refitting, on an independent path set drawn with seed
    ``config.seed + 2*i + 1``.
    """
    if isinstance(n_trials, bool) or not isinstance(n_trials, int) or n_trials < 1:
        raise ValueError(f"n_trials must be a positive integer, got {n_trials!r}")

    trials: list[OutOfSampleTrial] = []
    for i in range(n_trials):
        fit_seed = config.seed + 2 * i
        pricer = _make_pricer(_with_seed(config, fit_seed), strike, sigma, DEFAULT_BASIS_SIZE, kind)

        in_sample, policy = pricer.fit(spot)
        out_of_sample = pricer.price_with_policy(spot, policy, seed=fit_seed + 1)

        LOGGER.debug(
            "out-of-sample trial %d: in=%.6f out=%.6f",
            i,
            in_sample.option_value,
            out_of_sample.option_value,
        )
        trials.append(OutOfSampleTrial(in_sample, out_of_sample))
    return trials


class ConvergenceAnalyzer:
    """Namespace bundling the convergence drivers."""

    analyze_by_basis_functions = staticmethod(analyze_by_basis_functions)
    analyze_by_path_count = staticmethod(analyze_by_path_count)
    out_of_sample_test = staticmethod(out_of_sample_test)


__all__ = [
    "BasisConvergencePoint",
    "PathConvergencePoint",
    "OutOfSampleTrial",
    "ConvergenceAnalyzer",
    "analyze_by_basis_functions",
    "analyze_by_path_count",
    "out_of_sample_test",
]

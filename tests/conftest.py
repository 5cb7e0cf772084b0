"""Pytest helpers for the lsm_pricing library."""

from __future__ import annotations

import numpy as np
import pytest

from lsm_pricing.config import LSMConfig, RandomConfig
from lsm_pricing.instruments.vanilla import make_vanilla_payoff
from lsm_pricing.models.stochastic_processes import GeometricBrownianMotion
from lsm_pricing.numerics.basis import make_laguerre_set
from lsm_pricing.pricers.lsm import LSMPricer
from lsm_pricing.types import OptionType


@pytest.fixture
def base_params() -> dict:
    """The canonical Longstaff-Schwartz test case."""
    return {
        "S": 40.0,
        "K": 40.0,
        "r": 0.06,
        "sigma": 0.2,
        "T": 1.0,
        "dates": 50,
    }


@pytest.fixture
def make_config():
    """Factory fixture for LSMConfig with small, test-friendly defaults."""

    def _make(
        *,
        n_paths: int = 4_000,
        n_exercise_dates: int = 50,
        maturity: float = 1.0,
        rate: float = 0.06,
        antithetic: bool = False,
        seed: int = 42,
    ) -> LSMConfig:
        return LSMConfig(
            n_paths=n_paths,
            n_exercise_dates=n_exercise_dates,
            maturity=maturity,
            rate=rate,
            antithetic=antithetic,
            random=RandomConfig(seed=seed),
        )

    return _make


@pytest.fixture
def make_pricer(make_config):
    """Factory fixture for a GBM pricer with a Laguerre basis."""

    def _make(
        *,
        kind: OptionType = OptionType.PUT,
        K: float = 40.0,
        sigma: float = 0.2,
        m: int = 3,
        basis=None,
        **cfg_kwargs,
    ) -> LSMPricer:
        cfg = make_config(**cfg_kwargs)
        return LSMPricer(
            cfg,
            GeometricBrownianMotion(rate=cfg.rate, sigma=sigma),
            make_vanilla_payoff(kind, K=K),
            make_laguerre_set(m) if basis is None else basis,
        )

    return _make


@pytest.fixture
def rng():
    """Seeded RNG factory."""

    def _rng(seed: int) -> np.random.Generator:
        return np.random.default_rng(seed)

    return _rng

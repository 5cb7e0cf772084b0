"""Models of the underlying: path simulators and closed-form/tree references."""

from .binomial_crr import BinomialModel, american_binomial_price, binomial_price
from .bs import bs_price, call_price, put_price
from .stochastic_processes import (
    GeometricBrownianMotion,
    JumpDiffusionProcess,
    StochasticProcess,
    sim_brownian,
    sim_gbm,
    sim_gbm_terminal,
    standard_normals,
)

__all__ = [
    "StochasticProcess",
    "GeometricBrownianMotion",
    "JumpDiffusionProcess",
    "standard_normals",
    "sim_brownian",
    "sim_gbm",
    "sim_gbm_terminal",
    "BinomialModel",
    "binomial_price",
    "american_binomial_price",
    "bs_price",
    "call_price",
    "put_price",
]

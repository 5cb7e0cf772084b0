from __future__ import annotations

import math

from scipy.stats import norm

from ..types import OptionType


def _validate_scalar_inputs(
    *, spot: float, strike: float, sigma: float, tau: float
) -> None:
    if spot <= 0.0:
        raise ValueError("spot must be positive")
    if strike <= 0.0:
        raise ValueError("strike must be positive")
    if sigma <= 0.0:
        raise ValueError("sigma must be positive")
    if tau <= 0.0:
        raise ValueError("tau must be positive")


def discount_factor(rate: float, tau: float) -> float:
    return math.exp(-rate * tau)


def d1_d2_from_spot(
    *, spot: float, strike: float, r: float, sigma: float, tau: float
) -> tuple[float, float]:
    _validate_scalar_inputs(spot=spot, strike=strike, sigma=sigma, tau=tau)
    vol_sqrt_t = sigma * math.sqrt(tau)
    num = math.log(spot / strike) + (r + 0.5 * sigma * sigma) * tau
    d1 = num / vol_sqrt_t
    d2 = d1 - vol_sqrt_t
    return float(d1), float(d2)


def call_price(*, spot: float, strike: float, r: float, sigma: float, tau: float) -> float:
    """
    Black–Scholes European call on a non-dividend-paying underlying.
    """
    d1, d2 = d1_d2_from_spot(spot=spot, strike=strike, r=r, sigma=sigma, tau=tau)
    return float(spot * norm.cdf(d1) - strike * discount_factor(r, tau) * norm.cdf(d2))


def put_price(*, spot: float, strike: float, r: float, sigma: float, tau: float) -> float:
    """
    Black–Scholes European put on a non-dividend-paying underlying.
    """
    d1, d2 = d1_d2_from_spot(spot=spot, strike=strike, r=r, sigma=sigma, tau=tau)
    return float(strike * discount_factor(r, tau) * norm.cdf(-d2) - spot * norm.cdf(-d1))


def bs_price(
    kind: OptionType, *, spot: float, strike: float, r: float, sigma: float, tau: float
) -> float:
    if kind == OptionType.CALL:
        return call_price(spot=spot, strike=strike, r=r, sigma=sigma, tau=tau)
    if kind == OptionType.PUT:
        return put_price(spot=spot, strike=strike, r=r, sigma=sigma, tau=tau)
    raise ValueError(f"Unsupported option kind: {kind}")

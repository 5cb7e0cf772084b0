import math

import pytest

from lsm_pricing.instruments.vanilla import make_vanilla_payoff
from lsm_pricing.models.binomial_crr import (
    BinomialModel,
    american_binomial_price,
    binomial_price,
)
from lsm_pricing.models.bs import bs_price, call_price, put_price
from lsm_pricing.types import OptionType


def test_binomial_european_converges_toward_bs():
    """CRR European put should approach BS as steps increase."""
    put = make_vanilla_payoff(OptionType.PUT, K=40.0)
    bs = put_price(spot=40.0, strike=40.0, r=0.06, sigma=0.2, tau=1.0)

    steps = [25, 100, 400]
    errs = [
        abs(
            binomial_price(
                BinomialModel.from_crr(S0=40.0, r=0.06, sigma=0.2, T=1.0, n_steps=n),
                put,
                american=False,
            )
            - bs
        )
        for n in steps
    ]

    assert errs[-1] <= errs[0]
    assert errs[-1] <= 1e-2


def test_american_put_matches_finite_difference_reference():
    """Longstaff-Schwartz (2001) quote 2.314 for S=K=40, r=6%, sigma=20%, T=1."""
    put = make_vanilla_payoff(OptionType.PUT, K=40.0)
    value = american_binomial_price(put, spot=40.0, r=0.06, sigma=0.2, T=1.0, n_steps=1_000)
    assert value == pytest.approx(2.314, abs=5e-3)


def test_american_call_equals_european_without_dividends():
    call = make_vanilla_payoff(OptionType.CALL, K=40.0)
    model = BinomialModel.from_crr(S0=40.0, r=0.06, sigma=0.2, T=1.0, n_steps=500)
    am = binomial_price(model, call, american=True)
    eu = binomial_price(model, call, american=False)
    assert am == pytest.approx(eu, abs=1e-10)


def test_put_call_parity_bs():
    S, K, r, sigma, T = 40.0, 42.0, 0.06, 0.25, 1.5
    C = call_price(spot=S, strike=K, r=r, sigma=sigma, tau=T)
    P = put_price(spot=S, strike=K, r=r, sigma=sigma, tau=T)
    assert abs((C - P) - (S - K * math.exp(-r * T))) < 1e-10


def test_invalid_model_inputs():
    with pytest.raises(ValueError):
        BinomialModel.from_crr(S0=40.0, r=0.06, sigma=0.0, T=1.0, n_steps=10)
    with pytest.raises(ValueError):
        BinomialModel.from_crr(S0=40.0, r=0.06, sigma=0.2, T=1.0, n_steps=0)


def test_bs_price_dispatches_on_kind():
    args = dict(spot=40.0, strike=40.0, r=0.06, sigma=0.2, tau=1.0)
    assert bs_price(OptionType.PUT, **args) == put_price(**args)
    assert bs_price(OptionType.CALL, **args) == call_price(**args)

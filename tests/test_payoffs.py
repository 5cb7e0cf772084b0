import numpy as np
import pytest

from lsm_pricing.exceptions import ConstructionError
from lsm_pricing.instruments.vanilla import Payoff, VanillaPayoff, make_vanilla_payoff
from lsm_pricing.types import OptionType


def test_put_and_call_exercise_values():
    put = make_vanilla_payoff(OptionType.PUT, K=40.0)
    call = make_vanilla_payoff("call", K=40.0)

    assert put.exercise_value(36.0) == pytest.approx(4.0)
    assert put.exercise_value(44.0) == 0.0
    assert call.exercise_value(44.0) == pytest.approx(4.0)
    assert call.exercise_value(36.0) == 0.0


def test_scalar_in_float_out_and_vectorized():
    put = VanillaPayoff(kind=OptionType.PUT, strike=1.1)
    assert isinstance(put.exercise_value(1.0), float)

    S = np.array([0.9, 1.1, 1.3])
    assert np.allclose(put(S), [0.2, 0.0, 0.0])


def test_payoff_protocol():
    assert isinstance(make_vanilla_payoff(OptionType.PUT, K=1.0), Payoff)


@pytest.mark.parametrize("K", [0.0, -1.0, float("nan")])
def test_invalid_strike(K):
    with pytest.raises(ConstructionError):
        make_vanilla_payoff(OptionType.PUT, K=K)


def test_unknown_kind():
    with pytest.raises(ConstructionError):
        make_vanilla_payoff("straddle", K=40.0)


def test_payoff_functions():
    from lsm_pricing.instruments.vanilla import call_payoff, put_payoff

    assert call_payoff(45.0, K=40.0) == pytest.approx(5.0)
    assert put_payoff(45.0, K=40.0) == 0.0
    assert np.allclose(put_payoff(np.array([30.0, 50.0]), K=40.0), [10.0, 0.0])

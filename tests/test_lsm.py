import logging
import math

import numpy as np
import pytest

from lsm_pricing.config import LSMConfig
from lsm_pricing.exceptions import ConstructionError, InvalidInputError
from lsm_pricing.instruments.vanilla import make_vanilla_payoff
from lsm_pricing.models.bs import put_price
from lsm_pricing.models.stochastic_processes import (
    GeometricBrownianMotion,
    JumpDiffusionProcess,
)
from lsm_pricing.numerics.basis import ConstantBasis, make_laguerre_set, make_monomial_set
from lsm_pricing.pricers.lsm import ExercisePolicy, LSMPricer, _exercise_mask
from lsm_pricing.types import OptionType

# Longstaff & Schwartz (2001), Section 1 worked example: S0=1, K=1.10, r=6%,
# exercise at t=1,2,3, regression on (1, X, X^2). Value 0.1144.
LS_EXAMPLE_PATHS = np.array(
    [
        [1.00, 1.09, 1.08, 1.34],
        [1.00, 1.16, 1.26, 1.54],
        [1.00, 1.22, 1.07, 1.03],
        [1.00, 0.93, 0.97, 0.92],
        [1.00, 1.11, 1.56, 1.52],
        [1.00, 0.76, 0.77, 0.90],
        [1.00, 0.92, 0.84, 1.01],
        [1.00, 0.88, 1.22, 1.34],
    ]
)


@pytest.fixture
def ls_example_pricer():
    cfg = LSMConfig(n_paths=8, n_exercise_dates=3, maturity=3.0, rate=0.06)
    return LSMPricer(
        cfg,
        GeometricBrownianMotion(rate=0.06, sigma=0.2),
        make_vanilla_payoff(OptionType.PUT, K=1.10),
        make_monomial_set(2),
    )


def test_longstaff_schwartz_worked_example(ls_example_pricer):
    res = ls_example_pricer.price_paths(LS_EXAMPLE_PATHS)
    assert res.option_value == pytest.approx(0.1144, abs=5e-4)
    assert res.n_paths == 8
    assert res.degenerate_dates == 0


def test_worked_example_stopping_rule(ls_example_pricer):
    _, cf = ls_example_pricer.fit_policy(LS_EXAMPLE_PATHS)
    # paths 4, 6, 7, 8 exercise at t=1, path 3 at maturity, the rest never
    assert cf.exercise_index.tolist() == [3, 3, 3, 1, 3, 1, 1, 1]
    assert np.allclose(cf.values, [0.0, 0.0, 0.07, 0.17, 0.0, 0.34, 0.18, 0.22])


def test_worked_example_policy_reapplied_in_sample(ls_example_pricer):
    policy, cf = ls_example_pricer.fit_policy(LS_EXAMPLE_PATHS)
    replay = ls_example_pricer.apply_policy(LS_EXAMPLE_PATHS, policy)
    assert np.array_equal(replay.exercise_index, cf.exercise_index)
    assert np.allclose(replay.values, cf.values)


def test_exercise_only_when_in_the_money(make_pricer):
    pricer = make_pricer(n_paths=2_000, n_exercise_dates=20)
    paths = pricer.simulate(40.0)
    _, cf = pricer.fit_policy(paths)

    early = cf.exercise_index < 20
    idx = cf.exercise_index[early]
    intrinsic = np.maximum(40.0 - paths[early, idx], 0.0)
    assert np.all(intrinsic > 0.0)
    assert np.allclose(cf.values[early], intrinsic)
    assert np.all(cf.exercise_index >= 1)


def test_benchmark_case_matches_reference(make_pricer, base_params):
    """S=K=40, r=6%, sigma=20%, T=1, 50 dates, 10k paths: ~2.314."""
    p = base_params
    pricer = make_pricer(
        K=p["K"], sigma=p["sigma"], n_paths=10_000, n_exercise_dates=p["dates"], rate=p["r"]
    )
    res = pricer.price(p["S"])

    assert res.standard_error > 0.0
    assert abs(res.option_value - 2.314) <= 4.0 * res.standard_error + 0.02
    assert res.european_value < res.option_value

    bs = put_price(spot=40.0, strike=40.0, r=0.06, sigma=0.2, tau=1.0)
    assert abs(res.european_value - bs) <= 4.0 * res.european_standard_error


@pytest.mark.parametrize("spot, sigma", [(36.0, 0.2), (40.0, 0.4), (44.0, 0.2)])
def test_american_put_not_below_european(make_pricer, spot, sigma):
    res = make_pricer(sigma=sigma, n_paths=4_000).price(spot)
    assert res.early_exercise_premium >= -2.0 * res.standard_error
    assert res.early_exercise_premium == pytest.approx(res.option_value - res.european_value)


def test_standard_error_scales_like_inverse_sqrt_n(make_pricer):
    se1 = make_pricer(n_paths=2_000, seed=11).price(40.0).standard_error
    se2 = make_pricer(n_paths=8_000, seed=12).price(40.0).standard_error
    # expected ratio ~ sqrt(8000/2000) = 2
    assert 1.5 <= se1 / se2 <= 2.6


def test_identical_inputs_give_identical_results(make_pricer):
    a = make_pricer(n_paths=3_000, seed=5).price(40.0)
    b = make_pricer(n_paths=3_000, seed=5).price(40.0)
    assert a == b

    pricer = make_pricer(n_paths=3_000, seed=5)
    assert pricer.price(40.0) == pricer.price(40.0)


def test_different_seeds_give_different_results(make_pricer):
    a = make_pricer(n_paths=1_000, seed=1).price(40.0)
    b = make_pricer(n_paths=1_000, seed=2).price(40.0)
    assert a.option_value != b.option_value


def test_american_call_has_no_early_exercise_premium(make_pricer):
    res = make_pricer(kind=OptionType.CALL, n_paths=10_000).price(40.0)
    assert abs(res.early_exercise_premium) <= 3.0 * res.standard_error


def test_constant_basis_call_premium_not_positive(make_pricer):
    """A constant-only regression can only exercise too early, never add value."""
    res = make_pricer(kind=OptionType.CALL, basis=[ConstantBasis()], n_paths=10_000).price(40.0)
    assert res.early_exercise_premium <= 3.0 * res.standard_error


def test_antithetic_pricing(make_pricer):
    plain = make_pricer(n_paths=4_000, seed=3).price(40.0)
    anti = make_pricer(n_paths=4_000, seed=3, antithetic=True).price(40.0)

    assert anti.standard_error > 0.0
    assert abs(anti.option_value - plain.option_value) <= 4.0 * math.hypot(
        anti.standard_error, plain.standard_error
    )
    # pair averages are negatively correlated halves: the European SE shrinks
    assert anti.european_standard_error < plain.european_standard_error


def test_jump_diffusion_put_is_priced(make_config):
    cfg = make_config(n_paths=4_000)
    pricer = LSMPricer(
        cfg,
        JumpDiffusionProcess(rate=0.06, sigma=0.2, jump_intensity=0.1),
        make_vanilla_payoff(OptionType.PUT, K=40.0),
        make_laguerre_set(3),
    )
    res = pricer.price(40.0)
    assert res.option_value > 0.0
    assert res.early_exercise_premium >= 0.0


def test_single_exercise_date_is_european(make_pricer):
    res = make_pricer(n_paths=2_000, n_exercise_dates=1).price(40.0)
    assert res.option_value == pytest.approx(res.european_value, rel=1e-12)
    assert res.early_exercise_premium == pytest.approx(0.0, abs=1e-12)
    assert res.degenerate_dates == 0


def test_degenerate_dates_fall_back_to_exercise(make_pricer, caplog):
    """Deep OTM puts have empty in-the-money sets on early dates."""
    pricer = make_pricer(n_paths=500, n_exercise_dates=10, sigma=0.05)
    with caplog.at_level(logging.DEBUG, logger="lsm_pricing.pricers.lsm"):
        res = pricer.price(60.0)
    assert res.degenerate_dates > 0
    assert "continuation set to 0" in caplog.text
    assert np.isfinite(res.option_value)


@pytest.mark.parametrize("spot", [0.0, -40.0, float("nan"), float("inf"), "40"])
def test_invalid_spot_rejected(make_pricer, spot):
    with pytest.raises(InvalidInputError):
        make_pricer(n_paths=10).price(spot)


def test_construction_rejects_empty_basis(make_config):
    with pytest.raises(ConstructionError):
        LSMPricer(
            make_config(),
            GeometricBrownianMotion(0.06, 0.2),
            make_vanilla_payoff(OptionType.PUT, K=40.0),
            [],
        )


def test_construction_rejects_non_basis(make_config):
    with pytest.raises(ConstructionError):
        LSMPricer(
            make_config(),
            GeometricBrownianMotion(0.06, 0.2),
            make_vanilla_payoff(OptionType.PUT, K=40.0),
            [lambda x: x],
        )


def test_price_paths_rejects_wrong_grid(ls_example_pricer):
    with pytest.raises(ValueError):
        ls_example_pricer.price_paths(LS_EXAMPLE_PATHS[:, :3])


def test_out_of_sample_policy_application(make_pricer):
    pricer = make_pricer(n_paths=4_000, seed=20)
    in_sample, policy = pricer.fit(40.0)
    oos = pricer.price_with_policy(40.0, policy, seed=21)

    assert policy.n_exercise_dates == 50
    assert policy.coefficients.shape == (51, 4)
    assert abs(oos.option_value - in_sample.option_value) <= 4.0 * math.hypot(
        oos.standard_error, in_sample.standard_error
    )


def test_policy_date_count_must_match(make_pricer):
    _, policy = make_pricer(n_paths=500, n_exercise_dates=10).fit(40.0)
    other = make_pricer(n_paths=500, n_exercise_dates=20)
    with pytest.raises(ValueError):
        other.apply_policy(other.simulate(40.0), policy)


def test_non_finite_continuation_means_continue():
    itm = np.array([True, True, True, True, False])
    intrinsic = np.array([1.0, 1.0, 1.0, 1.0, 5.0])
    continuation = np.array([np.nan, np.inf, -np.inf, 0.5])
    mask = _exercise_mask(itm, intrinsic, continuation)
    assert mask.tolist() == [False, False, False, True, False]


def test_policy_with_non_finite_coefficients_never_exercises(ls_example_pricer):
    coefficients = np.zeros((4, 3))
    coefficients[1] = [np.nan, 0.0, 0.0]
    coefficients[2] = [np.inf, 0.0, 0.0]
    policy = ExercisePolicy(
        basis=ls_example_pricer.basis_functions,
        coefficients=coefficients,
        degenerate=np.zeros(4, dtype=bool),
        regressor_scale=ls_example_pricer.regressor_scale,
    )
    cf = ls_example_pricer.apply_policy(LS_EXAMPLE_PATHS, policy)
    assert np.all(cf.exercise_index == 3)
    assert np.allclose(cf.values, np.maximum(1.10 - LS_EXAMPLE_PATHS[:, 3], 0.0))


def test_degenerate_date_uses_zero_continuation(ls_example_pricer):
    coefficients = np.zeros((4, 3))
    coefficients[1] = np.nan
    degenerate = np.array([False, True, False, False])
    policy = ExercisePolicy(
        basis=ls_example_pricer.basis_functions,
        coefficients=coefficients,
        degenerate=degenerate,
        regressor_scale=ls_example_pricer.regressor_scale,
    )
    assert np.all(policy.continuation_value(1, np.array([0.9, 1.0])) == 0.0)

    # zero continuation: every in-the-money path exercises at its first chance
    cf = ls_example_pricer.apply_policy(LS_EXAMPLE_PATHS, policy)
    assert cf.exercise_index.tolist() == [1, 3, 2, 1, 3, 1, 1, 1]

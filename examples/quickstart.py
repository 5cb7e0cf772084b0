from __future__ import annotations


def main() -> None:
    from lsm_pricing import (
        GeometricBrownianMotion,
        LSMConfig,
        LSMPricer,
        OptionType,
        RandomConfig,
        make_laguerre_set,
        make_vanilla_payoff,
    )

    cfg = LSMConfig(
        n_paths=10_000,
        n_exercise_dates=50,
        maturity=1.0,
        rate=0.06,
        random=RandomConfig(seed=42),
    )
    pricer = LSMPricer(
        cfg,
        GeometricBrownianMotion(rate=0.06, sigma=0.20),
        make_vanilla_payoff(OptionType.PUT, K=40.0),
        make_laguerre_set(3),
    )
    res = pricer.price(40.0)

    print("American:", res.option_value, "(SE=", res.standard_error, ")")
    print("European:", res.european_value)
    print("Early exercise premium:", res.early_exercise_premium)


if __name__ == "__main__":
    main()

"""lsm_pricing.instruments

Contract definitions ("what is being priced").

Pricers only consume the exercise value of a contract, so an instrument here
is a small payoff object exposing ``strike`` and ``exercise_value(price)``.
"""

from .vanilla import (
    Payoff,
    VanillaPayoff,
    call_payoff,
    make_vanilla_payoff,
    put_payoff,
)

__all__ = [
    "Payoff",
    "VanillaPayoff",
    "call_payoff",
    "put_payoff",
    "make_vanilla_payoff",
]

"""Vanilla (call/put) exercise payoffs.

The pricers only need the *exercise value* of the contract as a function of
the current underlying price; the same function is used at every exercise
date and at maturity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, overload, runtime_checkable

import numpy as np

from ..exceptions import ConstructionError
from ..types import OptionType
from ..typing import FloatArray


@overload
def call_payoff(ST: float, K: float) -> float: ...
@overload
def call_payoff(ST: FloatArray, K: float) -> FloatArray: ...
def call_payoff(ST: float | FloatArray, K: float) -> float | FloatArray:
    return np.maximum(ST - K, 0.0)


@overload
def put_payoff(ST: float, K: float) -> float: ...
@overload
def put_payoff(ST: FloatArray, K: float) -> FloatArray: ...
def put_payoff(ST: float | FloatArray, K: float) -> float | FloatArray:
    return np.maximum(K - ST, 0.0)


@runtime_checkable
class Payoff(Protocol):
    """Exercise value of a contract as a function of the underlying price."""

    @property
    def strike(self) -> float: ...

    def exercise_value(self, price: float | FloatArray) -> float | FloatArray: ...


@dataclass(frozen=True, slots=True)
class VanillaPayoff:
    """Callable, vectorized call/put exercise value."""

    kind: OptionType
    strike: float

    def __post_init__(self) -> None:
        if not isinstance(self.kind, OptionType):
            raise ConstructionError(f"Unsupported option kind: {self.kind}")
        if not (math.isfinite(self.strike) and self.strike > 0.0):
            raise ConstructionError("strike must be positive")

    @overload
    def exercise_value(self, price: float) -> float: ...
    @overload
    def exercise_value(self, price: FloatArray) -> FloatArray: ...

    def exercise_value(self, price: float | FloatArray) -> float | FloatArray:
        if self.kind == OptionType.CALL:
            out = call_payoff(price, K=self.strike)
        else:
            out = put_payoff(price, K=self.strike)

        # Ensure scalar input returns a Python float (avoids np.float64 vs float typing issues)
        if np.ndim(out) == 0:
            return float(out)
        return out

    def __call__(self, price: float | FloatArray) -> float | FloatArray:
        return self.exercise_value(price)


def make_vanilla_payoff(kind: OptionType | str, *, K: float) -> VanillaPayoff:
    """Factory returning a vanilla payoff for ``kind`` ("call"/"put")."""
    try:
        kind = OptionType(kind)
    except ValueError as e:
        raise ConstructionError(f"Unsupported option kind: {kind}") from e
    return VanillaPayoff(kind=kind, strike=float(K))


__all__ = [
    "Payoff",
    "VanillaPayoff",
    "call_payoff",
    "put_payoff",
    "make_vanilla_payoff",
]

"""Scalar regression features for the continuation-value regression.

Each basis function is an immutable object exposing ``evaluate(x)``
(vectorized over NumPy arrays) and a display ``name``. A basis *set* is an
ordered tuple of such objects, constant term first by convention.

Orthogonal polynomials are evaluated with their three-term recurrences:

- Laguerre:            (n+1) L_{n+1}(x) = (2n+1-x) L_n(x) - n L_{n-1}(x)
- Hermite (probabilists'): He_{n+1}(x) = x He_n(x) - n He_{n-1}(x)

Laguerre terms carry the weight ``exp(-x/2)`` used by Longstaff and Schwartz.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, overload, runtime_checkable

import numpy as np

from ..exceptions import ConstructionError
from ..typing import FloatArray

MAX_ORDER = 5


@runtime_checkable
class BasisFunction(Protocol):
    @property
    def name(self) -> str: ...

    def evaluate(self, x: float | FloatArray) -> float | FloatArray: ...


def _check_int(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int | np.integer):
        raise ConstructionError(f"{label} must be an integer, got {value!r}")
    return int(value)


def _check_order(order: object) -> None:
    n = _check_int(order, "order")
    if not 0 <= n <= MAX_ORDER:
        raise ConstructionError(f"order must be in [0, {MAX_ORDER}], got {n}")


def _as_output(x: float | FloatArray, out: np.ndarray) -> float | FloatArray:
    if np.ndim(x) == 0:
        return float(out)
    return out


def laguerre_polynomial(n: int, x: FloatArray) -> FloatArray:
    """Unweighted Laguerre polynomial ``L_n(x)``."""
    prev = np.ones_like(x)
    if n == 0:
        return prev
    cur = 1.0 - x
    for k in range(1, n):
        prev, cur = cur, ((2 * k + 1 - x) * cur - k * prev) / (k + 1)
    return cur


def hermite_polynomial(n: int, x: FloatArray) -> FloatArray:
    """Probabilists' Hermite polynomial ``He_n(x)``."""
    prev = np.ones_like(x)
    if n == 0:
        return prev
    cur = x.copy()
    for k in range(1, n):
        prev, cur = cur, x * cur - k * prev
    return cur


@dataclass(frozen=True, slots=True)
class ConstantBasis:
    """Intercept term; 1.0 everywhere."""

    @property
    def name(self) -> str:
        return "1"

    @overload
    def evaluate(self, x: float) -> float: ...
    @overload
    def evaluate(self, x: FloatArray) -> FloatArray: ...

    def evaluate(self, x: float | FloatArray) -> float | FloatArray:
        return _as_output(x, np.ones_like(np.asarray(x, dtype=np.float64)))


@dataclass(frozen=True, slots=True)
class MonomialBasis:
    power: int

    def __post_init__(self) -> None:
        p = _check_int(self.power, "power")
        if p < 0:
            raise ConstructionError(f"power must be >= 0, got {p}")

    @property
    def name(self) -> str:
        return f"x^{self.power}"

    @overload
    def evaluate(self, x: float) -> float: ...
    @overload
    def evaluate(self, x: FloatArray) -> FloatArray: ...

    def evaluate(self, x: float | FloatArray) -> float | FloatArray:
        return _as_output(x, np.power(np.asarray(x, dtype=np.float64), self.power))


@dataclass(frozen=True, slots=True)
class LaguerreBasis:
    """Weighted Laguerre term ``exp(-x/2) L_n(x)``.

    Negative inputs are clamped to 0 so the weight cannot blow up.
    """

    order: int

    def __post_init__(self) -> None:
        _check_order(self.order)

    @property
    def name(self) -> str:
        return f"L_{self.order}"

    @overload
    def evaluate(self, x: float) -> float: ...
    @overload
    def evaluate(self, x: FloatArray) -> FloatArray: ...

    def evaluate(self, x: float | FloatArray) -> float | FloatArray:
        xc = np.maximum(np.asarray(x, dtype=np.float64), 0.0)
        return _as_output(x, np.exp(-0.5 * xc) * laguerre_polynomial(self.order, xc))


@dataclass(frozen=True, slots=True)
class HermiteBasis:
    """Probabilists' Hermite polynomial ``He_n(x)``, unweighted."""

    order: int

    def __post_init__(self) -> None:
        _check_order(self.order)

    @property
    def name(self) -> str:
        return f"He_{self.order}"

    @overload
    def evaluate(self, x: float) -> float: ...
    @overload
    def evaluate(self, x: FloatArray) -> FloatArray: ...

    def evaluate(self, x: float | FloatArray) -> float | FloatArray:
        xa = np.asarray(x, dtype=np.float64)
        return _as_output(x, hermite_polynomial(self.order, xa))


def _check_set_size(m: object, *, cap: int | None) -> int:
    m = _check_int(m, "basis set size")
    if m < 1:
        raise ConstructionError(f"basis set size must be >= 1, got {m}")
    if cap is not None and m > cap:
        raise ConstructionError(f"basis set size must be <= {cap}, got {m}")
    return m


def make_laguerre_set(m: int) -> tuple[BasisFunction, ...]:
    """Constant plus Laguerre orders ``0..m-1`` (``m + 1`` functions)."""
    m = _check_set_size(m, cap=MAX_ORDER + 1)
    return (ConstantBasis(), *(LaguerreBasis(k) for k in range(m)))


def make_hermite_set(m: int) -> tuple[BasisFunction, ...]:
    """Constant plus Hermite orders ``0..m-1`` (``m + 1`` functions)."""
    m = _check_set_size(m, cap=MAX_ORDER + 1)
    return (ConstantBasis(), *(HermiteBasis(k) for k in range(m)))


def make_monomial_set(m: int) -> tuple[BasisFunction, ...]:
    """Constant plus powers ``1..m`` (``m + 1`` functions)."""
    m = _check_set_size(m, cap=None)
    return (ConstantBasis(), *(MonomialBasis(k) for k in range(1, m + 1)))


def basis_names(basis: Sequence[BasisFunction]) -> list[str]:
    return [b.name for b in basis]


def design_matrix(basis: Sequence[BasisFunction], x: FloatArray) -> FloatArray:
    """Evaluate every basis function at ``x``; shape ``(len(x), len(basis))``."""
    x = np.asarray(x, dtype=np.float64).reshape(-1)
    if len(basis) == 0:
        raise ConstructionError("basis set must not be empty")
    columns = [np.asarray(b.evaluate(x), dtype=np.float64).reshape(-1) for b in basis]
    return np.column_stack(columns)


__all__ = [
    "MAX_ORDER",
    "BasisFunction",
    "ConstantBasis",
    "MonomialBasis",
    "LaguerreBasis",
    "HermiteBasis",
    "laguerre_polynomial",
    "hermite_polynomial",
    "make_laguerre_set",
    "make_hermite_set",
    "make_monomial_set",
    "basis_names",
    "design_matrix",
]

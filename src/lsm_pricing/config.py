from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from .exceptions import ConstructionError

RngType = Literal["pcg64", "mt19937"]


@dataclass(frozen=True, slots=True)
class RandomConfig:
    seed: int = 0
    rng_type: RngType = "pcg64"

    def __post_init__(self) -> None:
        if self.rng_type not in ("pcg64", "mt19937"):
            raise ConstructionError(f"Unsupported rng_type: {self.rng_type!r}")


@dataclass(frozen=True, slots=True)
class RegressionConfig:
    """Numerical settings for the cross-sectional regression.

    Attributes
    ----------
    max_condition
        Largest accepted condition number of the design matrix. Fits above it
        are treated as degenerate (continuation value 0).
    scale_by_strike
        If ``True`` basis functions are evaluated at ``S / K`` instead of ``S``.
    """

    max_condition: float = 1e12
    scale_by_strike: bool = True

    def __post_init__(self) -> None:
        if not self.max_condition > 1.0:
            raise ConstructionError("max_condition must be > 1")


@dataclass(frozen=True, slots=True)
class LSMConfig:
    """Simulation and contract settings for a Longstaff-Schwartz run.

    Parameters
    ----------
    n_paths
        Number of simulated paths. Must be positive, and even when
        ``antithetic=True`` (paths come in mirrored pairs).
    n_exercise_dates
        Number of equally spaced exercise dates in ``(0, maturity]``.
    maturity
        Time to maturity in years. Must be positive.
    rate
        Continuously-compounded risk-free rate.
    antithetic
        Pair every path with its mirror image (negated normal draws).
    random
        Seed and bit generator used for path generation.
    regression
        Regression settings, see :class:`RegressionConfig`.
    """

    n_paths: int = 10_000
    n_exercise_dates: int = 50
    maturity: float = 1.0
    rate: float = 0.06
    antithetic: bool = False
    random: RandomConfig = field(default_factory=RandomConfig)
    regression: RegressionConfig = field(default_factory=RegressionConfig)

    def __post_init__(self) -> None:
        for name in ("n_paths", "n_exercise_dates"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int | np.integer):
                raise ConstructionError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ConstructionError(f"{name} must be positive")
        if not (math.isfinite(self.maturity) and self.maturity > 0.0):
            raise ConstructionError("maturity must be positive")
        if not math.isfinite(self.rate):
            raise ConstructionError("rate must be finite")
        if self.antithetic and self.n_paths % 2 != 0:
            raise ConstructionError(
                "antithetic=True requires an even n_paths (paired samples)."
            )

    @property
    def dt(self) -> float:
        return self.maturity / self.n_exercise_dates

    @property
    def seed(self) -> int:
        return self.random.seed


def make_rng(seed: int | None = None, rng_type: RngType = "pcg64") -> np.random.Generator:
    """Build a NumPy generator; identical ``(seed, rng_type)`` give identical streams."""
    if rng_type == "pcg64":
        return np.random.default_rng(seed)
    if rng_type == "mt19937":
        return np.random.Generator(np.random.MT19937(seed))
    raise ConstructionError(f"Unsupported rng_type: {rng_type!r}")

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

from ..exceptions import ConstructionError
from ..typing import FloatArray


@runtime_checkable
class StochasticProcess(Protocol):
    """Generator of simulated underlying price grids."""

    def simulate(
        self,
        spot: float,
        n_steps: int,
        dt: float,
        n_paths: int,
        rng: np.random.Generator,
        *,
        antithetic: bool = False,
    ) -> FloatArray: ...


def _check_grid(spot: float, n_steps: int, dt: float, n_paths: int, antithetic: bool) -> None:
    if not (math.isfinite(spot) and spot > 0.0):
        raise ValueError("spot must be positive")
    if n_steps <= 0:
        raise ValueError("n_steps must be positive")
    if not dt > 0.0:
        raise ValueError("dt must be positive")
    if n_paths <= 0:
        raise ValueError("n_paths must be positive")
    if antithetic and n_paths % 2 != 0:
        raise ValueError("antithetic=True requires an even n_paths (paired samples).")


def _mirror(half: np.ndarray, *, negate: bool = True) -> np.ndarray:
    # path i and path i + n/2 form a pair
    return np.concatenate([half, -half if negate else half], axis=0)


def standard_normals(
    rng: np.random.Generator, n_paths: int, n_steps: int, *, antithetic: bool = False
) -> FloatArray:
    """Draw a ``(n_paths, n_steps)`` matrix of standard normals.

    If ``antithetic=True`` only ``n_paths/2`` rows are drawn and the second
    half of the matrix is the negated first half.
    """
    if not antithetic:
        return rng.standard_normal((n_paths, n_steps))
    return _mirror(rng.standard_normal((n_paths // 2, n_steps)))


def _paths_from_log_increments(spot: float, log_incr: FloatArray) -> FloatArray:
    n_paths = log_incr.shape[0]
    log_paths = np.hstack([np.zeros((n_paths, 1)), np.cumsum(log_incr, axis=1)])
    return spot * np.exp(log_paths)


@dataclass(frozen=True, slots=True)
class GeometricBrownianMotion:
    """
    Risk-neutral geometric Brownian motion

        dS_t = r S_t dt + sigma S_t dW_t

    simulated with the exact lognormal step
    ``S_{t+dt} = S_t exp((r - sigma^2/2) dt + sigma sqrt(dt) Z)``.

    Parameters
    ----------
    rate
        Continuously-compounded risk-free rate (drift under the pricing measure).
    sigma
        Volatility (annualized). Must be positive.
    """

    rate: float
    sigma: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.sigma) and self.sigma > 0.0):
            raise ConstructionError("sigma must be positive")
        if not math.isfinite(self.rate):
            raise ConstructionError("rate must be finite")

    def log_increments(self, Z: FloatArray, dt: float) -> FloatArray:
        drift = (self.rate - 0.5 * self.sigma**2) * dt
        return drift + self.sigma * math.sqrt(dt) * Z

    def simulate(
        self,
        spot: float,
        n_steps: int,
        dt: float,
        n_paths: int,
        rng: np.random.Generator,
        *,
        antithetic: bool = False,
    ) -> FloatArray:
        """
        Simulate ``n_paths`` GBM paths on the grid ``0, dt, ..., n_steps*dt``.

        Returns
        -------
        ndarray, shape (n_paths, n_steps + 1)
            Simulated prices; column 0 equals ``spot``.
        """
        _check_grid(spot, n_steps, dt, n_paths, antithetic)
        Z = standard_normals(rng, n_paths, n_steps, antithetic=antithetic)
        return _paths_from_log_increments(spot, self.log_increments(Z, dt))


@dataclass(frozen=True, slots=True)
class JumpDiffusionProcess:
    """
    Merton jump-diffusion under the risk-neutral measure.

    Each step multiplies the GBM diffusion step by a compound-Poisson jump
    factor: ``N ~ Poisson(jump_intensity * dt)`` jumps with log sizes
    ``Normal(jump_mean, jump_vol^2)``. The diffusion drift is compensated by
    ``-jump_intensity * k`` with ``k = exp(jump_mean + jump_vol^2/2) - 1`` so
    that ``exp(-r t) S_t`` stays a martingale.

    With ``jump_intensity = 0`` the process coincides with
    :class:`GeometricBrownianMotion` (same draws, same paths).

    Notes
    -----
    With antithetic pairing the paired paths share jump counts and use
    negated diffusion and jump-size normals.
    """

    rate: float
    sigma: float
    jump_intensity: float
    jump_mean: float = -0.1
    jump_vol: float = 0.15

    def __post_init__(self) -> None:
        if not (math.isfinite(self.sigma) and self.sigma > 0.0):
            raise ConstructionError("sigma must be positive")
        if not math.isfinite(self.rate):
            raise ConstructionError("rate must be finite")
        if not (math.isfinite(self.jump_intensity) and self.jump_intensity >= 0.0):
            raise ConstructionError("jump_intensity must be >= 0")
        if not (math.isfinite(self.jump_vol) and self.jump_vol >= 0.0):
            raise ConstructionError("jump_vol must be >= 0")
        if not math.isfinite(self.jump_mean):
            raise ConstructionError("jump_mean must be finite")

    @property
    def mean_jump_size(self) -> float:
        """``k = E[J] - 1`` for a single jump factor ``J``."""
        return math.exp(self.jump_mean + 0.5 * self.jump_vol**2) - 1.0

    def simulate(
        self,
        spot: float,
        n_steps: int,
        dt: float,
        n_paths: int,
        rng: np.random.Generator,
        *,
        antithetic: bool = False,
    ) -> FloatArray:
        _check_grid(spot, n_steps, dt, n_paths, antithetic)

        compensated = self.rate - self.jump_intensity * self.mean_jump_size
        diffusion = GeometricBrownianMotion(rate=compensated, sigma=self.sigma)
        Z = standard_normals(rng, n_paths, n_steps, antithetic=antithetic)
        log_incr = diffusion.log_increments(Z, dt)

        if self.jump_intensity == 0.0:
            return _paths_from_log_increments(spot, log_incr)

        n_draw = n_paths // 2 if antithetic else n_paths
        counts = rng.poisson(self.jump_intensity * dt, size=(n_draw, n_steps))
        Zj = rng.standard_normal((n_draw, n_steps))
        if antithetic:
            counts = _mirror(counts, negate=False)
            Zj = _mirror(Zj)

        # sum of n iid Normal(mu, d^2) log jumps is Normal(n mu, n d^2)
        jumps = self.jump_mean * counts + self.jump_vol * np.sqrt(counts) * Zj
        return _paths_from_log_increments(spot, log_incr + jumps)


def sim_brownian(
    n_paths: int,
    T: float,
    dt: float,
    rng: np.random.Generator | None = None,
    *,
    antithetic: bool = False,
) -> tuple[FloatArray, FloatArray]:
    """
    Simulate ``n_paths`` Brownian paths on ``[0, T]`` with step size ``dt``.

    Returns
    -------
    t : ndarray, shape (n_steps + 1,)
        Time grid.
    W : ndarray, shape (n_paths, n_steps + 1)
        Brownian paths with ``W[:, 0] = 0``.
    """
    if rng is None:
        rng = np.random.default_rng()

    n_steps = int(np.round(T / dt))
    _check_grid(1.0, n_steps, dt, n_paths, antithetic)

    dW = math.sqrt(dt) * standard_normals(rng, n_paths, n_steps, antithetic=antithetic)
    W = np.hstack([np.zeros((n_paths, 1)), np.cumsum(dW, axis=1)])
    t = np.arange(n_steps + 1) * dt
    return t, W


def sim_gbm(
    n_paths: int,
    T: float,
    dt: float,
    rate: float = 0.0,
    sigma: float = 1.0,
    S0: float = 1.0,
    rng: np.random.Generator | None = None,
    *,
    antithetic: bool = False,
) -> tuple[FloatArray, FloatArray]:
    """
    Simulate GBM paths on ``[0, T]``; same draws as :meth:`GeometricBrownianMotion.simulate`.

    Returns
    -------
    t : ndarray, shape (n_steps + 1,)
        Time grid.
    S : ndarray, shape (n_paths, n_steps + 1)
        Simulated prices; column 0 equals ``S0``.
    """
    if rng is None:
        rng = np.random.default_rng()

    n_steps = int(np.round(T / dt))
    S = GeometricBrownianMotion(rate=rate, sigma=sigma).simulate(
        S0, n_steps, dt, n_paths, rng, antithetic=antithetic
    )
    return np.arange(n_steps + 1) * dt, S


def sim_gbm_terminal(
    n_paths: int,
    T: float,
    rate: float = 0.0,
    sigma: float = 1.0,
    S0: float = 1.0,
    rng: np.random.Generator | None = None,
    *,
    antithetic: bool = False,
) -> FloatArray:
    """Terminal values ``S_T`` of a GBM, drawn in a single step."""
    if rng is None:
        rng = np.random.default_rng()

    _check_grid(S0, 1, T, n_paths, antithetic)
    Z = standard_normals(rng, n_paths, 1, antithetic=antithetic)[:, 0]
    return S0 * np.exp(GeometricBrownianMotion(rate=rate, sigma=sigma).log_increments(Z, T))


__all__ = [
    "StochasticProcess",
    "GeometricBrownianMotion",
    "JumpDiffusionProcess",
    "standard_normals",
    "sim_brownian",
    "sim_gbm",
    "sim_gbm_terminal",
]

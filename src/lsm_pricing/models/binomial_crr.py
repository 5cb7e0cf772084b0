"""Cox-Ross-Rubinstein binomial tree used as a deterministic reference.

Monte Carlo estimates of American values carry both noise and a policy bias;
a fine binomial tree gives a benchmark free of either on the same contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import exp, sqrt

import numpy as np

from ..instruments.vanilla import Payoff


@dataclass(frozen=True, slots=True)
class BinomialModel:
    S0: float  # initial stock price
    u: float  # up factor
    d: float  # down factor
    r: float  # risk-free rate (cc, per unit time)
    dt: float  # time step
    n_steps: int

    def __post_init__(self) -> None:
        if self.n_steps <= 0:
            raise ValueError("n_steps must be positive")
        if not (0.0 < self.d < self.u):
            raise ValueError("Need 0 < d < u")
        if self.dt <= 0.0:
            raise ValueError("dt must be positive")

        # ensure risk-neutral prob is meaningful
        p = self.p_star
        if not (0.0 <= p <= 1.0):
            raise ValueError(
                f"Risk-neutral probability out of bounds: p*={p:.6g}. "
                "Try increasing n_steps or check r/sigma."
            )

    @classmethod
    def from_crr(
        cls, *, S0: float, r: float, sigma: float, T: float, n_steps: int
    ) -> BinomialModel:
        if n_steps <= 0:
            raise ValueError("n_steps must be positive")
        if T <= 0.0:
            raise ValueError("T must be positive")
        if sigma <= 0.0:
            raise ValueError("sigma must be positive")

        dt = T / n_steps
        u = exp(sigma * sqrt(dt))
        d = exp(-sigma * sqrt(dt))
        return cls(S0=S0, u=u, d=d, r=r, dt=dt, n_steps=n_steps)

    @property
    def T(self) -> float:
        return self.dt * self.n_steps

    @property
    def p_star(self) -> float:
        return (exp(self.r * self.dt) - self.d) / (self.u - self.d)

    @property
    def disc_step(self) -> float:
        return exp(-self.r * self.dt)

    def stock_prices(self, step: int) -> np.ndarray:
        """Node prices at ``step``, ordered from all-down to all-up."""
        j = np.arange(step + 1)
        return self.S0 * self.u**j * self.d ** (step - j)


def binomial_price(model: BinomialModel, payoff: Payoff, *, american: bool = True) -> float:
    """
    Backward induction on a recombining CRR tree.

    With ``american=True`` the continuation value at every node is compared
    with the exercise value and the larger one is kept.
    """
    values = np.asarray(payoff.exercise_value(model.stock_prices(model.n_steps)), dtype=float)

    p = model.p_star
    disc = model.disc_step
    for step in range(model.n_steps - 1, -1, -1):
        values = disc * (p * values[1:] + (1.0 - p) * values[:-1])
        if american:
            intrinsic = np.asarray(payoff.exercise_value(model.stock_prices(step)), dtype=float)
            values = np.maximum(values, intrinsic)

    return float(values[0])


def american_binomial_price(
    payoff: Payoff, *, spot: float, r: float, sigma: float, T: float, n_steps: int = 1_000
) -> float:
    """Convenience wrapper: CRR American value with ``n_steps`` steps."""
    model = BinomialModel.from_crr(S0=spot, r=r, sigma=sigma, T=T, n_steps=n_steps)
    return binomial_price(model, payoff, american=True)

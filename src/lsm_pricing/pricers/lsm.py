from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from ..config import LSMConfig, make_rng
from ..exceptions import ConstructionError, InvalidInputError
from ..instruments.vanilla import Payoff
from ..models.stochastic_processes import StochasticProcess
from ..numerics.basis import BasisFunction, design_matrix
from ..numerics.regression import fit_least_squares
from ..types import CashFlows, LSMResult
from ..typing import FloatArray

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class ExercisePolicy:
    """
    Stopping rule extracted by the backward induction.

    Row ``t`` of ``coefficients`` holds the regression coefficients of the
    continuation value at exercise-date index ``t``. Rows ``0`` and
    ``n_exercise_dates`` are unused (no decision is taken there) and are zero.

    Attributes
    ----------
    basis
        Basis set the coefficients refer to.
    coefficients
        Array of shape ``(n_exercise_dates + 1, len(basis))``.
    degenerate
        Boolean flags, ``True`` where the regression fell back to a zero
        continuation value.
    regressor_scale
        Prices are divided by this value before evaluating the basis.
    """

    basis: tuple[BasisFunction, ...]
    coefficients: FloatArray
    degenerate: np.ndarray
    regressor_scale: float

    @property
    def n_exercise_dates(self) -> int:
        return int(self.coefficients.shape[0] - 1)

    @property
    def degenerate_dates(self) -> int:
        return int(np.count_nonzero(self.degenerate))

    def continuation_value(self, index: int, prices: FloatArray) -> FloatArray:
        """Fitted continuation value at date ``index`` for the given prices."""
        if self.degenerate[index]:
            return np.zeros(np.shape(prices)[0], dtype=np.float64)
        X = design_matrix(self.basis, np.asarray(prices, dtype=np.float64) / self.regressor_scale)
        return X @ self.coefficients[index]


def _exercise_mask(
    itm: np.ndarray, intrinsic: FloatArray, continuation: FloatArray
) -> np.ndarray:
    """Paths exercised now: in the money and immediate >= (finite) continuation."""
    mask = np.zeros_like(itm)
    with np.errstate(invalid="ignore"):
        mask[itm] = np.isfinite(continuation) & (intrinsic[itm] >= continuation)
    return mask


class LSMPricer:
    """
    American option pricer based on the Longstaff-Schwartz least-squares method.

    The pricer owns its process, payoff and basis set for its whole lifetime;
    build a fresh pricer for every pricing run with a different setup.

    Parameters
    ----------
    config : LSMConfig
        Path count, exercise dates, maturity, rate, antithetic flag and seed.
    process : StochasticProcess
        Simulator of the underlying.
    payoff : Payoff
        Exercise value of the contract.
    basis_functions : Sequence[BasisFunction]
        Regression features, constant term first by convention.

    Raises
    ------
    ConstructionError
        If the basis set is empty or a collaborator has the wrong type.

    Notes
    -----
    Exercise dates are the grid indices ``1..n_exercise_dates`` with spacing
    ``dt = maturity / n_exercise_dates``; index ``n_exercise_dates`` is
    maturity. No exercise decision is taken at time 0.
    """

    def __init__(
        self,
        config: LSMConfig,
        process: StochasticProcess,
        payoff: Payoff,
        basis_functions: Sequence[BasisFunction],
    ) -> None:
        if not isinstance(config, LSMConfig):
            raise ConstructionError("config must be an LSMConfig")
        if not isinstance(process, StochasticProcess):
            raise ConstructionError("process must implement simulate(...)")
        if not isinstance(payoff, Payoff):
            raise ConstructionError("payoff must expose strike and exercise_value(...)")
        basis = tuple(basis_functions)
        if not basis:
            raise ConstructionError("basis set must not be empty")
        for b in basis:
            if not isinstance(b, BasisFunction):
                raise ConstructionError(f"not a basis function: {b!r}")

        self._config = config
        self._process = process
        self._payoff = payoff
        self._basis = basis

    @property
    def config(self) -> LSMConfig:
        return self._config

    @property
    def process(self) -> StochasticProcess:
        return self._process

    @property
    def payoff(self) -> Payoff:
        return self._payoff

    @property
    def basis_functions(self) -> tuple[BasisFunction, ...]:
        return self._basis

    @property
    def regressor_scale(self) -> float:
        if self._config.regression.scale_by_strike:
            return float(self._payoff.strike)
        return 1.0

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def simulate(self, spot: float, *, seed: int | None = None) -> FloatArray:
        """Simulate the price grid, shape ``(n_paths, n_exercise_dates + 1)``.

        ``seed=None`` uses the configured seed, so repeated calls reproduce
        the same grid.
        """
        cfg = self._config
        rng = make_rng(cfg.seed if seed is None else int(seed), cfg.random.rng_type)
        return self._process.simulate(
            spot,
            cfg.n_exercise_dates,
            cfg.dt,
            cfg.n_paths,
            rng,
            antithetic=cfg.antithetic,
        )

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def price(self, spot: float) -> LSMResult:
        """
        Price the option for the given spot.

        Parameters
        ----------
        spot : float
            Current price of the underlying. Must be positive.

        Returns
        -------
        LSMResult
            In-sample LSM value, European comparison value on the same paths,
            early-exercise premium and standard errors.

        Raises
        ------
        InvalidInputError
            If ``spot`` is not a positive finite number.
        """
        return self.fit(spot)[0]

    def fit(self, spot: float) -> tuple[LSMResult, ExercisePolicy]:
        """Price in sample and also return the fitted exercise policy."""
        _validate_spot(spot)
        paths = self.simulate(float(spot))
        policy, cash_flows = self.fit_policy(paths)
        return self._summarize(paths, cash_flows, policy), policy

    def price_paths(self, paths: FloatArray) -> LSMResult:
        """In-sample LSM estimate on a given price grid."""
        policy, cash_flows = self.fit_policy(paths)
        return self._summarize(np.asarray(paths, dtype=np.float64), cash_flows, policy)

    def price_with_policy(
        self, spot: float, policy: ExercisePolicy, *, seed: int | None = None
    ) -> LSMResult:
        """
        Out-of-sample estimate: apply a fixed ``policy`` to a fresh path set.

        The regression is not refitted, so the estimate is free of the
        in-sample optimism of :meth:`price`.
        """
        _validate_spot(spot)
        paths = self.simulate(float(spot), seed=seed)
        cash_flows = self.apply_policy(paths, policy)
        return self._summarize(paths, cash_flows, policy)

    # ------------------------------------------------------------------
    # Backward induction
    # ------------------------------------------------------------------

    def _check_paths(self, paths: FloatArray) -> FloatArray:
        S = np.asarray(paths, dtype=np.float64)
        n_dates = self._config.n_exercise_dates
        if S.ndim != 2 or S.shape[1] != n_dates + 1:
            raise ValueError(
                f"paths must have shape (n_paths, {n_dates + 1}), got {S.shape}"
            )
        if S.shape[0] == 0:
            raise ValueError("paths must contain at least one path")
        if self._config.antithetic and S.shape[0] % 2 != 0:
            raise ValueError("antithetic pricing requires an even number of paths")
        return S

    def _intrinsic(self, prices: FloatArray) -> FloatArray:
        return np.asarray(self._payoff.exercise_value(prices), dtype=np.float64)

    def fit_policy(self, paths: FloatArray) -> tuple[ExercisePolicy, CashFlows]:
        """
        Run the backward induction on ``paths``.

        Returns
        -------
        (policy, cash_flows)
            The fitted stopping rule and the realized per-path cash-flow
            record (exercise value and exercise-date index).
        """
        S = self._check_paths(paths)
        cfg = self._config
        n_dates = cfg.n_exercise_dates
        scale = self.regressor_scale

        cash_flows = CashFlows.at_maturity(self._intrinsic(S[:, n_dates]), n_dates)
        coefficients = np.zeros((n_dates + 1, len(self._basis)), dtype=np.float64)
        degenerate = np.zeros(n_dates + 1, dtype=bool)

        for t in range(n_dates - 1, 0, -1):
            intrinsic = self._intrinsic(S[:, t])
            itm = intrinsic > 0.0

            X = design_matrix(self._basis, S[itm, t] / scale)
            targets = cash_flows.discounted(cfg.rate, cfg.dt, to_index=t)[itm]
            fit = fit_least_squares(
                X, targets, max_condition=cfg.regression.max_condition
            )
            if fit.degenerate:
                degenerate[t] = True
                LOGGER.debug(
                    "date %d: %s (n_itm=%d, cond=%.3g); continuation set to 0",
                    t,
                    fit.reason,
                    fit.n_obs,
                    fit.condition,
                )
            coefficients[t] = fit.coefficients

            exercise = _exercise_mask(itm, intrinsic, fit.predict(X))
            cash_flows.exercise(exercise, intrinsic, t)

        policy = ExercisePolicy(
            basis=self._basis,
            coefficients=coefficients,
            degenerate=degenerate,
            regressor_scale=scale,
        )
        return policy, cash_flows

    def apply_policy(self, paths: FloatArray, policy: ExercisePolicy) -> CashFlows:
        """Cash flows obtained by following a fixed ``policy`` on ``paths``."""
        S = self._check_paths(paths)
        n_dates = self._config.n_exercise_dates
        if policy.n_exercise_dates != n_dates:
            raise ValueError(
                f"policy has {policy.n_exercise_dates} exercise dates, expected {n_dates}"
            )

        cash_flows = CashFlows.at_maturity(self._intrinsic(S[:, n_dates]), n_dates)
        # sweeping backwards and overwriting leaves the first exercise date per path
        for t in range(n_dates - 1, 0, -1):
            intrinsic = self._intrinsic(S[:, t])
            itm = intrinsic > 0.0
            continuation = policy.continuation_value(t, S[itm, t])
            exercise = _exercise_mask(itm, intrinsic, continuation)
            cash_flows.exercise(exercise, intrinsic, t)
        return cash_flows

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def _mean_and_stderr(self, samples: FloatArray) -> tuple[float, float]:
        x = samples
        if self._config.antithetic:
            half = samples.shape[0] // 2
            x = 0.5 * (samples[:half] + samples[half:])

        mean = float(x.mean())
        std = float(x.std(ddof=1)) if x.size > 1 else 0.0
        return mean, std / math.sqrt(x.size)

    def _summarize(
        self, paths: FloatArray, cash_flows: CashFlows, policy: ExercisePolicy
    ) -> LSMResult:
        cfg = self._config
        n_dates = cfg.n_exercise_dates

        value, se = self._mean_and_stderr(cash_flows.discounted(cfg.rate, cfg.dt))
        european_cf = self._intrinsic(paths[:, n_dates]) * math.exp(-cfg.rate * cfg.maturity)
        european, european_se = self._mean_and_stderr(european_cf)

        result = LSMResult(
            option_value=value,
            european_value=european,
            early_exercise_premium=value - european,
            standard_error=se,
            european_standard_error=european_se,
            n_paths=int(paths.shape[0]),
            degenerate_dates=policy.degenerate_dates,
        )
        LOGGER.info(
            "LSM value=%.6f european=%.6f se=%.6f (paths=%d, dates=%d, degenerate=%d)",
            result.option_value,
            result.european_value,
            result.standard_error,
            result.n_paths,
            n_dates,
            result.degenerate_dates,
        )
        return result


def _validate_spot(spot: float) -> None:
    try:
        ok = math.isfinite(spot) and spot > 0.0
    except TypeError:
        ok = False
    if not ok:
        raise InvalidInputError(f"spot must be a positive finite number, got {spot!r}")

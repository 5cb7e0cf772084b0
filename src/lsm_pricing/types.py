from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .typing import FloatArray, IntArray


class OptionType(str, Enum):
    """Option contract type.

    Attributes
    ----------
    CALL : str
        Call option ("call").
    PUT : str
        Put option ("put").
    """

    CALL = "call"
    PUT = "put"


@dataclass(frozen=True, slots=True)
class LSMResult:
    """Outcome of one Longstaff-Schwartz pricing run.

    Parameters
    ----------
    option_value : float
        American (Bermudan on the exercise grid) value estimate.
    european_value : float
        Value of the same payoff with exercise at maturity only, estimated on
        the same paths.
    early_exercise_premium : float
        ``option_value - european_value``.
    standard_error : float
        Standard error of the mean of the discounted cash flows. With
        antithetic pairing it is computed from pair averages.
    european_standard_error : float, default 0.0
        Standard error of ``european_value``.
    n_paths : int, default 0
        Number of simulated paths behind the estimate.
    degenerate_dates : int, default 0
        Exercise dates whose regression fell back to a zero continuation value
        (empty in-the-money set or ill-conditioned design).

    Notes
    -----
    Results are frozen; two runs with identical inputs compare equal.
    """

    option_value: float
    european_value: float
    early_exercise_premium: float
    standard_error: float
    european_standard_error: float = 0.0
    n_paths: int = 0
    degenerate_dates: int = 0


@dataclass(slots=True)
class CashFlows:
    """Per-path cash-flow record used during backward induction.

    ``values[i]`` is the (undiscounted) exercise value currently assigned to
    path ``i`` and ``exercise_index[i]`` the exercise-date index it is paid at.
    Both arrays are mutated in place while sweeping backwards over dates.
    """

    values: FloatArray
    exercise_index: IntArray

    @classmethod
    def at_maturity(cls, terminal_payoff: FloatArray, maturity_index: int) -> CashFlows:
        values = np.array(terminal_payoff, dtype=np.float64, copy=True)
        index = np.full(values.shape, int(maturity_index), dtype=np.int64)
        return cls(values=values, exercise_index=index)

    def discounted(self, rate: float, dt: float, to_index: int = 0) -> FloatArray:
        """Discount each cash flow from its exercise date back to ``to_index``."""
        periods = (self.exercise_index - int(to_index)).astype(np.float64)
        return self.values * np.exp(-rate * dt * periods)

    def exercise(self, mask: np.ndarray, values: FloatArray, index: int) -> None:
        """Overwrite the record of the paths in ``mask`` with ``values[mask]`` at ``index``."""
        self.values[mask] = values[mask]
        self.exercise_index[mask] = int(index)

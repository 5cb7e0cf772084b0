from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.linalg import LinAlgError, lstsq

from ..typing import FloatArray


@dataclass(frozen=True, slots=True)
class RegressionFit:
    """Result of a guarded least-squares fit.

    A degenerate fit carries zero coefficients, so :meth:`predict` returns a
    zero continuation value for every row.
    """

    coefficients: FloatArray
    degenerate: bool = False
    reason: str = ""
    condition: float = float("nan")
    n_obs: int = 0

    def predict(self, design: FloatArray) -> FloatArray:
        X = np.asarray(design, dtype=np.float64)
        if self.degenerate:
            # zero even where the design holds inf (inf * 0 is nan)
            return np.zeros(X.shape[0], dtype=np.float64)
        return X @ self.coefficients


def _degenerate(n_cols: int, reason: str, *, n_obs: int, condition: float = float("nan")) -> RegressionFit:
    return RegressionFit(
        coefficients=np.zeros(n_cols, dtype=np.float64),
        degenerate=True,
        reason=reason,
        condition=condition,
        n_obs=n_obs,
    )


def fit_least_squares(
    design: FloatArray, targets: FloatArray, *, max_condition: float = 1e12
) -> RegressionFit:
    """
    Ordinary least squares ``min ||design @ beta - targets||`` via SVD.

    Parameters
    ----------
    design
        Design matrix, shape ``(n_obs, n_basis)``.
    targets
        Regression targets, shape ``(n_obs,)``.
    max_condition
        Largest accepted ratio of extreme singular values.

    Returns
    -------
    RegressionFit
        Flagged degenerate (with zero coefficients) when there are no rows,
        fewer rows than columns, a rank-deficient or ill-conditioned design,
        or non-finite inputs/outputs.
    """
    X = np.asarray(design, dtype=np.float64)
    y = np.asarray(targets, dtype=np.float64).reshape(-1)
    if X.ndim != 2:
        raise ValueError("design must be 2D")
    n_obs, n_cols = X.shape
    if y.shape[0] != n_obs:
        raise ValueError("design and targets must have the same number of rows")

    if n_obs == 0:
        return _degenerate(n_cols, "empty in-the-money set", n_obs=0)
    if n_obs < n_cols:
        return _degenerate(n_cols, "fewer observations than basis functions", n_obs=n_obs)
    if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
        return _degenerate(n_cols, "non-finite regression data", n_obs=n_obs)

    try:
        beta, _, rank, sv = lstsq(X, y, lapack_driver="gelsd")
    except (LinAlgError, ValueError) as e:
        return _degenerate(n_cols, f"lstsq failed: {e}", n_obs=n_obs)

    condition = float(sv[0] / sv[-1]) if sv.size and sv[-1] > 0.0 else float("inf")
    if rank < n_cols:
        return _degenerate(n_cols, "rank-deficient design", n_obs=n_obs, condition=condition)
    if not condition <= max_condition:
        return _degenerate(n_cols, "ill-conditioned design", n_obs=n_obs, condition=condition)
    if not np.all(np.isfinite(beta)):
        return _degenerate(n_cols, "non-finite coefficients", n_obs=n_obs, condition=condition)

    return RegressionFit(
        coefficients=np.asarray(beta, dtype=np.float64),
        condition=condition,
        n_obs=n_obs,
    )

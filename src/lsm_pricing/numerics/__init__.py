# src/lsm_pricing/numerics/__init__.py
"""
Numerical building blocks (advanced API).

Top-level package `lsm_pricing` exposes the everyday pricing API.
This subpackage exposes the regression features and the guarded
least-squares solver used by the pricer.
"""

from .basis import (
    MAX_ORDER,
    BasisFunction,
    ConstantBasis,
    HermiteBasis,
    LaguerreBasis,
    MonomialBasis,
    design_matrix,
    make_hermite_set,
    make_laguerre_set,
    make_monomial_set,
)
from .regression import RegressionFit, fit_least_squares

__all__ = [
    # Basis functions
    "MAX_ORDER",
    "BasisFunction",
    "ConstantBasis",
    "MonomialBasis",
    "LaguerreBasis",
    "HermiteBasis",
    "make_laguerre_set",
    "make_hermite_set",
    "make_monomial_set",
    "design_matrix",
    # Regression
    "RegressionFit",
    "fit_least_squares",
]

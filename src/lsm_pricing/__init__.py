"""
lsm_pricing

American option pricing by least-squares Monte Carlo (Longstaff-Schwartz).

The everyday API is re-exported here, so you can write, for example:

    from lsm_pricing import LSMConfig, LSMPricer, GeometricBrownianMotion
"""

from .config import LSMConfig, RandomConfig, RegressionConfig, make_rng
from .diagnostics.convergence import (
    ConvergenceAnalyzer,
    analyze_by_basis_functions,
    analyze_by_path_count,
    out_of_sample_test,
)
from .exceptions import ConstructionError, InvalidInputError
from .instruments.vanilla import VanillaPayoff, make_vanilla_payoff
from .models.stochastic_processes import GeometricBrownianMotion, JumpDiffusionProcess
from .numerics.basis import (
    ConstantBasis,
    HermiteBasis,
    LaguerreBasis,
    MonomialBasis,
    make_hermite_set,
    make_laguerre_set,
    make_monomial_set,
)
from .pricers.lsm import ExercisePolicy, LSMPricer
from .types import LSMResult, OptionType

__all__ = [
    # Types / config
    "OptionType",
    "LSMResult",
    "LSMConfig",
    "RandomConfig",
    "RegressionConfig",
    "make_rng",
    # Errors
    "ConstructionError",
    "InvalidInputError",
    # Building blocks
    "VanillaPayoff",
    "make_vanilla_payoff",
    "GeometricBrownianMotion",
    "JumpDiffusionProcess",
    "ConstantBasis",
    "MonomialBasis",
    "LaguerreBasis",
    "HermiteBasis",
    "make_laguerre_set",
    "make_hermite_set",
    "make_monomial_set",
    # Pricing
    "LSMPricer",
    "ExercisePolicy",
    # Diagnostics
    "ConvergenceAnalyzer",
    "analyze_by_basis_functions",
    "analyze_by_path_count",
    "out_of_sample_test",
]

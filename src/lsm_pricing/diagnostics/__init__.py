"""Convergence diagnostics, tables and plots for the LSM pricer.

Plot helpers import matplotlib lazily; import them from
:mod:`lsm_pricing.diagnostics.plots`.
"""

from .convergence import (
    BasisConvergencePoint,
    ConvergenceAnalyzer,
    OutOfSampleTrial,
    PathConvergencePoint,
    analyze_by_basis_functions,
    analyze_by_path_count,
    out_of_sample_test,
)
from .tables import (
    LS2001_CASES,
    basis_convergence_table,
    benchmark_table,
    out_of_sample_table,
    path_convergence_table,
    result_frame,
)

__all__ = [
    "ConvergenceAnalyzer",
    "BasisConvergencePoint",
    "PathConvergencePoint",
    "OutOfSampleTrial",
    "analyze_by_basis_functions",
    "analyze_by_path_count",
    "out_of_sample_test",
    "LS2001_CASES",
    "result_frame",
    "basis_convergence_table",
    "path_convergence_table",
    "out_of_sample_table",
    "benchmark_table",
]

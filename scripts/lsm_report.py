"""Print the standard Longstaff-Schwartz report.

Sections (select with ``--section``):

  put         American put vs spot, maturity and volatility
  call        American call on a non-dividend stock (premium should be ~0)
  jump        Jump-diffusion put
  basis       Convergence vs number of Laguerre terms M
  paths       Convergence vs path count N
  oos         Out-of-sample stability test
  benchmark   Longstaff-Schwartz (2001) Table 1 cases vs finite differences

Run from the repository root:

    PYTHONPATH=src python scripts/lsm_report.py
    PYTHONPATH=src python scripts/lsm_report.py --section benchmark --paths 20000
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

import pandas as pd

from lsm_pricing import (
    GeometricBrownianMotion,
    JumpDiffusionProcess,
    LSMConfig,
    LSMPricer,
    OptionType,
    RandomConfig,
    make_laguerre_set,
    make_vanilla_payoff,
)
from lsm_pricing.diagnostics import (
    analyze_by_basis_functions,
    analyze_by_path_count,
    basis_convergence_table,
    benchmark_table,
    out_of_sample_table,
    out_of_sample_test,
    path_convergence_table,
    result_frame,
)

K = 40.0
R = 0.06
SECTIONS = ("put", "call", "jump", "basis", "paths", "oos", "benchmark")


def _pricer(cfg: LSMConfig, process, kind: OptionType = OptionType.PUT) -> LSMPricer:
    return LSMPricer(cfg, process, make_vanilla_payoff(kind, K=K), make_laguerre_set(3))


def _header(title: str) -> None:
    print()
    print("=" * 72)
    print(title)
    print("-" * 72)


def section_put(cfg: LSMConfig) -> None:
    _header(f"American put  K={K:g}  r={R:.0%}  sigma=20%  T=1y  N={cfg.n_paths:,}")
    rows = []
    for S in (36.0, 38.0, 40.0, 42.0, 44.0):
        res = _pricer(cfg, GeometricBrownianMotion(R, 0.20)).price(S)
        rows.append((f"S={S:g}", S, res))
    for T in (0.5, 1.0, 2.0):
        c = replace(cfg, maturity=T, n_exercise_dates=int(50 * T))
        rows.append((f"T={T:g}y", 40.0, _pricer(c, GeometricBrownianMotion(R, 0.20)).price(40.0)))
    for sigma in (0.10, 0.20, 0.30, 0.40):
        res = _pricer(cfg, GeometricBrownianMotion(R, sigma)).price(40.0)
        rows.append((f"sigma={sigma:.2f}", 40.0, res))
    print(result_frame(rows).to_string(index=False, float_format="%.4f"))


def section_call(cfg: LSMConfig) -> None:
    _header("American call  (non-dividend stock: early exercise premium ~0)")
    rows = []
    for S in (36.0, 40.0, 44.0):
        res = _pricer(cfg, GeometricBrownianMotion(R, 0.20), OptionType.CALL).price(S)
        rows.append(("call", S, res))
    print(result_frame(rows).to_string(index=False, float_format="%.4f"))


def section_jump(cfg: LSMConfig) -> None:
    _header("Jump-diffusion put  S=40  sigma=20%  (lambda=0 is pure GBM)")
    rows = []
    for lam in (0.0, 0.05, 0.10, 0.25):
        res = _pricer(cfg, JumpDiffusionProcess(R, 0.20, lam)).price(40.0)
        rows.append((f"lambda={lam:.2f}", 40.0, res))
    print(result_frame(rows).to_string(index=False, float_format="%.4f"))


def section_basis(cfg: LSMConfig) -> None:
    _header("Convergence vs basis functions M  (value should rise then stabilise)")
    points = analyze_by_basis_functions(cfg, 40.0, K, 0.20, 5)
    print(basis_convergence_table(points).to_string(index=False, float_format="%.4f"))


def section_paths(cfg: LSMConfig) -> None:
    _header("Convergence vs path count N  (SE * sqrt(N) should be flat)")
    points = analyze_by_path_count(cfg, 40.0, K, 0.20, [500, 1_000, 2_000, 5_000, 10_000, 20_000])
    print(path_convergence_table(points).to_string(index=False, float_format="%.4f"))


def section_oos(cfg: LSMConfig) -> None:
    _header("Out-of-sample stability  N=5,000  5 trials")
    trials = out_of_sample_test(replace(cfg, n_paths=5_000), 40.0, K, 0.20, 5)
    print(out_of_sample_table(trials).to_string(index=False, float_format="%.4f"))


def section_benchmark(cfg: LSMConfig) -> None:
    _header(f"Benchmark  L&S (2001) Table 1  K={K:g}  r={R:.0%}  N={cfg.n_paths:,}")
    df = benchmark_table(cfg, strike=K)
    print(df.to_string(index=False, float_format="%.3f"))
    print(f"\nmean |diff| = {df['diff'].abs().mean():.4f}")


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--section", choices=(*SECTIONS, "all"), default="all")
    ap.add_argument("--paths", type=int, default=10_000)
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--antithetic", action="store_true")
    ap.add_argument("--verbose", action="store_true", help="log per-date regression diagnostics")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    pd.set_option("display.width", 120)

    cfg = LSMConfig(
        n_paths=args.paths,
        n_exercise_dates=50,
        maturity=1.0,
        rate=R,
        antithetic=args.antithetic,
        random=RandomConfig(seed=args.seed),
    )

    runners = {
        "put": section_put,
        "call": section_call,
        "jump": section_jump,
        "basis": section_basis,
        "paths": section_paths,
        "oos": section_oos,
        "benchmark": section_benchmark,
    }
    selected = SECTIONS if args.section == "all" else (args.section,)
    for name in selected:
        runners[name](cfg)
    print()


if __name__ == "__main__":
    main()

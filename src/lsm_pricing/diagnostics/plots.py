from __future__ import annotations

import numpy as np
import pandas as pd

from ._mpl import get_plt, pretty_ax, require_columns


def plot_basis_convergence(df: pd.DataFrame, *, zcrit: float = 1.96, figsize=(7, 4)):
    """Value vs number of basis functions with ±zcrit·SE error bars.

    Expects the output of :func:`basis_convergence_table`.
    """
    require_columns(df, ["m", "value", "se"])

    plt = get_plt()
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    ax.errorbar(
        df["m"], df["value"], yerr=zcrit * df["se"], fmt="o-", capsize=3, label="LSM value"
    )
    ax.set_xlabel("Laguerre terms M")
    ax.set_ylabel("Option value")
    ax.set_title("Convergence in basis functions")
    ax.legend()
    pretty_ax(ax)
    return fig, ax


def plot_path_convergence(df: pd.DataFrame, *, zcrit: float = 1.96, figsize=(12, 4)):
    """Left: value ± zcrit·SE vs N. Right: SE vs N on log-log axes with a 1/sqrt(N) guide."""
    require_columns(df, ["n_paths", "value", "se"])

    d = df.sort_values("n_paths")
    n = d["n_paths"].to_numpy(dtype=float)
    se = d["se"].to_numpy(dtype=float)

    plt = get_plt()
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=figsize, constrained_layout=True)

    ax1.errorbar(n, d["value"], yerr=zcrit * se, fmt="o-", capsize=3, label="LSM value")
    ax1.set_xscale("log")
    ax1.set_xlabel("Paths N")
    ax1.set_ylabel("Option value")
    ax1.set_title("Value vs path count")
    ax1.legend()
    pretty_ax(ax1)

    ax2.loglog(n, se, "o-", label="SE")
    if len(n) and se[0] > 0:
        ax2.loglog(n, se[0] * np.sqrt(n[0] / n), "--", label="∝ 1/sqrt(N)")
    ax2.set_xlabel("Paths N")
    ax2.set_ylabel("Standard error")
    ax2.set_title("Standard error vs path count")
    ax2.legend()
    pretty_ax(ax2)

    return fig, (ax1, ax2)


def plot_out_of_sample(df: pd.DataFrame, *, figsize=(7, 4)):
    """In-sample vs out-of-sample value per trial."""
    require_columns(df, ["trial", "in_sample", "out_of_sample"])

    plt = get_plt()
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    x = df["trial"].to_numpy()
    ax.plot(x, df["in_sample"], "o", label="in-sample")
    ax.plot(x, df["out_of_sample"], "s", label="out-of-sample")
    ax.set_xticks(x)
    ax.set_xlabel("Trial")
    ax.set_ylabel("Option value")
    ax.set_title("Out-of-sample stability")
    ax.legend()
    pretty_ax(ax)
    return fig, ax


def plot_sample_paths(
    paths: np.ndarray, *, maturity: float, n_plot: int = 10, title: str = "Sample paths"
):
    """Plot up to ``n_plot`` rows of a simulated price grid."""
    plt = get_plt()
    t = np.linspace(0.0, maturity, paths.shape[1])
    fig, ax = plt.subplots(figsize=(10, 5), constrained_layout=True)
    for i in range(min(n_plot, len(paths))):
        ax.plot(t, paths[i], lw=0.8)
    ax.set_title(title)
    ax.set_xlabel("t")
    ax.set_ylabel("Price")
    pretty_ax(ax)
    return fig, ax


__all__ = [
    "plot_basis_convergence",
    "plot_path_convergence",
    "plot_out_of_sample",
    "plot_sample_paths",
]

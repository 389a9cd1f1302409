from __future__ import annotations

from dataclasses import asdict
from typing import Iterable

import pandas as pd

from fft_harness.models.results import BenchmarkResult

RESULT_COLUMNS = ["n", "domain", "provider", "mflops", "ns_per_run", "iterations", "elapsed_s"]


def format_result(res: BenchmarkResult, name_width: int = 13) -> str:
    """One report line, e.g. ``N=  256, REAL LANE4         :   1234 MFlops [t=   456 ns, 320 runs]``."""
    return (
        f"N={res.n:5d}, {res.label} {res.provider:<{name_width}s}: "
        f"{res.mflops:6.0f} MFlops [t={res.ns_per_run:6.0f} ns, {res.iterations} runs]"
    )


def results_frame(results: Iterable[BenchmarkResult]) -> pd.DataFrame:
    """Benchmark results as a DataFrame with one row per (N, domain, provider)."""
    rows = [asdict(r) for r in results]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def summary_table(results: Iterable[BenchmarkResult], value: str = "mflops") -> pd.DataFrame:
    """Pivot ``value`` into rows ``(domain, n)`` and one column per provider."""
    df = results_frame(results)
    if df.empty:
        return df
    if value not in df.columns:
        raise KeyError(f"unknown result column {value!r}")
    table = df.pivot_table(index=["domain", "n"], columns="provider", values=value, aggfunc="first")
    table.columns.name = None
    return table.sort_index()

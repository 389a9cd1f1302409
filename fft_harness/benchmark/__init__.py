"""Throughput benchmark of transform providers."""

from .report import format_result, results_frame, summary_table
from .runner import BENCHMARK_DOMAINS, benchmark_ffts, benchmark_provider, run_benchmarks

__all__ = [
    "format_result",
    "results_frame",
    "summary_table",
    "BENCHMARK_DOMAINS",
    "benchmark_ffts",
    "benchmark_provider",
    "run_benchmarks",
]

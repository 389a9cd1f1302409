"""Benchmark conventions.

The iteration budget and the flop count are fixed conventions, not measured
quantities: the budget keeps every (provider, N) run at a comparable amount of
work, and the ``5 N log2 N`` flop count (``2.5 N log2 N`` for real input) is the
one used by published FFT benchmarks, which makes the MFlops figures comparable
across providers.
"""

from __future__ import annotations

import math
from typing import Iterator

from fft_harness.models.cases import check_domain

# max_iter = BUDGET_NUMERATOR / N * BUDGET_MULTIPLIER
BUDGET_NUMERATOR = 5_120_000
BUDGET_MULTIPLIER = 16
ARM_BUDGET_DIVISOR = 8

COMPLEX_FLOPS_PER_POINT = 5.0
REAL_FLOPS_PER_POINT = 2.5

# Guards the MFlops division against a zero elapsed time.
ELAPSED_EPS = 1e-16


def iteration_budget(n: int, *, lane_divisor: int = 1, scale: float = 1.0, arm: bool = False) -> int:
    """Number of forward+inverse pairs to time for a length-``n`` transform.

    Parameters
    ----------
    n:
        Transform length.
    lane_divisor:
        Divides the budget for providers that process one lane per call while
        the others process ``lane_divisor`` signals' worth of data.
    scale:
        Global scale factor applied to the budget (configuration).
    arm:
        Slow-target reduction by ``ARM_BUDGET_DIVISOR``.

    Returns
    -------
    int
        Always at least 1.
    """
    n = int(n)
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if lane_divisor < 1:
        raise ValueError(f"lane_divisor must be >= 1, got {lane_divisor}")
    if scale <= 0:
        raise ValueError(f"scale must be > 0, got {scale}")

    budget = BUDGET_NUMERATOR // n * BUDGET_MULTIPLIER
    budget = int(budget * scale)
    if arm:
        budget //= ARM_BUDGET_DIVISOR
    budget //= int(lane_divisor)
    return max(budget, 1)


def flop_count(n: int, domain: str, iterations: int) -> float:
    """Conventional flop count of ``iterations`` forward+inverse pairs."""
    per_point = COMPLEX_FLOPS_PER_POINT if check_domain(domain) == "complex" else REAL_FLOPS_PER_POINT
    return float(iterations) * 2.0 * per_point * float(n) * math.log2(n)


def mflops(flops: float, elapsed_s: float) -> float:
    return flops / 1e6 / (elapsed_s + ELAPSED_EPS)


def ns_per_run(elapsed_s: float, iterations: int) -> float:
    """Mean time of one transform in nanoseconds (a pair counts as two runs)."""
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")
    return elapsed_s / (2.0 * iterations) * 1e9


def benchmark_lengths(start: int = 64, stop: int = 8192 * 256) -> Iterator[int]:
    """Geometric sequence of benchmark lengths.

    Doubles from ``start``; once a length reaches 16384 it is additionally
    multiplied by 4 before use. With the defaults this yields
    64, 128, ..., 8192, 65536, 524288, 4194304.
    """
    n = int(start)
    if n < 1:
        raise ValueError(f"start must be >= 1, got {start}")
    while n < stop:
        if n >= 16384:
            n *= 4
        yield n
        n *= 2

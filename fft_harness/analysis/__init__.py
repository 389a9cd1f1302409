"""Shared numerical helpers.

- ordering: reconciliation between the FFTPACK layout and the canonical layout,
  and the expected self-convolution spectrum.
- flops: the fixed iteration-budget and flop-count conventions of the benchmark.
"""

from .flops import benchmark_lengths, flop_count, iteration_budget, mflops, ns_per_run
from .ordering import (
    canonical_to_fftpack,
    expected_self_convolution,
    fftpack_to_canonical,
    pack_real_spectrum,
    unpack_real_spectrum,
)

__all__ = [
    "benchmark_lengths",
    "flop_count",
    "iteration_budget",
    "mflops",
    "ns_per_run",
    "canonical_to_fftpack",
    "expected_self_convolution",
    "fftpack_to_canonical",
    "pack_real_spectrum",
    "unpack_real_spectrum",
]

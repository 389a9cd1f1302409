"""FFT Harness -- correctness validation and throughput benchmarking of FFT back ends.

Designed for single-precision real and complex transforms of arbitrary
supported length, comparing interchangeable transform providers against a
trusted FFTPACK reference.

This package provides tools for:
- Validating a provider's forward transform against the reference after ordering reconciliation
- Checking in-place/out-of-place bit identity and exact reorder round trips
- Checking inverse round-trip recovery and the convolution theorem on the spectrum
- Timing forward+inverse pairs under a fixed, lane-normalised iteration budget
- Reporting throughput in the conventional ``5 N log2 N`` MFlops unit

Key principles:
- Tolerances scale with the reference spectrum (``1e-3 * max|ref|``)
- The first numerical mismatch stops the run unless explicitly told to keep going
- Buffers and handles are released on every exit path

Main subpackages:
- analysis: Ordering reconciliation and flop-count helpers
- benchmark: Timing loop, result formatting and tabular summaries
- models: Data models (ValidationCase, ToleranceBudget, BenchmarkResult)
- providers: Transform provider contract, reference/under-test/optional providers, registry
- validation: Two-pass differential validator
"""

__all__ = []

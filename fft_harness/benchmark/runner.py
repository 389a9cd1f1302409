"""Fixed-budget timing loop.

Every provider runs ``iteration_budget(N)`` forward+inverse pairs back to back
on zero-initialised buffers. Providers that process a single lane per call get
the budget divided by the widest lane width in the registry, so the amount of
data transformed per run matches across providers. Output values are never
inspected.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from fft_harness.analysis.flops import benchmark_lengths, flop_count, iteration_budget, mflops, ns_per_run
from fft_harness.buffers import MIN_ALIGNMENT, aligned_zeros
from fft_harness.config import HarnessConfig
from fft_harness.errors import UnsupportedConfiguration
from fft_harness.models.cases import Domain, check_domain, floats_per_signal
from fft_harness.models.results import BenchmarkResult
from fft_harness.providers.base import TransformProvider
from fft_harness.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

# real first, then complex
BENCHMARK_DOMAINS = ("real", "complex")


def benchmark_provider(
    provider: TransformProvider,
    n: int,
    domain: Domain,
    *,
    iterations: int,
    clock: Callable[[], float],
    alignment: int = MIN_ALIGNMENT,
) -> BenchmarkResult:
    """Time ``iterations`` forward+inverse pairs of one provider.

    Raises
    ------
    UnsupportedConfiguration
        If the provider cannot set up this length/domain.
    """
    check_domain(domain)
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")

    nf = floats_per_signal(n, domain)
    x = aligned_zeros(nf, alignment)
    y = aligned_zeros(nf, alignment)
    work = aligned_zeros(nf, alignment)

    handle = provider.setup(n, domain)
    try:
        t0 = clock()
        for _ in range(iterations):
            provider.run_pair(handle, x, y, work)
        t1 = clock()
    finally:
        provider.teardown(handle)

    elapsed = t1 - t0
    flops = flop_count(n, domain, iterations)
    return BenchmarkResult(
        n=int(n),
        domain=domain,
        provider=provider.report_name(n),
        mflops=mflops(flops, elapsed),
        ns_per_run=ns_per_run(elapsed, iterations),
        iterations=int(iterations),
        elapsed_s=elapsed,
    )


def provider_budget(provider: TransformProvider, n: int, registry: ProviderRegistry, config: HarnessConfig) -> int:
    lane_divisor = registry.max_lane_width() if provider.scalar else 1
    return iteration_budget(n, lane_divisor=lane_divisor, scale=config.budget_scale, arm=config.arm)


def benchmark_ffts(
    registry: ProviderRegistry,
    n: int,
    domain: Domain,
    config: Optional[HarnessConfig] = None,
    on_result: Optional[Callable[[BenchmarkResult], None]] = None,
) -> List[BenchmarkResult]:
    """Benchmark every registered provider for one (N, domain).

    Providers that do not support the combination are skipped.
    """
    if config is None:
        config = HarnessConfig()
    clock = config.resolve_clock()
    alignment = registry.alignment()

    results: List[BenchmarkResult] = []
    for provider in registry.benchmark_order():
        if not provider.supports(n, domain):
            logger.info("%s: skipping unsupported %s N=%d", provider.name, domain, n)
            continue
        try:
            res = benchmark_provider(
                provider,
                n,
                domain,
                iterations=provider_budget(provider, n, registry, config),
                clock=clock,
                alignment=alignment,
            )
        except UnsupportedConfiguration as exc:
            logger.info("%s", exc)
            continue
        results.append(res)
        if on_result is not None:
            on_result(res)
    return results


def run_benchmarks(
    registry: ProviderRegistry,
    config: Optional[HarnessConfig] = None,
    *,
    domains: Iterable[str] = BENCHMARK_DOMAINS,
    lengths: Optional[Sequence[int]] = None,
    on_result: Optional[Callable[[BenchmarkResult], None]] = None,
    on_length_done: Optional[Callable[[int, str], None]] = None,
) -> List[BenchmarkResult]:
    """Sweep the geometric length sequence for each domain."""
    if config is None:
        config = HarnessConfig()
    if lengths is None:
        lengths = list(benchmark_lengths(config.min_length, config.max_length))

    results: List[BenchmarkResult] = []
    for domain in domains:
        for n in lengths:
            results.extend(benchmark_ffts(registry, n, domain, config, on_result))  # type: ignore[arg-type]
            if on_length_done is not None:
                on_length_done(n, domain)
    return results

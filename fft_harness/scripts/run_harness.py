"""Validate and benchmark the registered FFT providers.

Sequence: lane self-check, validation of every provider under test over the
test sizes (complex, then real), then the benchmark sweep (real, then complex).
One line per case/result is printed on stdout. The exit status is 1 if any
validation check failed, 0 otherwise.

Examples
--------
    fft-harness                      # full run
    fft-harness --no-bench           # validation only
    fft-harness --max-length 4096 --budget-scale 0.001 --summary
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

import pandas as pd

from fft_harness.benchmark.report import format_result, summary_table
from fft_harness.benchmark.runner import BENCHMARK_DOMAINS, run_benchmarks
from fft_harness.config import DEFAULT_BUDGET_SCALE, HarnessConfig, is_arm_machine
from fft_harness.errors import HarnessError, NumericalMismatch
from fft_harness.models.results import BenchmarkResult, ValidationReport
from fft_harness.providers.lanes import check_lanes
from fft_harness.providers.registry import ProviderRegistry, default_registry
from fft_harness.validation.validator import DEFAULT_TEST_SIZES, validate_all

logger = logging.getLogger("fft_harness")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fft-harness",
        description="Validate FFT providers against FFTPACK and benchmark their throughput.",
    )
    p.add_argument("--sizes", type=int, nargs="+", default=list(DEFAULT_TEST_SIZES), help="validation lengths")
    p.add_argument("--seed", type=int, default=0, help="base seed of the validation signals")
    p.add_argument("--clock", choices=["wall", "cpu"], default="wall", help="timing source")
    p.add_argument(
        "--budget-scale",
        type=float,
        default=DEFAULT_BUDGET_SCALE,
        help="scale of the 5120000/N*16 iteration budget (default: %(default)s)",
    )
    p.add_argument("--min-length", type=int, default=64, help="first benchmark length")
    p.add_argument("--max-length", type=int, default=8192 * 256, help="benchmark sweep bound")
    p.add_argument("--keep-going", action="store_true", help="report every validation mismatch, not only the first")
    p.add_argument("--no-self-check", action="store_true", help="skip the lane-primitive self-check")
    p.add_argument("--no-validate", action="store_true", help="skip validation")
    p.add_argument("--no-bench", action="store_true", help="skip benchmarks")
    p.add_argument("--no-optional", action="store_true", help="benchmark only the reference and providers under test")
    p.add_argument("--summary", action="store_true", help="print an MFlops table after the benchmarks")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v: info, -vv: debug")
    return p


def config_from_args(args: argparse.Namespace) -> HarnessConfig:
    return HarnessConfig(
        test_sizes=tuple(args.sizes),
        seed=args.seed,
        clock=args.clock,
        budget_scale=args.budget_scale,
        arm=is_arm_machine(),
        min_length=args.min_length,
        max_length=args.max_length,
        keep_going=args.keep_going,
        self_check=not args.no_self_check,
    )


def run_validation(registry: ProviderRegistry, config: HarnessConfig) -> List[ValidationReport]:
    """Validate every provider under test; raises NumericalMismatch unless ``keep_going``."""
    reference = registry.require_reference()
    reports: List[ValidationReport] = []
    for provider in registry.under_test():
        reports.extend(
            validate_all(
                provider,
                reference,
                sizes=config.test_sizes,
                domains=config.domains,
                seed=config.seed,
                alignment=registry.alignment(),
                keep_going=config.keep_going,
                on_report=lambda rep: print(rep.message, flush=True),
            )
        )
    return reports


def run(
    config: HarnessConfig,
    registry: ProviderRegistry,
    *,
    validate: bool = True,
    bench: bool = True,
    summary: bool = False,
) -> int:
    if config.self_check:
        check_lanes()
        logger.info("lane self-check passed")

    if validate:
        reports = run_validation(registry, config)
        failed = [r for r in reports if not r.ok]
        if failed:
            logger.error("%d validation case(s) failed", len(failed))
            return 1

    if bench:
        results: List[BenchmarkResult] = run_benchmarks(
            registry,
            config,
            domains=BENCHMARK_DOMAINS,
            on_result=lambda res: print(format_result(res), flush=True),
            on_length_done=lambda n, domain: print("--", flush=True),
        )
        if summary and results:
            with pd.option_context("display.float_format", "{:.0f}".format, "display.width", 120):
                print(summary_table(results))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        config = config_from_args(args)
        registry = default_registry(include_optional=not args.no_optional)
        return run(config, registry, validate=not args.no_validate, bench=not args.no_bench, summary=args.summary)
    except NumericalMismatch as exc:
        print(str(exc), flush=True)
        return 1
    except (HarnessError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())

import math

import pytest

from fft_harness.analysis.flops import (
    benchmark_lengths,
    flop_count,
    iteration_budget,
    mflops,
    ns_per_run,
)


def test_iteration_budget_matches_native_formula() -> None:
    assert iteration_budget(64) == 5120000 // 64 * 16
    assert iteration_budget(1000) == 5120000 // 1000 * 16


def test_iteration_budget_inversely_proportional() -> None:
    assert iteration_budget(128) * 2 == iteration_budget(64)


def test_iteration_budget_lane_divisor_and_arm() -> None:
    base = iteration_budget(256)
    assert iteration_budget(256, lane_divisor=4) == base // 4
    assert iteration_budget(256, arm=True) == base // 8


def test_iteration_budget_scale() -> None:
    assert iteration_budget(64, scale=0.01) == int(5120000 // 64 * 16 * 0.01)


def test_iteration_budget_never_zero() -> None:
    assert iteration_budget(4194304, lane_divisor=4, scale=1e-6, arm=True) == 1


@pytest.mark.parametrize("kwargs", [{"lane_divisor": 0}, {"scale": 0.0}])
def test_iteration_budget_rejects_bad_arguments(kwargs) -> None:
    with pytest.raises(ValueError):
        iteration_budget(64, **kwargs)


def test_flop_count_convention() -> None:
    assert flop_count(1024, "complex", 1) == 2 * 5 * 1024 * 10
    assert flop_count(1024, "real", 3) == 3 * 2 * 2.5 * 1024 * 10
    assert flop_count(96, "complex", 1) == pytest.approx(2 * 5 * 96 * math.log2(96))


def test_mflops_and_ns_per_run() -> None:
    flops = flop_count(1024, "complex", 100)
    assert mflops(flops, 0.5) == pytest.approx(flops / 0.5 / 1e6)
    assert ns_per_run(0.5, 100) == pytest.approx(2.5e6)
    assert math.isfinite(mflops(flops, 0.0))


def test_benchmark_lengths_sequence() -> None:
    assert list(benchmark_lengths()) == [
        64, 128, 256, 512, 1024, 2048, 4096, 8192, 65536, 524288, 4194304,
    ]


def test_benchmark_lengths_bounded() -> None:
    assert list(benchmark_lengths(64, 1024)) == [64, 128, 256, 512]

"""Process-wide configuration, read-only after initialisation."""

from __future__ import annotations

import platform
import time
from dataclasses import dataclass, field
from typing import Callable, Literal, Tuple

from fft_harness.validation.validator import DEFAULT_TEST_SIZES, VALIDATION_DOMAINS

ClockName = Literal["wall", "cpu"]

# Python call overhead is far above that of a compiled harness; the native
# iteration budget is scaled down so that a full sweep finishes in minutes.
DEFAULT_BUDGET_SCALE = 0.01

CLOCKS = {
    "wall": time.perf_counter,
    "cpu": time.process_time,
}


def is_arm_machine(machine: str | None = None) -> bool:
    m = (machine if machine is not None else platform.machine()).lower()
    return m.startswith("arm") or m.startswith("aarch")


@dataclass(frozen=True)
class HarnessConfig:
    """Harness settings.

    Attributes
    ----------
    test_sizes, domains:
        Validation set, complex domain first as in the reference runs.
    seed:
        Base seed of the per-case random generators.
    clock:
        ``"wall"`` (``time.perf_counter``) or ``"cpu"`` (``time.process_time``).
        Use the same clock for every provider in one comparison.
    budget_scale:
        Multiplies the conventional iteration budget ``5120000 / N * 16``.
    arm:
        Divide budgets by 8 on slow ARM targets.
    min_length, max_length:
        Range of the geometric benchmark sweep (``max_length`` exclusive start bound).
    keep_going:
        Collect validation mismatches instead of stopping at the first one.
    self_check:
        Run the lane-primitive self-check before validation.
    """

    test_sizes: Tuple[int, ...] = DEFAULT_TEST_SIZES
    domains: Tuple[str, ...] = VALIDATION_DOMAINS
    seed: int = 0
    clock: ClockName = "wall"
    budget_scale: float = DEFAULT_BUDGET_SCALE
    arm: bool = field(default_factory=is_arm_machine)
    min_length: int = 64
    max_length: int = 8192 * 256
    keep_going: bool = False
    self_check: bool = True

    def __post_init__(self) -> None:
        if self.clock not in CLOCKS:
            raise ValueError(f"clock must be one of {sorted(CLOCKS)}, got {self.clock!r}")
        if self.budget_scale <= 0:
            raise ValueError(f"budget_scale must be > 0, got {self.budget_scale}")
        for d in self.domains:
            if d not in VALIDATION_DOMAINS:
                raise ValueError(f"unknown domain {d!r}")
        if self.min_length < 2:
            raise ValueError(f"min_length must be >= 2, got {self.min_length}")

    def resolve_clock(self) -> Callable[[], float]:
        return CLOCKS[self.clock]

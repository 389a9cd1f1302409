"""Registry of the transform providers available in this process.

Populated once at startup (:func:`default_registry`) and read-only afterwards.
Exactly one reference provider is expected; providers under test are validated
before anything is benchmarked; optional providers are benchmark-only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Literal, Optional

from fft_harness.buffers import alignment_for
from fft_harness.providers.base import TransformProvider
from fft_harness.providers.lane import LaneProvider
from fft_harness.providers.optional import FFTWProvider, ScipyFFTProvider
from fft_harness.providers.reference import FftpackReference

logger = logging.getLogger(__name__)

Role = Literal["reference", "under_test", "optional"]

# benchmark print order
_ROLE_ORDER: Dict[str, int] = {"under_test": 0, "reference": 1, "optional": 2}


@dataclass
class ProviderRegistry:
    """Providers by role.

    Attributes
    ----------
    entries:
        ``(role, provider)`` pairs in registration order.
    """

    entries: List[tuple] = field(default_factory=list)

    def register(self, provider: TransformProvider, role: Role) -> TransformProvider:
        if role not in _ROLE_ORDER:
            raise ValueError(f"unknown provider role {role!r}")
        if any(p.name == provider.name for _, p in self.entries):
            raise ValueError(f"a provider named {provider.name!r} is already registered")
        if role == "reference" and self.reference is not None:
            raise ValueError("a reference provider is already registered")
        if role == "under_test" and not provider.validatable:
            raise ValueError(f"{provider.name} does not expose the full contract needed for validation")
        self.entries.append((role, provider))
        logger.debug("registered %s provider %s", role, provider.name)
        return provider

    @property
    def reference(self) -> Optional[TransformProvider]:
        for role, p in self.entries:
            if role == "reference":
                return p
        return None

    def require_reference(self) -> TransformProvider:
        ref = self.reference
        if ref is None:
            raise ValueError("no reference provider registered")
        return ref

    def under_test(self) -> List[TransformProvider]:
        return [p for role, p in self.entries if role == "under_test"]

    def optional(self) -> List[TransformProvider]:
        return [p for role, p in self.entries if role == "optional"]

    def benchmark_order(self) -> Iterator[TransformProvider]:
        """Providers under test first, then the reference, then optional providers."""
        ordered = sorted(enumerate(self.entries), key=lambda ie: (_ROLE_ORDER[ie[1][0]], ie[0]))
        for _, (_, p) in ordered:
            yield p

    def max_lane_width(self) -> int:
        return max((p.native_lane_width() for _, p in self.entries), default=1)

    def alignment(self) -> int:
        """Buffer alignment (bytes) satisfying the strictest active provider."""
        return alignment_for(p.native_lane_width() for _, p in self.entries)

    def names(self) -> List[str]:
        return [p.name for _, p in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


def default_registry(*, include_optional: bool = True) -> ProviderRegistry:
    """FFTPACK reference, the four-lane provider under test, and whatever optional providers import."""
    reg = ProviderRegistry()
    reg.register(FftpackReference(), "reference")
    reg.register(LaneProvider(), "under_test")
    if include_optional:
        reg.register(ScipyFFTProvider(), "optional")
        if FFTWProvider.available():
            reg.register(FFTWProvider(), "optional")
        else:
            logger.info("pyfftw not installed; FFTW benchmarks disabled")
    return reg

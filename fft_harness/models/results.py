from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cases import Domain, domain_label


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one provider on one (N, domain) case.

    Attributes
    ----------
    n, domain, provider:
        Identifiers.
    ok:
        True if every check of both passes held.
    tolerance:
        Absolute bound used for the tolerance checks (``1e-3 * max|ref|``).
    forward_error, inverse_error, convolution_error:
        Largest deviation observed per check across both passes.
    message:
        Human-readable outcome line.
    """

    n: int
    domain: Domain
    provider: str
    ok: bool
    tolerance: float
    forward_error: float = 0.0
    inverse_error: float = 0.0
    convolution_error: float = 0.0
    message: str = ""

    @property
    def label(self) -> str:
        return domain_label(self.domain)


@dataclass(frozen=True)
class BenchmarkResult:
    """Throughput of one provider for one (N, domain).

    ``mflops`` follows the fixed ``5 N log2 N`` (complex) / ``2.5 N log2 N`` (real)
    flop convention, so figures compare across providers and with published
    numbers. ``ns_per_run`` is the mean time of one transform (half a pair).
    """

    n: int
    domain: Domain
    provider: str
    mflops: float
    ns_per_run: float
    iterations: int
    elapsed_s: Optional[float] = None

    @property
    def label(self) -> str:
        return domain_label(self.domain)

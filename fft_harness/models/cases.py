from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np


Domain = Literal["real", "complex"]

DOMAINS: Tuple[Domain, Domain] = ("real", "complex")

# Smallest real transform the validator accepts.
MIN_REAL_LENGTH = 32

# Relative tolerance applied to the reference spectrum magnitude.
DEFAULT_REL_TOLERANCE = 1e-3


def check_domain(domain: str) -> Domain:
    if domain not in DOMAINS:
        raise ValueError(f"domain must be 'real' or 'complex', got {domain!r}")
    return domain  # type: ignore[return-value]


def floats_per_signal(n: int, domain: str) -> int:
    """Number of float32 values in one signal: ``N`` (real) or ``2N`` (complex, interleaved)."""
    check_domain(domain)
    return int(n) * (2 if domain == "complex" else 1)


def domain_label(domain: str) -> str:
    return "CPLX" if check_domain(domain) == "complex" else "REAL"


@dataclass(frozen=True)
class ValidationCase:
    """One (length, domain) pair of the validation set.

    Real transforms shorter than 32 points are not meaningful for the
    providers under test and are rejected by :meth:`check`.
    """

    n: int
    domain: Domain

    @property
    def n_floats(self) -> int:
        return floats_per_signal(self.n, self.domain)

    @property
    def label(self) -> str:
        return domain_label(self.domain)

    def check(self) -> "ValidationCase":
        check_domain(self.domain)
        if self.n < 1:
            raise ValueError(f"transform length must be >= 1, got {self.n}")
        if self.domain == "real" and self.n < MIN_REAL_LENGTH:
            raise ValueError(f"real transforms need N >= {MIN_REAL_LENGTH}, got {self.n}")
        return self


@dataclass(frozen=True)
class ToleranceBudget:
    """Absolute error bound of one validation case.

    The bound is ``reference_max * rel`` where ``reference_max`` is the largest
    absolute value of the reconciled reference spectrum, so the check follows the
    dynamic range of the random signal rather than a fixed epsilon.
    """

    reference_max: float
    rel: float = DEFAULT_REL_TOLERANCE

    @property
    def bound(self) -> float:
        return float(self.reference_max) * float(self.rel)

    @classmethod
    def from_reference(cls, reference: np.ndarray, rel: float = DEFAULT_REL_TOLERANCE) -> "ToleranceBudget":
        ref = np.asarray(reference)
        if ref.size == 0:
            raise ValueError("reference spectrum is empty")
        return cls(reference_max=float(np.max(np.abs(ref))), rel=rel)

    def max_error(self, actual: np.ndarray, expected: np.ndarray) -> float:
        """Largest elementwise absolute deviation, computed in float64."""
        a = np.asarray(actual, dtype=np.float64)
        e = np.asarray(expected, dtype=np.float64)
        if a.shape != e.shape:
            raise ValueError(f"shape mismatch: {a.shape} vs {e.shape}")
        return float(np.max(np.abs(a - e))) if a.size else 0.0

    def within(self, actual: np.ndarray, expected: np.ndarray) -> bool:
        """True if every element differs by strictly less than the bound."""
        a = np.asarray(actual, dtype=np.float64)
        e = np.asarray(expected, dtype=np.float64)
        return bool(np.all(np.abs(a - e) < self.bound))

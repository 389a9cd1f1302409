"""Error taxonomy of the harness.

Unsupported configurations are non-fatal (the case is skipped), every other
error stops the run.
"""

from __future__ import annotations

from typing import Optional


class HarnessError(Exception):
    """Base class of all harness errors."""


class UnsupportedConfiguration(HarnessError):
    """A provider does not support the requested length, domain or operation."""


class ResourceExhausted(HarnessError):
    """Buffer or transform handle acquisition failed."""


class SelfCheckError(HarnessError):
    """The lane-primitive self-check of the execution environment failed."""


class NumericalMismatch(HarnessError):
    """A numerical check failed for one validation case.

    Attributes
    ----------
    n, domain, provider:
        Identify the offending case.
    stage:
        Name of the failed check (e.g. ``"forward"``, ``"inverse in-place"``).
    pass_index:
        0 for the native-ordering pass, 1 for the canonical-ordering pass.
    max_error, tolerance:
        Largest absolute deviation observed and the bound it was checked against.
        Both are None for exact (bit-identity) checks.
    """

    def __init__(
        self,
        *,
        n: int,
        domain: str,
        provider: str,
        stage: str,
        pass_index: int,
        max_error: Optional[float] = None,
        tolerance: Optional[float] = None,
    ) -> None:
        self.n = int(n)
        self.domain = domain
        self.provider = provider
        self.stage = stage
        self.pass_index = int(pass_index)
        self.max_error = max_error
        self.tolerance = tolerance
        super().__init__(self._format())

    def _format(self) -> str:
        label = "CPLX" if self.domain == "complex" else "REAL"
        msg = f"pass={self.pass_index}, {label} {self.provider} {self.stage} mismatch found for N={self.n}"
        if self.max_error is not None and self.tolerance is not None:
            msg += f" (max error {self.max_error:.3g} > tolerance {self.tolerance:.3g})"
        return msg

"""Two-pass differential validator.

For one (N, domain) case a uniform random signal is transformed once by the
reference; its spectrum is reconciled to the canonical layout and serves as
ground truth for both passes:

pass 0 (native ordering)
    forward out-of-place vs in-place (bit identity), reorder round trip (bit
    identity), reorder to canonical, compare with the reference, native inverse
    round trip, self-convolution.
pass 1 (canonical ordering)
    same, using the ordered transforms and no manual reorder.

Every tolerance check uses the same absolute bound ``1e-3 * max|ref|``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np

from fft_harness.analysis.ordering import expected_self_convolution, fftpack_to_canonical
from fft_harness.buffers import MIN_ALIGNMENT, aligned_empty, uniform_signal
from fft_harness.errors import NumericalMismatch, UnsupportedConfiguration
from fft_harness.models.cases import MIN_REAL_LENGTH, Domain, ToleranceBudget, ValidationCase
from fft_harness.models.results import ValidationReport
from fft_harness.providers.base import TransformHandle, TransformProvider

logger = logging.getLogger(__name__)

# Spans small, prime-factor-rich (3, 9, 27, 81) and large sizes.
DEFAULT_TEST_SIZES = (16, 32, 64, 96, 128, 192, 256, 288, 384, 512, 576, 864, 1024, 2048, 2592, 4096, 36864)

VALIDATION_DOMAINS = ("complex", "real")

N_PASSES = 2


@dataclass
class _CaseContext:
    provider: TransformProvider
    handle: TransformHandle
    n: int
    domain: Domain
    budget: ToleranceBudget
    errors: Dict[str, float]
    pass_index: int = 0

    def mismatch(self, stage: str, max_error: Optional[float] = None) -> NumericalMismatch:
        return NumericalMismatch(
            n=self.n,
            domain=self.domain,
            provider=self.provider.name,
            stage=stage,
            pass_index=self.pass_index,
            max_error=max_error,
            tolerance=None if max_error is None else self.budget.bound,
        )

    def require_identical(self, actual: np.ndarray, expected: np.ndarray, stage: str) -> None:
        if not np.array_equal(actual, expected):
            raise self.mismatch(stage)

    def require_close(self, actual: np.ndarray, expected: np.ndarray, stage: str) -> None:
        err = self.budget.max_error(actual, expected)
        self.errors[stage] = max(self.errors.get(stage, 0.0), err)
        if not self.budget.within(actual, expected):
            raise self.mismatch(stage, err)


def case_rng(seed: int, n: int, domain: str) -> np.random.Generator:
    """Fixed-seed generator for one case, independent of the order cases run in."""
    return np.random.default_rng([int(seed), int(n), VALIDATION_DOMAINS.index(domain)])


def reference_spectrum(
    reference: TransformProvider,
    signal: np.ndarray,
    n: int,
    domain: Domain,
    alignment: int = MIN_ALIGNMENT,
) -> np.ndarray:
    """Reference forward transform of ``signal``, reconciled to the canonical layout."""
    handle = reference.setup(n, domain)
    try:
        ref = aligned_empty(signal.size, alignment)
        reference.forward(handle, signal, ref)
        ref[:] = fftpack_to_canonical(ref, domain)
    finally:
        reference.teardown(handle)
    return ref


def validate_case(
    provider: TransformProvider,
    reference: TransformProvider,
    n: int,
    domain: Domain,
    *,
    rng: Optional[np.random.Generator] = None,
    alignment: int = MIN_ALIGNMENT,
) -> ValidationReport:
    """Validate ``provider`` on one (N, domain) case.

    Parameters
    ----------
    provider:
        Provider under test; must implement both orderings, reorder and
        convolve-accumulate.
    reference:
        Trusted reference transform (FFTPACK layout).
    n, domain:
        The case. Real transforms need ``n >= 32``.
    rng:
        Source of the uniform ``[0, 1)`` input signal.
    alignment:
        Byte alignment of every buffer.

    Returns
    -------
    ValidationReport
        ``ok=True`` with the largest observed error per check.

    Raises
    ------
    NumericalMismatch
        On the first failed check; the exception names the case, pass and stage.
    UnsupportedConfiguration
        If the provider cannot set up this length/domain.
    """
    case = ValidationCase(int(n), domain).check()
    n = case.n
    nf = case.n_floats
    if rng is None:
        rng = np.random.default_rng()

    handle = provider.setup(n, domain)
    try:
        signal = uniform_signal(nf, rng, alignment)
        ref = reference_spectrum(reference, signal, n, domain, alignment)
        ctx = _CaseContext(
            provider=provider,
            handle=handle,
            n=n,
            domain=domain,
            budget=ToleranceBudget.from_reference(ref),
            errors={},
        )

        out = aligned_empty(nf, alignment)
        tmp = aligned_empty(nf, alignment)
        tmp2 = aligned_empty(nf, alignment)
        for pass_index in range(N_PASSES):
            ctx.pass_index = pass_index
            ordered = pass_index == 1
            _check_forward(ctx, signal, ref, out, tmp, tmp2, ordered)
            _check_inverse(ctx, signal, out, tmp, tmp2, ordered)
            _check_convolution(ctx, ref, out, tmp, tmp2)
    finally:
        provider.teardown(handle)

    msg = f"{case.label} {provider.name} is OK for N={n}"
    logger.debug("%s (tolerance %.3g, errors %s)", msg, ctx.budget.bound, ctx.errors)
    return ValidationReport(
        n=n,
        domain=domain,
        provider=provider.name,
        ok=True,
        tolerance=ctx.budget.bound,
        forward_error=ctx.errors.get("forward", 0.0),
        inverse_error=ctx.errors.get("inverse", 0.0),
        convolution_error=ctx.errors.get("convolution", 0.0),
        message=msg,
    )


def _check_forward(ctx, signal, ref, out, tmp, tmp2, ordered: bool) -> None:
    """Leaves the pass's forward spectrum in ``tmp`` and its canonical form in ``out``."""
    p, h = ctx.provider, ctx.handle

    p.forward(h, signal, tmp, ordered=ordered)
    tmp2[:] = tmp
    tmp[:] = signal
    p.forward(h, tmp, tmp, ordered=ordered)
    ctx.require_identical(tmp, tmp2, "forward in-place")

    if ordered:
        out[:] = tmp
    else:
        p.reorder(h, tmp, out, "forward")
        p.reorder(h, out, tmp, "backward")
        ctx.require_identical(tmp, tmp2, "reorder round trip")
        p.reorder(h, tmp, out, "forward")

    ctx.require_close(out, ref, "forward")


def _check_inverse(ctx, signal, out, tmp, tmp2, ordered: bool) -> None:
    p, h = ctx.provider, ctx.handle

    p.backward(h, tmp, out, ordered=ordered)
    tmp2[:] = out
    out[:] = tmp
    p.backward(h, out, out, ordered=ordered)
    ctx.require_identical(out, tmp2, "inverse in-place")

    out *= np.float32(1.0 / ctx.n)
    ctx.require_close(out, signal, "inverse")


def _check_convolution(ctx, ref, out, tmp, tmp2) -> None:
    """``convolve_accumulate(X, X, 0, 1)`` must equal the bin-wise square of X.

    ``convolve_accumulate`` works on the provider's native layout, so the
    reference spectrum is handed over as a native-layout buffer and both sides
    are compared after reordering to canonical.
    """
    p, h = ctx.provider, ctx.handle

    p.reorder(h, ref, tmp, "forward")
    out.fill(0.0)
    p.convolve_accumulate(h, ref, ref, out, 1.0)
    p.reorder(h, out, tmp2, "forward")

    expected = expected_self_convolution(tmp, ctx.domain)
    ctx.require_close(tmp2, expected, "convolution")


def validate_all(
    provider: TransformProvider,
    reference: TransformProvider,
    *,
    sizes: Sequence[int] = DEFAULT_TEST_SIZES,
    domains: Iterable[str] = VALIDATION_DOMAINS,
    seed: int = 0,
    alignment: int = MIN_ALIGNMENT,
    keep_going: bool = False,
    on_report: Optional[Callable[[ValidationReport], None]] = None,
) -> List[ValidationReport]:
    """Validate ``provider`` over every (size, domain) of the test set.

    Real cases shorter than 32 points and sizes the provider does not support are
    skipped. With ``keep_going`` a mismatch is recorded as a failed report instead
    of being raised.
    """
    reports: List[ValidationReport] = []
    for domain in domains:
        for n in sizes:
            n = int(n)
            if domain == "real" and n < MIN_REAL_LENGTH:
                logger.info("%s: skipping real N=%d below the minimum of %d", provider.name, n, MIN_REAL_LENGTH)
                continue
            if not provider.supports(n, domain):
                logger.info("%s: skipping unsupported %s N=%d", provider.name, domain, n)
                continue

            try:
                rep = validate_case(
                    provider,
                    reference,
                    n,
                    domain,  # type: ignore[arg-type]
                    rng=case_rng(seed, n, domain),
                    alignment=alignment,
                )
            except UnsupportedConfiguration as exc:
                logger.info("%s", exc)
                continue
            except NumericalMismatch as exc:
                if not keep_going:
                    raise
                rep = ValidationReport(
                    n=n,
                    domain=domain,  # type: ignore[arg-type]
                    provider=provider.name,
                    ok=False,
                    tolerance=float("nan") if exc.tolerance is None else exc.tolerance,
                    message=str(exc),
                )

            reports.append(rep)
            if on_report is not None:
                on_report(rep)
    return reports

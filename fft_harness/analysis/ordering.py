"""Spectral coefficient layouts.

Canonical layout (what an "ordered" transform returns)
------------------------------------------------------
complex:
    interleaved ``[re0, im0, re1, im1, ..., re_{N-1}, im_{N-1}]``.
real:
    ``[r0, r_{N/2}, r1, i1, ..., r_{N/2-1}, i_{N/2-1}]``: the purely real DC and
    Nyquist bins share the first (re, im) slot.

FFTPACK layout
--------------
real:
    ``[r0, r1, i1, ..., r_{N/2-1}, i_{N/2-1}, r_{N/2}]``. Moving the last value
    into slot 1 yields the canonical layout.
complex:
    identical to the canonical layout.
"""

from __future__ import annotations

import numpy as np

from fft_harness.models.cases import check_domain


def fftpack_to_canonical(ref: np.ndarray, domain: str) -> np.ndarray:
    """Return the canonical-layout copy of an FFTPACK spectrum.

    For the real domain this is a one-element rotation of ``ref[1:]``: the
    trailing Nyquist coefficient moves to index 1 and ``ref[1:-1]`` shifts right
    by one. Complex spectra are returned as a copy.
    """
    x = np.asarray(ref)
    if x.ndim != 1:
        raise ValueError(f"spectrum must be 1D, got shape {x.shape}")
    if check_domain(domain) == "complex" or x.size < 3:
        return x.copy()
    return np.concatenate([x[:1], x[-1:], x[1:-1]])


def canonical_to_fftpack(spec: np.ndarray, domain: str) -> np.ndarray:
    """Inverse of :func:`fftpack_to_canonical`."""
    x = np.asarray(spec)
    if x.ndim != 1:
        raise ValueError(f"spectrum must be 1D, got shape {x.shape}")
    if check_domain(domain) == "complex" or x.size < 3:
        return x.copy()
    return np.concatenate([x[:1], x[2:], x[1:2]])


def expected_self_convolution(canonical: np.ndarray, domain: str) -> np.ndarray:
    """Square every bin of a canonical spectrum, in float32.

    Each (re, im) slot ``(a, b)`` becomes ``(a*a - b*b, 2*a*b)``. In the real
    domain slot 0 holds the DC and Nyquist values, both real, so it becomes
    ``(a*a, b*b)``.
    """
    x = np.asarray(canonical, dtype=np.float32)
    if x.ndim != 1 or x.size % 2:
        raise ValueError(f"canonical spectrum must be 1D with even length, got shape {x.shape}")

    ar = x[0::2]
    ai = x[1::2]
    out = np.empty_like(x)
    out[0::2] = ar * ar - ai * ai
    out[1::2] = np.float32(2.0) * ar * ai
    if check_domain(domain) == "real":
        out[0] = ar[0] * ar[0]
        out[1] = ai[0] * ai[0]
    return out


def pack_real_spectrum(spec: np.ndarray, n: int) -> np.ndarray:
    """Pack a half spectrum (``N/2 + 1`` complex bins) into the canonical real layout."""
    n = int(n)
    c = np.asarray(spec)
    if c.shape != (n // 2 + 1,):
        raise ValueError(f"expected {n // 2 + 1} bins for N={n}, got shape {c.shape}")
    out = np.empty(n, dtype=np.float32)
    out[0] = c[0].real
    out[1] = c[n // 2].real
    out[2::2] = c[1 : n // 2].real
    out[3::2] = c[1 : n // 2].imag
    return out


def unpack_real_spectrum(packed: np.ndarray, n: int, dtype=np.complex128) -> np.ndarray:
    """Inverse of :func:`pack_real_spectrum`; DC and Nyquist come back with zero imaginary part."""
    n = int(n)
    x = np.asarray(packed)
    if x.shape != (n,):
        raise ValueError(f"expected {n} packed values, got shape {x.shape}")
    spec = np.empty(n // 2 + 1, dtype=dtype)
    spec[0] = x[0]
    spec[n // 2] = x[1]
    spec[1 : n // 2] = x[2::2] + 1j * x[3::2]
    return spec

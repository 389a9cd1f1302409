"""Lane-blocked FFT provider (the provider under test).

The transform kernels are numpy's; what this provider adds is the contract of a
SIMD-style FFT library:

- an *ordered* transform producing the canonical layout
  (complex: interleaved; real: ``[r0, r_{N/2}, r1, i1, ...]``),
- a faster *native* transform whose spectrum is stored in blocks of four lanes,
  ``[re_k .. re_{k+3}, im_k .. im_{k+3}]`` for consecutive canonical
  ``(re, im)`` slots ``k .. k+3``,
- an exact ``reorder`` between the two layouts,
- ``convolve_accumulate`` working directly on the native layout.

Supported lengths mirror a four-lane radix-2/3/5 library: complex transforms need
``N`` divisible by 16, real transforms ``N`` divisible by 32, and ``N`` must have
no prime factor other than 2, 3 and 5.
"""

from __future__ import annotations

import numpy as np

from fft_harness.analysis.ordering import pack_real_spectrum, unpack_real_spectrum
from fft_harness.errors import UnsupportedConfiguration
from fft_harness.models.cases import Domain
from fft_harness.providers.base import Direction, TransformHandle, TransformProvider
from fft_harness.providers.lanes import LANES, interleave2, uninterleave2


def _has_small_factors(n: int) -> bool:
    for p in (2, 3, 5):
        while n % p == 0:
            n //= p
    return n == 1


def canonical_to_native(x: np.ndarray) -> np.ndarray:
    """Split every group of four canonical (re, im) slots into ``[re x4, im x4]``."""
    z = np.asarray(x, dtype=np.float32).reshape(-1, 2 * LANES)
    re, im = uninterleave2(z[:, :LANES], z[:, LANES:])
    return np.concatenate([re, im], axis=1).ravel()


def native_to_canonical(x: np.ndarray) -> np.ndarray:
    """Inverse of :func:`canonical_to_native`."""
    z = np.asarray(x, dtype=np.float32).reshape(-1, 2 * LANES)
    lo, hi = interleave2(z[:, :LANES], z[:, LANES:])
    return np.concatenate([lo, hi], axis=1).ravel()


class LaneProvider(TransformProvider):
    name = "LANE4"
    scalar = False
    validatable = True

    def native_lane_width(self) -> int:
        return LANES

    def _check_length(self, n: int, domain: Domain) -> None:
        multiple = 2 * LANES * LANES if domain == "real" else LANES * LANES
        if n % multiple:
            raise UnsupportedConfiguration(
                f"{self.name}: {domain} transforms need N divisible by {multiple}, got N={n}"
            )
        if not _has_small_factors(n):
            raise UnsupportedConfiguration(f"{self.name}: N={n} has a prime factor other than 2, 3, 5")

    # -- canonical kernels -------------------------------------------------
    @staticmethod
    def _ordered_forward(domain: Domain, n: int, src: np.ndarray) -> np.ndarray:
        x = np.array(src, dtype=np.float64)
        if domain == "complex":
            spec = np.fft.fft(x[0::2] + 1j * x[1::2])
            out = np.empty(2 * n, dtype=np.float32)
            out[0::2] = spec.real
            out[1::2] = spec.imag
            return out
        return pack_real_spectrum(np.fft.rfft(x), n)

    @staticmethod
    def _ordered_backward(domain: Domain, n: int, src: np.ndarray) -> np.ndarray:
        x = np.array(src, dtype=np.float64)
        if domain == "complex":
            sig = np.fft.ifft(x[0::2] + 1j * x[1::2]) * n
            out = np.empty(2 * n, dtype=np.float32)
            out[0::2] = sig.real
            out[1::2] = sig.imag
            return out

        spec = unpack_real_spectrum(x, n)
        return (np.fft.irfft(spec, n=n) * n).astype(np.float32)

    # -- contract ----------------------------------------------------------
    def _forward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        out = self._ordered_forward(handle.domain, handle.n, src)
        return out if ordered else canonical_to_native(out)

    def _backward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        spec = src if ordered else native_to_canonical(src)
        return self._ordered_backward(handle.domain, handle.n, spec)

    def reorder(self, handle: TransformHandle, src: np.ndarray, dst: np.ndarray, direction: Direction) -> np.ndarray:
        """Convert between native and canonical layouts; a pure permutation of ``src``."""
        self._check_call(handle, src, dst)
        if direction == "forward":
            out = native_to_canonical(src)
        elif direction == "backward":
            out = canonical_to_native(src)
        else:
            raise ValueError(f"direction must be 'forward' or 'backward', got {direction!r}")
        dst[:] = out
        return dst

    def convolve_accumulate(
        self,
        handle: TransformHandle,
        a: np.ndarray,
        b: np.ndarray,
        acc: np.ndarray,
        scale: float,
    ) -> np.ndarray:
        """``acc += scale * a * b`` per spectral bin, all three in native layout.

        In the real domain the first slot packs the DC and Nyquist bins, which are
        both real and are multiplied as two separate real numbers.
        """
        self._check_call(handle, a, b, acc)
        a3 = a.reshape(-1, 2, LANES)
        b3 = b.reshape(-1, 2, LANES)
        ar, ai = a3[:, 0, :], a3[:, 1, :]
        br, bi = b3[:, 0, :], b3[:, 1, :]

        re = ar * br - ai * bi
        im = ar * bi + ai * br
        if handle.domain == "real":
            re[0, 0] = ar[0, 0] * br[0, 0]
            im[0, 0] = ai[0, 0] * bi[0, 0]

        s = np.float32(scale)
        acc3 = acc.reshape(-1, 2, LANES)
        acc3[:, 0, :] += s * re
        acc3[:, 1, :] += s * im
        return acc

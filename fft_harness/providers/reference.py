"""FFTPACK reference transform (``scipy.fftpack``).

Scalar, single precision, one layout only: FFTPACK's own. For real input the
spectrum is ``[r0, r1, i1, ..., r_{N/2}]`` and must be reconciled with
:func:`~fft_harness.analysis.ordering.fftpack_to_canonical` before it is compared
with a canonical-layout provider. The backward transform is unnormalised, as
FFTPACK's ``rfftb``/``cfftb``.
"""

from __future__ import annotations

import numpy as np
from scipy import fftpack

from fft_harness.models.cases import Domain
from fft_harness.providers.base import TransformHandle, TransformProvider


class FftpackReference(TransformProvider):
    name = "FFTPACK"
    scalar = True
    validatable = False

    def _check_length(self, n: int, domain: Domain) -> None:
        # FFTPACK handles every length
        return None

    def _forward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        if handle.domain == "real":
            return fftpack.rfft(np.array(src, dtype=np.float32))
        z = np.array(src, dtype=np.float32).view(np.complex64)
        return fftpack.fft(z).astype(np.complex64, copy=False).view(np.float32)

    def _backward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        n = np.float32(handle.n)
        if handle.domain == "real":
            return fftpack.irfft(np.array(src, dtype=np.float32)) * n
        z = np.array(src, dtype=np.float32).view(np.complex64)
        return (fftpack.ifft(z) * n).astype(np.complex64, copy=False).view(np.float32)

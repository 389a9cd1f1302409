"""Optional accelerated providers, benchmark-only.

These are opaque: they only need ``setup``/``forward``/``backward``/``teardown``
(canonical layout, unnormalised backward) and are never validated.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import scipy.fft

from fft_harness.analysis.ordering import pack_real_spectrum, unpack_real_spectrum
from fft_harness.errors import UnsupportedConfiguration
from fft_harness.models.cases import Domain
from fft_harness.providers.base import TransformHandle, TransformProvider

try:
    import pyfftw
except ImportError:  # optional extra "fftw"
    pyfftw = None

# FFTW_MEASURE planning takes too long on the largest transforms.
FFTW_MEASURE_LIMIT = 40000


class ScipyFFTProvider(TransformProvider):
    """``scipy.fft`` (pocketfft) on single-precision data."""

    name = "SCIPY.FFT"

    def __init__(self, workers: Optional[int] = None) -> None:
        self.workers = workers

    def _check_length(self, n: int, domain: Domain) -> None:
        if domain == "real" and n % 2:
            raise UnsupportedConfiguration(f"{self.name}: packed real layout needs an even N, got N={n}")

    def _forward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        x = np.asarray(src, dtype=np.float32)
        if handle.domain == "complex":
            spec = scipy.fft.fft(x.view(np.complex64), workers=self.workers)
            return spec.astype(np.complex64, copy=False).view(np.float32)
        return pack_real_spectrum(scipy.fft.rfft(x, workers=self.workers), handle.n)

    def _backward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        x = np.asarray(src, dtype=np.float32)
        if handle.domain == "complex":
            sig = scipy.fft.ifft(x.view(np.complex64), norm="forward", workers=self.workers)
            return sig.astype(np.complex64, copy=False).view(np.float32)
        spec = unpack_real_spectrum(x, handle.n, np.complex64)
        sig = scipy.fft.irfft(spec, n=handle.n, norm="forward", workers=self.workers)
        return sig.astype(np.float32, copy=False)


class FFTWProvider(TransformProvider):
    """FFTW through ``pyfftw``; each handle owns a forward and a backward plan.

    The timing loop executes the two plans directly on their own aligned
    arrays, exactly as FFTW's native API is used.
    """

    name = "FFTW"

    def __init__(self, threads: int = 1) -> None:
        if pyfftw is None:
            raise ImportError("pyfftw is not installed (install the 'fftw' extra)")
        self.threads = int(threads)

    @staticmethod
    def available() -> bool:
        return pyfftw is not None

    def _check_length(self, n: int, domain: Domain) -> None:
        if domain == "real" and n % 2:
            raise UnsupportedConfiguration(f"{self.name}: packed real layout needs an even N, got N={n}")

    def planner_flag(self, n: int) -> str:
        return "FFTW_MEASURE" if n < FFTW_MEASURE_LIMIT else "FFTW_ESTIMATE"

    def report_name(self, n: int) -> str:
        return f"{self.name} ({'meas.' if n < FFTW_MEASURE_LIMIT else 'estim'})"

    def _init_handle(self, handle: TransformHandle) -> None:
        n = handle.n
        flags = (self.planner_flag(n),)
        if handle.domain == "complex":
            a = pyfftw.empty_aligned(n, dtype="complex64")
            b = pyfftw.empty_aligned(n, dtype="complex64")
            fwd = pyfftw.FFTW(a, b, direction="FFTW_FORWARD", flags=flags, threads=self.threads)
            bwd = pyfftw.FFTW(b, a, direction="FFTW_BACKWARD", flags=flags, threads=self.threads)
        else:
            a = pyfftw.empty_aligned(n, dtype="float32")
            b = pyfftw.empty_aligned(n // 2 + 1, dtype="complex64")
            fwd = pyfftw.FFTW(a, b, direction="FFTW_FORWARD", flags=flags, threads=self.threads)
            bwd = pyfftw.FFTW(b, a, direction="FFTW_BACKWARD", flags=flags, threads=self.threads)
        # planning with FFTW_MEASURE overwrites the arrays
        a[:] = 0
        b[:] = 0
        handle.state.update(time_domain=a, freq_domain=b, forward_plan=fwd, backward_plan=bwd)
        handle.state["flag"] = flags[0]

    def _forward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        st = handle.state
        x = np.asarray(src, dtype=np.float32)
        st["time_domain"][:] = x.view(np.complex64) if handle.domain == "complex" else x
        st["forward_plan"].execute()
        spec = st["freq_domain"]
        if handle.domain == "complex":
            return spec.copy().view(np.float32)
        return pack_real_spectrum(spec, handle.n)

    def _backward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        st = handle.state
        x = np.asarray(src, dtype=np.float32)
        if handle.domain == "complex":
            st["freq_domain"][:] = x.view(np.complex64)
        else:
            st["freq_domain"][:] = unpack_real_spectrum(x, handle.n, np.complex64)
        # execute() skips the 1/N normalisation of FFTW.__call__
        st["backward_plan"].execute()
        sig = st["time_domain"].copy()
        return sig.view(np.float32) if handle.domain == "complex" else sig

    def run_pair(self, handle, x, y, work=None) -> None:
        handle.state["forward_plan"].execute()
        handle.state["backward_plan"].execute()

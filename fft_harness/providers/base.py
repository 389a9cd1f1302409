"""Transform provider capability contract.

Every FFT back end is consumed through :class:`TransformProvider`. A provider
owns the meaning of its handle; callers only pass it back. Buffers are float32
arrays holding ``N`` (real) or ``2N`` interleaved (complex) values; ``dst`` may
be the same array as ``src`` and the result must not depend on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

import numpy as np

from fft_harness.errors import UnsupportedConfiguration
from fft_harness.models.cases import Domain, check_domain, floats_per_signal

# "forward": native -> canonical, "backward": canonical -> native
Direction = Literal["forward", "backward"]


@dataclass
class TransformHandle:
    """Per-(N, domain) state returned by :meth:`TransformProvider.setup`.

    ``state`` is provider-private (twiddles, plans, scratch arrays).
    """

    provider: str
    n: int
    domain: Domain
    state: Dict[str, Any] = field(default_factory=dict)
    closed: bool = False

    @property
    def n_floats(self) -> int:
        return floats_per_signal(self.n, self.domain)


class TransformProvider:
    """Base class of all transform providers.

    Subclasses implement :meth:`_check_length`, :meth:`_forward` and
    :meth:`_backward`; providers with a native (non-canonical) spectral layout
    also override :meth:`reorder` and :meth:`convolve_accumulate`.

    Attributes
    ----------
    name:
        Display name used in reports.
    scalar:
        True if one native call processes a single lane's worth of data; the
        benchmark then divides this provider's iteration budget by the widest
        lane width among the active providers.
    validatable:
        True if the provider exposes the full contract (both orderings, reorder,
        convolve-accumulate) and is checked by the validator.
    """

    name: str = "provider"
    scalar: bool = False
    validatable: bool = False

    # -- lifecycle ---------------------------------------------------------
    def setup(self, n: int, domain: str) -> TransformHandle:
        """Prepare a transform of length ``n``; raise UnsupportedConfiguration if not possible."""
        domain = check_domain(domain)
        n = int(n)
        if n < 1:
            raise UnsupportedConfiguration(f"{self.name}: N={n} is not a valid transform length")
        self._check_length(n, domain)
        handle = TransformHandle(provider=self.name, n=n, domain=domain)
        self._init_handle(handle)
        return handle

    def teardown(self, handle: TransformHandle) -> None:
        """Release everything tied to ``handle``. Safe to call twice."""
        if handle.closed:
            return
        handle.state.clear()
        handle.closed = True

    def report_name(self, n: int) -> str:
        """Name shown on benchmark lines for a transform of length ``n``."""
        return self.name

    def native_lane_width(self) -> int:
        return 1

    def supports(self, n: int, domain: str) -> bool:
        try:
            self._check_length(int(n), check_domain(domain))
        except UnsupportedConfiguration:
            return False
        return True

    # -- transforms --------------------------------------------------------
    def forward(
        self,
        handle: TransformHandle,
        src: np.ndarray,
        dst: np.ndarray,
        work: Optional[np.ndarray] = None,
        *,
        ordered: bool = False,
    ) -> np.ndarray:
        """Forward transform of ``src`` into ``dst`` (native layout unless ``ordered``)."""
        self._check_call(handle, src, dst, work)
        out = self._forward(handle, src, ordered)
        return self._store(out, dst, work)

    def backward(
        self,
        handle: TransformHandle,
        src: np.ndarray,
        dst: np.ndarray,
        work: Optional[np.ndarray] = None,
        *,
        ordered: bool = False,
    ) -> np.ndarray:
        """Unnormalised inverse transform (``backward(forward(x)) == N * x``)."""
        self._check_call(handle, src, dst, work)
        out = self._backward(handle, src, ordered)
        return self._store(out, dst, work)

    def reorder(self, handle: TransformHandle, src: np.ndarray, dst: np.ndarray, direction: Direction) -> np.ndarray:
        raise UnsupportedConfiguration(f"{self.name} has no native ordering to reorder")

    def convolve_accumulate(
        self,
        handle: TransformHandle,
        a: np.ndarray,
        b: np.ndarray,
        acc: np.ndarray,
        scale: float,
    ) -> np.ndarray:
        raise UnsupportedConfiguration(f"{self.name} does not implement convolve-accumulate")

    def run_pair(
        self,
        handle: TransformHandle,
        x: np.ndarray,
        y: np.ndarray,
        work: Optional[np.ndarray] = None,
    ) -> None:
        """One forward+inverse pair for the timing loop."""
        self.forward(handle, x, y, work)
        self.backward(handle, x, y, work)

    # -- hooks -------------------------------------------------------------
    def _check_length(self, n: int, domain: Domain) -> None:
        pass

    def _init_handle(self, handle: TransformHandle) -> None:
        pass

    def _forward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        raise NotImplementedError

    def _backward(self, handle: TransformHandle, src: np.ndarray, ordered: bool) -> np.ndarray:
        raise NotImplementedError

    # -- helpers -----------------------------------------------------------
    def _check_call(self, handle: TransformHandle, *buffers: Optional[np.ndarray]) -> None:
        if handle.closed:
            raise ValueError(f"{self.name}: transform handle for N={handle.n} was already torn down")
        need = handle.n_floats
        for buf in buffers:
            if buf is None:
                continue
            if buf.dtype != np.float32 or buf.ndim != 1 or buf.size != need:
                raise ValueError(
                    f"{self.name}: expected float32 buffer of {need} values, got {buf.dtype} shape {buf.shape}"
                )

    @staticmethod
    def _store(out: np.ndarray, dst: np.ndarray, work: Optional[np.ndarray]) -> np.ndarray:
        # results are always computed into a fresh array, so dst may alias src
        if work is not None:
            work[:] = out
            dst[:] = work
        else:
            dst[:] = out
        return dst

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

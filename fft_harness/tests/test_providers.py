"""Tests for the transform providers and the registry."""

from __future__ import annotations

import numpy as np
import pytest

from fft_harness.buffers import aligned_empty, aligned_zeros, alignment_for, is_aligned, uniform_signal
from fft_harness.errors import ResourceExhausted, UnsupportedConfiguration
from fft_harness.providers import (
    FftpackReference,
    LaneProvider,
    ProviderRegistry,
    ScipyFFTProvider,
    default_registry,
)
from fft_harness.analysis.ordering import expected_self_convolution, pack_real_spectrum


def _signal(n_floats: int, seed: int = 0) -> np.ndarray:
    return uniform_signal(n_floats, np.random.default_rng(seed))


# -----------------------------------------------------------------------
# Buffers
# -----------------------------------------------------------------------


def test_aligned_buffers() -> None:
    for alignment in (16, 32, 64):
        buf = aligned_empty(100, alignment)
        assert buf.dtype == np.float32
        assert buf.size == 100
        assert is_aligned(buf, alignment)
    assert not aligned_zeros(10).any()


def test_aligned_empty_out_of_memory() -> None:
    # far beyond any address space
    with pytest.raises(ResourceExhausted) as ei:
        aligned_empty(10**14)
    assert isinstance(ei.value.__cause__, MemoryError)


def test_aligned_empty_wraps_memory_error(monkeypatch) -> None:
    import fft_harness.buffers as buffers

    def _refuse(*args, **kwargs):
        raise MemoryError("refused")

    monkeypatch.setattr(buffers.np, "empty", _refuse)
    with pytest.raises(ResourceExhausted, match="cannot allocate 400 bytes"):
        buffers.aligned_zeros(100)


def test_alignment_for_lane_widths() -> None:
    assert alignment_for([1]) == 16
    assert alignment_for([1, 4]) == 16
    assert alignment_for([1, 16]) == 64


def test_uniform_signal_range() -> None:
    x = _signal(1000)
    assert x.min() >= 0.0
    assert x.max() < 1.0


# -----------------------------------------------------------------------
# FFTPACK reference
# -----------------------------------------------------------------------


def test_reference_real_layout() -> None:
    n = 64
    ref = FftpackReference()
    h = ref.setup(n, "real")
    x = _signal(n)
    out = aligned_empty(n)
    ref.forward(h, x, out)
    spec = np.fft.rfft(x.astype(np.float64))
    # [r0, r1, i1, ..., r_{N/2}]
    assert out[0] == pytest.approx(spec[0].real, abs=1e-3)
    assert out[-1] == pytest.approx(spec[n // 2].real, abs=1e-3)
    np.testing.assert_allclose(out[1:-1:2], spec[1 : n // 2].real, atol=1e-3)
    np.testing.assert_allclose(out[2:-1:2], spec[1 : n // 2].imag, atol=1e-3)


@pytest.mark.parametrize("domain", ["real", "complex"])
def test_reference_backward_is_unnormalised(domain: str) -> None:
    n = 96
    ref = FftpackReference()
    h = ref.setup(n, domain)
    nf = h.n_floats
    x = _signal(nf, 1)
    spec = aligned_empty(nf)
    back = aligned_empty(nf)
    ref.forward(h, x, spec)
    ref.backward(h, spec, back)
    np.testing.assert_allclose(back / n, x, atol=1e-4)


def test_reference_has_no_reorder() -> None:
    ref = FftpackReference()
    h = ref.setup(32, "real")
    buf = aligned_zeros(32)
    with pytest.raises(UnsupportedConfiguration):
        ref.reorder(h, buf, buf, "forward")
    with pytest.raises(UnsupportedConfiguration):
        ref.convolve_accumulate(h, buf, buf, buf, 1.0)


# -----------------------------------------------------------------------
# LaneProvider
# -----------------------------------------------------------------------


@pytest.mark.parametrize(
    "n, domain, ok",
    [
        (16, "complex", True),
        (16, "real", False),
        (32, "real", True),
        (96, "real", True),
        (2592, "complex", True),
        (36864, "real", True),
        (48, "complex", True),
        (24, "complex", False),
        (16 * 7, "complex", False),
    ],
)
def test_lane_supported_sizes(n: int, domain: str, ok: bool) -> None:
    p = LaneProvider()
    assert p.supports(n, domain) is ok
    if not ok:
        with pytest.raises(UnsupportedConfiguration):
            p.setup(n, domain)


@pytest.mark.parametrize("n, domain", [(64, "real"), (288, "real"), (1024, "complex"), (96, "complex")])
def test_lane_ordered_forward_matches_numpy(n: int, domain: str) -> None:
    p = LaneProvider()
    h = p.setup(n, domain)
    x = _signal(h.n_floats, 2)
    out = aligned_empty(h.n_floats)
    p.forward(h, x, out, ordered=True)

    xd = x.astype(np.float64)
    if domain == "real":
        expected = pack_real_spectrum(np.fft.rfft(xd), n)
    else:
        expected = np.fft.fft(xd[0::2] + 1j * xd[1::2]).astype(np.complex64).view(np.float32)
    np.testing.assert_allclose(out, expected, rtol=0, atol=1e-3)


@pytest.mark.parametrize("ordered", [False, True])
@pytest.mark.parametrize("domain", ["real", "complex"])
def test_lane_in_place_is_bit_identical(domain: str, ordered: bool) -> None:
    p = LaneProvider()
    h = p.setup(256, domain)
    x = _signal(h.n_floats, 3)
    out = aligned_empty(h.n_floats)
    p.forward(h, x, out, ordered=ordered)
    inplace = x.copy()
    p.forward(h, inplace, inplace, ordered=ordered)
    assert np.array_equal(out, inplace)

    back = aligned_empty(h.n_floats)
    p.backward(h, out, back, ordered=ordered)
    p.backward(h, out, out, ordered=ordered)
    assert np.array_equal(back, out)


@pytest.mark.parametrize("domain", ["real", "complex"])
def test_lane_work_buffer_does_not_change_result(domain: str) -> None:
    p = LaneProvider()
    h = p.setup(128, domain)
    x = _signal(h.n_floats, 4)
    a = aligned_empty(h.n_floats)
    b = aligned_empty(h.n_floats)
    work = aligned_empty(h.n_floats)
    p.forward(h, x, a)
    p.forward(h, x, b, work)
    assert np.array_equal(a, b)


@pytest.mark.parametrize("domain", ["real", "complex"])
def test_lane_reorder_is_exact_involution(domain: str) -> None:
    p = LaneProvider()
    h = p.setup(576, domain)
    x = _signal(h.n_floats, 5)
    canon = aligned_empty(h.n_floats)
    back = aligned_empty(h.n_floats)
    p.reorder(h, x, canon, "forward")
    p.reorder(h, canon, back, "backward")
    assert np.array_equal(back, x)
    assert not np.array_equal(canon, x)


def test_lane_native_reordered_equals_ordered() -> None:
    p = LaneProvider()
    h = p.setup(384, "real")
    x = _signal(384, 6)
    native = aligned_empty(384)
    ordered = aligned_empty(384)
    canon = aligned_empty(384)
    p.forward(h, x, native)
    p.forward(h, x, ordered, ordered=True)
    p.reorder(h, native, canon, "forward")
    assert np.array_equal(canon, ordered)


@pytest.mark.parametrize("domain", ["real", "complex"])
def test_lane_native_round_trip(domain: str) -> None:
    n = 864
    p = LaneProvider()
    h = p.setup(n, domain)
    x = _signal(h.n_floats, 7)
    spec = aligned_empty(h.n_floats)
    back = aligned_empty(h.n_floats)
    p.forward(h, x, spec)
    p.backward(h, spec, back)
    np.testing.assert_allclose(back / n, x, atol=1e-4)


@pytest.mark.parametrize("domain", ["real", "complex"])
def test_lane_convolve_accumulate_self(domain: str) -> None:
    p = LaneProvider()
    h = p.setup(64, domain)
    x = _signal(h.n_floats, 8)
    acc = aligned_zeros(h.n_floats)
    p.convolve_accumulate(h, x, x, acc, 1.0)

    canon_x = aligned_empty(h.n_floats)
    canon_acc = aligned_empty(h.n_floats)
    p.reorder(h, x, canon_x, "forward")
    p.reorder(h, acc, canon_acc, "forward")
    assert np.array_equal(canon_acc, expected_self_convolution(canon_x, domain))


def test_lane_convolve_accumulate_scales_and_accumulates() -> None:
    p = LaneProvider()
    h = p.setup(32, "complex")
    a = _signal(64, 9)
    b = _signal(64, 10)
    acc = aligned_zeros(64)
    p.convolve_accumulate(h, a, b, acc, 0.5)
    once = acc.copy()
    p.convolve_accumulate(h, a, b, acc, 0.5)
    np.testing.assert_allclose(acc, 2 * once, rtol=1e-6)


def test_lane_rejects_wrong_buffer() -> None:
    p = LaneProvider()
    h = p.setup(32, "real")
    with pytest.raises(ValueError):
        p.forward(h, np.zeros(32, dtype=np.float64), aligned_empty(32))
    with pytest.raises(ValueError):
        p.forward(h, aligned_zeros(64), aligned_empty(64))


def test_teardown_closes_handle() -> None:
    p = LaneProvider()
    h = p.setup(32, "real")
    p.teardown(h)
    p.teardown(h)
    assert h.closed
    with pytest.raises(ValueError):
        p.forward(h, aligned_zeros(32), aligned_empty(32))


# -----------------------------------------------------------------------
# Optional providers
# -----------------------------------------------------------------------


@pytest.mark.parametrize("domain", ["real", "complex"])
def test_scipy_fft_provider_matches_lane(domain: str) -> None:
    n = 512
    lane, sp = LaneProvider(), ScipyFFTProvider()
    hl, hs = lane.setup(n, domain), sp.setup(n, domain)
    x = _signal(hl.n_floats, 11)
    a, b = aligned_empty(hl.n_floats), aligned_empty(hl.n_floats)
    lane.forward(hl, x, a, ordered=True)
    sp.forward(hs, x, b)
    tol = 1e-3 * np.abs(a).max()
    np.testing.assert_allclose(b, a, rtol=0, atol=tol)

    back = aligned_empty(hl.n_floats)
    sp.backward(hs, b, back)
    np.testing.assert_allclose(back / n, x, atol=tol)


def test_scipy_fft_rejects_odd_real() -> None:
    assert not ScipyFFTProvider().supports(33, "real")


def test_fftw_provider_matches_lane() -> None:
    pytest.importorskip("pyfftw")
    from fft_harness.providers import FFTWProvider

    n = 256
    lane, fw = LaneProvider(), FFTWProvider()
    for domain in ("real", "complex"):
        hl, hf = lane.setup(n, domain), fw.setup(n, domain)
        try:
            x = _signal(hl.n_floats, 12)
            a, b = aligned_empty(hl.n_floats), aligned_empty(hl.n_floats)
            lane.forward(hl, x, a, ordered=True)
            fw.forward(hf, x, b)
            np.testing.assert_allclose(b, a, rtol=0, atol=1e-3 * np.abs(a).max())
            assert hf.state["flag"] == "FFTW_MEASURE"
        finally:
            fw.teardown(hf)


# -----------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------


def test_default_registry_roles() -> None:
    reg = default_registry()
    assert isinstance(reg.require_reference(), FftpackReference)
    assert [p.name for p in reg.under_test()] == ["LANE4"]
    assert "SCIPY.FFT" in reg.names()
    order = [p.name for p in reg.benchmark_order()]
    assert order[:3] == ["LANE4", "FFTPACK", "SCIPY.FFT"]
    assert reg.max_lane_width() == 4
    assert reg.alignment() == 16


def test_registry_without_optional() -> None:
    reg = default_registry(include_optional=False)
    assert reg.names() == ["FFTPACK", "LANE4"]
    assert reg.optional() == []


def test_registry_rejects_duplicates_and_bad_roles() -> None:
    reg = ProviderRegistry()
    reg.register(FftpackReference(), "reference")
    with pytest.raises(ValueError):
        reg.register(FftpackReference(), "optional")
    with pytest.raises(ValueError):
        reg.register(ScipyFFTProvider(), "under_test")
    with pytest.raises(ValueError):
        reg.register(LaneProvider(), "spare")  # type: ignore[arg-type]

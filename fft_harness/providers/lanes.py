"""Four-lane float32 primitives and the environment self-check.

A "lane block" is a row of a ``(rows, 4)`` float32 array. The primitives below
are the building blocks of :class:`~fft_harness.providers.lane.LaneProvider`'s
native spectral layout; :func:`check_lanes` runs them on known inputs before
anything is validated, so a broken numpy/BLAS build or an unexpected memory
layout is caught before it shows up as an obscure FFT mismatch.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from fft_harness.errors import SelfCheckError

LANES = 4


def _as_blocks(x: np.ndarray) -> np.ndarray:
    a = np.asarray(x, dtype=np.float32)
    if a.ndim != 2 or a.shape[1] != LANES:
        raise ValueError(f"expected shape (rows, {LANES}), got {a.shape}")
    return a


def interleave2(a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """``[a0 a1 a2 a3], [b0 b1 b2 b3] -> [a0 b0 a1 b1], [a2 b2 a3 b3]``."""
    a = _as_blocks(a)
    b = _as_blocks(b)
    z = np.stack([a, b], axis=2).reshape(a.shape[0], 2 * LANES)
    return z[:, :LANES].copy(), z[:, LANES:].copy()


def uninterleave2(a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """``[a0 b0 a1 b1], [a2 b2 a3 b3] -> [a0 a1 a2 a3], [b0 b1 b2 b3]``."""
    a = _as_blocks(a)
    b = _as_blocks(b)
    z = np.concatenate([a, b], axis=1)
    return z[:, 0::2].copy(), z[:, 1::2].copy()


def transpose4(x0: np.ndarray, x1: np.ndarray, x2: np.ndarray, x3: np.ndarray) -> Tuple[np.ndarray, ...]:
    """Transpose each 4x4 block formed by rows of ``x0..x3``."""
    m = np.stack([_as_blocks(x0), _as_blocks(x1), _as_blocks(x2), _as_blocks(x3)], axis=1)
    t = np.swapaxes(m, 1, 2)
    return tuple(t[:, i, :].copy() for i in range(LANES))


def swap_hl(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """``[a0 a1 a2 a3], [b0 b1 b2 b3] -> [b0 b1 a2 a3]``."""
    a = _as_blocks(a)
    b = _as_blocks(b)
    return np.concatenate([b[:, :2], a[:, 2:]], axis=1)


def _expect(name: str, got: np.ndarray, expected) -> None:
    exp = np.asarray(expected, dtype=np.float32).reshape(1, LANES)
    if not np.array_equal(got, exp):
        raise SelfCheckError(
            f"{name} produced {np.asarray(got).ravel().tolist()}, expected {exp.ravel().tolist()}"
        )


def check_lanes() -> None:
    """Run the lane primitives on the vectors ``0..15`` and compare with known results.

    Raises
    ------
    SelfCheckError
        If any primitive does not produce the expected lanes.
    """
    f = np.arange(16, dtype=np.float32).reshape(4, 1, LANES)
    a0, a1, a2, a3 = f[0], f[1], f[2], f[3]

    t, u = interleave2(a0, a1)
    _expect("interleave2 (low)", t, [0, 4, 1, 5])
    _expect("interleave2 (high)", u, [2, 6, 3, 7])

    t, u = uninterleave2(a0, a1)
    _expect("uninterleave2 (even)", t, [0, 2, 4, 6])
    _expect("uninterleave2 (odd)", u, [1, 3, 5, 7])

    t0, t1, t2, t3 = transpose4(a0, a1, a2, a3)
    _expect("transpose4 (row 0)", t0, [0, 4, 8, 12])
    _expect("transpose4 (row 1)", t1, [1, 5, 9, 13])
    _expect("transpose4 (row 2)", t2, [2, 6, 10, 14])
    _expect("transpose4 (row 3)", t3, [3, 7, 11, 15])

    _expect("swap_hl", swap_hl(a0, a1), [4, 5, 2, 3])

    # interleave2 and uninterleave2 must be exact inverses
    rng = np.random.default_rng(0)
    lo = rng.random((8, LANES), dtype=np.float32)
    hi = rng.random((8, LANES), dtype=np.float32)
    back_lo, back_hi = uninterleave2(*interleave2(lo, hi))
    if not (np.array_equal(back_lo, lo) and np.array_equal(back_hi, hi)):
        raise SelfCheckError("uninterleave2(interleave2(a, b)) does not reproduce (a, b)")

"""Aligned float32 signal buffers.

Buffers are plain numpy arrays whose data pointer is a multiple of the requested
alignment. They are owned by the routine that allocates them; acquisition
failures surface as :class:`~fft_harness.errors.ResourceExhausted`.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from fft_harness.errors import ResourceExhausted

FLOAT_BYTES = np.dtype(np.float32).itemsize
MIN_ALIGNMENT = 16


def alignment_for(lane_widths: Iterable[int]) -> int:
    """Strictest alignment (bytes) required by a set of provider lane widths."""
    widest = max((int(w) for w in lane_widths), default=1)
    return max(MIN_ALIGNMENT, widest * FLOAT_BYTES)


def aligned_empty(n_floats: int, alignment: int = MIN_ALIGNMENT) -> np.ndarray:
    """Uninitialised float32 array of ``n_floats`` values aligned to ``alignment`` bytes."""
    n_floats = int(n_floats)
    alignment = int(alignment)
    if n_floats < 0:
        raise ValueError(f"n_floats must be >= 0, got {n_floats}")
    if alignment <= 0 or alignment % FLOAT_BYTES:
        raise ValueError(f"alignment must be a positive multiple of {FLOAT_BYTES}, got {alignment}")

    nbytes = n_floats * FLOAT_BYTES
    try:
        raw = np.empty(nbytes + alignment, dtype=np.uint8)
    except MemoryError as exc:
        raise ResourceExhausted(f"cannot allocate {nbytes} bytes for a signal buffer") from exc

    offset = (-raw.ctypes.data) % alignment
    return raw[offset : offset + nbytes].view(np.float32)


def aligned_zeros(n_floats: int, alignment: int = MIN_ALIGNMENT) -> np.ndarray:
    buf = aligned_empty(n_floats, alignment)
    buf.fill(0.0)
    return buf


def uniform_signal(
    n_floats: int,
    rng: Optional[np.random.Generator] = None,
    alignment: int = MIN_ALIGNMENT,
) -> np.ndarray:
    """Aligned float32 buffer of uniform random values in ``[0, 1)``."""
    if rng is None:
        rng = np.random.default_rng()
    buf = aligned_empty(n_floats, alignment)
    buf[:] = rng.random(int(n_floats), dtype=np.float32)
    return buf


def is_aligned(buf: np.ndarray, alignment: int) -> bool:
    return buf.ctypes.data % int(alignment) == 0

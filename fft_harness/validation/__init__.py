"""Validation of transform providers against the FFTPACK reference.

Design goals
------------
1) Differential check: the provider's canonical spectrum must match the
   reconciled reference spectrum within ``1e-3 * max|ref|``.
2) Algebraic checks on the provider alone: exact in-place/out-of-place identity,
   exact reorder round trip, inverse round trip, convolution theorem.
3) Fatal on the first mismatch unless the caller asks to keep going.
"""

from .validator import DEFAULT_TEST_SIZES, VALIDATION_DOMAINS, validate_all, validate_case

__all__ = [
    "DEFAULT_TEST_SIZES",
    "VALIDATION_DOMAINS",
    "validate_all",
    "validate_case",
]

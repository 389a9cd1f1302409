"""Transform providers.

- base: the capability contract every provider implements
- reference: FFTPACK reference (``scipy.fftpack``)
- lane: four-lane provider under test (canonical + native layouts)
- optional: benchmark-only providers (``scipy.fft``, FFTW via ``pyfftw``)
- registry: providers available in this process, by role
"""

from .base import Direction, TransformHandle, TransformProvider
from .lane import LaneProvider
from .optional import FFTWProvider, ScipyFFTProvider
from .reference import FftpackReference
from .registry import ProviderRegistry, default_registry

__all__ = [
    "Direction",
    "TransformHandle",
    "TransformProvider",
    "LaneProvider",
    "FFTWProvider",
    "ScipyFFTProvider",
    "FftpackReference",
    "ProviderRegistry",
    "default_registry",
]

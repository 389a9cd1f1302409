from .cases import Domain, ToleranceBudget, ValidationCase, domain_label, floats_per_signal
from .results import BenchmarkResult, ValidationReport

__all__ = [
    "Domain",
    "ToleranceBudget",
    "ValidationCase",
    "domain_label",
    "floats_per_signal",
    "BenchmarkResult",
    "ValidationReport",
]

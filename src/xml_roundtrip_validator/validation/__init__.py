"""Round-trip validation of XML token streams.

Key Components:
    check_token: Encode, re-decode and compare a single token
    RoundtripValidator: Scan driver shared by fail-fast and exhaustive modes
    validate: Raise the first finding in a document
    validate_all: Collect every finding in a document
"""

from .benchmarks import BenchmarkResult, BenchmarkSuite, ValidationBenchmark
from .roundtrip import check_token
from .validator import (
    RoundtripValidator,
    ScanResult,
    ScanState,
    validate,
    validate_all,
)

__all__ = [
    "BenchmarkResult",
    "BenchmarkSuite",
    "RoundtripValidator",
    "ScanResult",
    "ScanState",
    "ValidationBenchmark",
    "check_token",
    "validate",
    "validate_all",
]

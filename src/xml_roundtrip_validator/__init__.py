"""XML Round-trip Validator.

Detects XML constructs that do not survive a decode/encode/decode cycle
unchanged. Such constructs let a signature verifier and the code acting on a
re-serialized document see different content, which is how several SAML
signature bypasses work.

Progressive API Disclosure:
- Level 1: Simple functions - validate(), validate_all()
- Level 2: Configured validator - RoundtripValidator class
"""

__version__ = "0.1.0"
__author__ = "XML Round-trip Validator Team"

# Progressive API disclosure - Level 1: Simple functions
from .validation import validate, validate_all

# Progressive API disclosure - Level 2: Configured validator
from .validation import RoundtripValidator, ScanResult, ScanState

# Configuration classes for advanced usage
from .shared.config import ValidatorConfig

# Findings raised or returned by the validator
from .shared.errors import (
    EncodeError,
    RoundtripError,
    ValidatorError,
    XMLSyntaxError,
    XMLValidationError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple validation functions
    "validate",
    "validate_all",

    # Level 2: Configured validator
    "RoundtripValidator",
    "ScanResult",
    "ScanState",

    # Configuration
    "ValidatorConfig",

    # Findings
    "EncodeError",
    "RoundtripError",
    "ValidatorError",
    "XMLSyntaxError",
    "XMLValidationError",
]

"""
Schemas - Public API

Error taxonomy and canonical serialization. The proof record lives in
``cbmt.schemas.proof`` and is imported from there, since it depends on the
merkle package which in turn depends on this one.
"""

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    format_datetime_canonical,
    loads_canonical,
)
from .errors import (
    CanonicalizationException,
    CBMTError,
    CBMTException,
    EmptyProofInput,
    EmptyTree,
    ErrorCodes,
    IndexOutOfRange,
    InvalidProofRecord,
    ProofError,
    UnsupportedHashAlgorithm,
)

__all__ = [
    # Canonical serialization
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "format_datetime_canonical",
    "loads_canonical",
    # Errors
    "ErrorCodes",
    "CBMTError",
    "CBMTException",
    "ProofError",
    "EmptyProofInput",
    "EmptyTree",
    "IndexOutOfRange",
    "UnsupportedHashAlgorithm",
    "CanonicalizationException",
    "InvalidProofRecord",
]

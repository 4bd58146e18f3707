"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for tree building and proof generation.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Verification never raises; these exceptions cover proof generation,
configuration and (de)serialization only.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Proof generation
    EMPTY_PROOF_INPUT = "EMPTY_PROOF_INPUT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    EMPTY_TREE = "EMPTY_TREE"

    # Configuration
    UNSUPPORTED_HASH_ALGORITHM = "UNSUPPORTED_HASH_ALGORITHM"

    # Serialization
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    INVALID_PROOF_RECORD = "INVALID_PROOF_RECORD"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class CBMTError(BaseModel):
    """
    Error model for passing failures between components without exceptions.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INDEX_OUT_OF_RANGE],
    )
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "CBMTException":
        """Convert this error model to a raisable exception."""
        return CBMTException(
            message=self.message,
            code=self.code,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class CBMTException(Exception):
    """
    Base exception for all errors raised by this package.

    Carries structured error information and converts to a CBMTError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "CBMT_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> CBMTError:
        """Convert this exception to a CBMTError model."""
        return CBMTError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ProofError(CBMTException):
    """Base class for failures while generating a Merkle proof."""


class EmptyProofInput(ProofError, ValueError):
    """Raised when a proof is requested for zero target indices."""

    def __init__(self, message: str = "No leaf indices requested for proof") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_PROOF_INPUT)


class EmptyTree(ProofError, ValueError):
    """Raised when a proof is requested against zero items."""

    def __init__(self, message: str = "Cannot generate proof for empty leaf list") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class IndexOutOfRange(ProofError, IndexError):
    """Raised when a requested leaf index does not address an item."""

    def __init__(self, index: int, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "leaf_count": leaf_count},
        )
        self.index = index
        self.leaf_count = leaf_count


class UnsupportedHashAlgorithm(CBMTException, ValueError):
    """Raised when the configured digest algorithm has no merge strategy."""

    def __init__(self, algorithm: str, supported: list[str] | None = None) -> None:
        details: dict[str, Any] = {"algorithm": algorithm}
        if supported:
            details["supported"] = supported
        super().__init__(
            message=f"Unsupported hash algorithm: {algorithm!r}",
            code=ErrorCodes.UNSUPPORTED_HASH_ALGORITHM,
            details=details,
        )


class CanonicalizationException(CBMTException):
    """Raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class InvalidProofRecord(CBMTException, ValueError):
    """Raised when a serialized proof record cannot be turned into a proof."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PROOF_RECORD,
            details=details,
        )

"""Error types for index and matrix operations.

Every failure is a caller contract violation surfaced synchronously. Each
error kind is its own subclass with a stable ``error_code`` so callers can
branch on either.
"""

# ruff: noqa: N818

from __future__ import annotations

from typing import Any


class TSMatrixError(Exception):
    """Base exception with rich context.

    Attributes:
        error_code: Unique error code string for programmatic handling
        message: Human-readable error message
        context: Additional context data for debugging
        fix_hint: Actionable hint for resolving the error
    """

    error_code: str = "E_UNKNOWN"
    fix_hint: str = ""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        fix_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if fix_hint is not None:
            self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.context:
            parts.append(f"(context: {self.context})")
        if self.fix_hint:
            parts.append(f"[hint: {self.fix_hint}]")
        return " ".join(parts)

    def to_agent_dict(self) -> dict[str, Any]:
        """Return a structured dict with error_code, message, fix_hint and context."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "fix_hint": self.fix_hint,
            "context": self.context,
        }


class EIncompatibleFrequency(TSMatrixError):
    """Indexes lack a shared uniform frequency."""

    error_code = "E_INCOMPATIBLE_FREQUENCY"
    fix_hint = "Resample every series onto the same uniform frequency first"


class EIndexOutOfRange(TSMatrixError):
    """Offset or slice bounds fall outside the index."""

    error_code = "E_INDEX_OUT_OF_RANGE"
    fix_hint = "Offsets must satisfy 0 <= offset < index.size"


class ENotFound(TSMatrixError):
    """Exact timestamp or key lookup failed."""

    error_code = "E_NOT_FOUND"
    fix_hint = "Use exact=False to get the position the timestamp would occupy"


class ELengthMismatch(TSMatrixError):
    """Supplied data length does not match the index size."""

    error_code = "E_LENGTH_MISMATCH"


class ERequiresUniformIndex(TSMatrixError):
    """Operation is only defined for uniform indexes."""

    error_code = "E_REQUIRES_UNIFORM_INDEX"
    fix_hint = "Build the matrix on a UniformDateTimeIndex (see samples_to_time_series)"


class EUnsupportedOperation(TSMatrixError):
    """Operation is intentionally not implemented."""

    error_code = "E_UNSUPPORTED_OPERATION"


class EMisalignedSample(TSMatrixError):
    """A sample does not fall on the frequency grid."""

    error_code = "E_MISALIGNED_SAMPLE"
    fix_hint = "Samples must be ascending, unique and on the frequency grid"


class EDuplicateKey(TSMatrixError):
    """Generated column keys collide."""

    error_code = "E_DUPLICATE_KEY"
    fix_hint = "Use a key function that is injective over (key, lag) pairs"


ERROR_REGISTRY: dict[str, type[TSMatrixError]] = {
    cls.error_code: cls
    for cls in (
        EIncompatibleFrequency,
        EIndexOutOfRange,
        ENotFound,
        ELengthMismatch,
        ERequiresUniformIndex,
        EUnsupportedOperation,
        EMisalignedSample,
        EDuplicateKey,
    )
}


def get_error_class(error_code: str) -> type[TSMatrixError]:
    """Get error class by code."""
    return ERROR_REGISTRY.get(error_code, TSMatrixError)


__all__ = [
    "TSMatrixError",
    "EIncompatibleFrequency",
    "EIndexOutOfRange",
    "ENotFound",
    "ELengthMismatch",
    "ERequiresUniformIndex",
    "EUnsupportedOperation",
    "EMisalignedSample",
    "EDuplicateKey",
    "ERROR_REGISTRY",
    "get_error_class",
]

"""Core module - errors, configuration and shared types.

This module provides the foundational pieces every other tsmatrix module
builds on.
"""

from tsmatrix.core.config import DEFAULT_CONFIG, MatrixConfig
from tsmatrix.core.errors import (
    EDuplicateKey,
    EIncompatibleFrequency,
    EIndexOutOfRange,
    ELengthMismatch,
    EMisalignedSample,
    ENotFound,
    ERequiresUniformIndex,
    EUnsupportedOperation,
    TSMatrixError,
)

__all__ = [
    # Config
    "MatrixConfig",
    "DEFAULT_CONFIG",
    # Errors
    "TSMatrixError",
    "EIncompatibleFrequency",
    "EIndexOutOfRange",
    "ENotFound",
    "ELengthMismatch",
    "ERequiresUniformIndex",
    "EUnsupportedOperation",
    "EMisalignedSample",
    "EDuplicateKey",
]

"""
Exception hierarchy for SonicSlice.

Every error carries a human readable message plus an optional context dict
(sizes, file names, sample rates) that is appended when the error is printed.
"""
from typing import Any, Optional


class SonicSliceError(Exception):
    """Base exception for all SonicSlice errors."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        """
        Initialize exception with message and optional context.

        Args:
            message: Human-readable error description
            context: Additional diagnostic information (shape, file name, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InvalidBufferShape(SonicSliceError, ValueError):
    """
    Raised when a sample buffer is requested with an impossible shape:
    no channels, no frames, or a non-positive sample rate.
    """
    pass


class DecodeError(SonicSliceError):
    """
    Raised when input bytes cannot be decoded into a sample buffer.

    The decoder's own exception is chained as ``__cause__``.
    """
    pass

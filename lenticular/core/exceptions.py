"""
Custom exceptions for the lenticular core system.

Every failure is specific and fails loudly; nothing is retried here.
"""


class LenticularError(Exception):
    """Base class for all lenticular custom exceptions."""
    pass

class InvalidInputError(LenticularError, ValueError):
    """Raised when inputs, geometry or pixel layout are not acceptable."""
    pass

class CodecError(LenticularError, RuntimeError):
    """Raised when TIFF decoding or encoding fails."""
    pass

class ResampleError(LenticularError, RuntimeError):
    """Raised when a pixel buffer cannot be resampled to the requested size."""
    pass

class SearchExhaustedError(LenticularError, RuntimeError):
    """Raised when the automatic stripe-width search hits its iteration bound."""

    def __init__(self, message: str, last_widths=None, iterations: int = 0):
        super().__init__(message)
        self.last_widths = list(last_widths) if last_widths is not None else []
        self.iterations = iterations

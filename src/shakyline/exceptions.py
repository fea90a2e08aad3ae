"""Exceptions raised by shakyline."""


class ShakylineError(Exception):
    """Base exception for shakyline errors."""

    pass


class DecodeError(ShakylineError):
    """Input image is unreadable or in an unsupported format."""

    pass


class NoClearColorError(ShakylineError):
    """The assumed background color does not occur in the input image."""

    pass


class InvalidParameterError(ShakylineError, ValueError):
    """A tracing or animation parameter is out of range."""

    pass


class EncodeError(ShakylineError):
    """Assembling or writing the output animation failed."""

    pass

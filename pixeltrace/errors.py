"""Exception types raised across the pipeline."""


class PixelTraceError(Exception):
    """Base class for errors raised by pixeltrace."""


class ImageDecodeError(PixelTraceError, ValueError):
    """The source bitmap could not be decoded."""


class InvalidOptionsError(PixelTraceError, ValueError):
    """Processing options or a color value failed validation."""

"""Exception types raised by phytoscan."""


class PhytoscanError(Exception):
    """Base class for all phytoscan errors."""


class InvalidImage(PhytoscanError):
    """Raised when a raster buffer is empty, malformed, or undecodable."""


class InvalidInput(PhytoscanError):
    """Raised when severity inputs are out of range or of the wrong type."""


class InvalidUpload(PhytoscanError):
    """Raised when an upload is not an image or exceeds the size limit."""


class ClassificationError(PhytoscanError):
    """Raised when the external classifier fails or returns a bad payload.

    Wraps the original exception so the caller can report the failure
    without losing the underlying cause.

    Attributes:
        original_error: The underlying exception, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        self.original_error = original_error
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message)


__all__ = [
    "PhytoscanError",
    "InvalidImage",
    "InvalidInput",
    "InvalidUpload",
    "ClassificationError",
]

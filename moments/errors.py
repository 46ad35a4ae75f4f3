"""Error types shared by the storage uploader, the journal API client and the
publish flow.

Callers catch :class:`AppError` to surface a single message to the user; the
subclasses carry the details needed for diagnostics.
"""
from __future__ import annotations


class AppError(Exception):
    """Base class for all errors raised by this package."""


class NetworkError(AppError):
    """No response was received (DNS, connect, timeout, reset...)."""

    def __init__(self, underlying: BaseException):
        super().__init__(f"Network request failed: {underlying}")
        self.underlying = underlying


class ServerError(AppError):
    """The remote end answered with a non-success status or envelope code."""

    def __init__(self, code: int, message: str):
        super().__init__(f"Server error {code}: {message}")
        self.code = code
        self.message = message


class DecodingError(AppError):
    """A response body could not be parsed into the expected model."""

    def __init__(self, underlying: BaseException):
        super().__init__(f"Failed to decode response: {underlying}")
        self.underlying = underlying


class InvalidURLError(AppError):
    pass


class UnauthorizedError(AppError):
    pass


class NotFoundError(AppError):
    pass


class ImageDecodeError(AppError):
    """Input bytes are not a decodable image, or the image has zero area."""


class ValidationError(AppError):
    """A draft was rejected before any network call was made."""

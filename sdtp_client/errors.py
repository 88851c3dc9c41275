"""Client error types for SDTP clipboard server interactions."""

from __future__ import annotations


class SdtpClientError(Exception):
    """Base error for SDTP clipboard client failures."""


class SdtpConnectionError(SdtpClientError):
    """Network connection to the server failed."""


class SdtpTimeout(SdtpConnectionError):
    """Timeout while communicating with the server."""


class SdtpProtocolError(SdtpClientError):
    """Server answered with an ``SDTP-ERROR:`` response."""

    def __init__(self, message: str, clipboard: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.clipboard = clipboard


class SdtpEncodingError(SdtpClientError):
    """Text encoding name could not be resolved."""

    def __init__(self, encoding: str) -> None:
        super().__init__(f"Unknown text encoding: {encoding!r}")
        self.encoding = encoding


class SdtpConfigError(SdtpClientError):
    """Invalid client configuration value."""

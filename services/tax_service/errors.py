"""Error types for the tax service client."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for tax service client errors."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    INVALID_URL = "invalid_url"
    PARSE = "parse"
    SERIALIZATION = "serialization"
    NOT_CONFIGURED = "not_configured"


class TaxServiceClientError(Exception):
    """
    The single error kind returned by TaxServiceClient operations.

    The underlying exception, when there is one, is kept both as ``cause``
    and as ``__cause__`` so tracebacks chain to it.

    Attributes:
        code: Error code identifying the type of failure.
        message: Human-readable error message.
        cause: The original exception.
        status_code: HTTP status of the response, for parse failures.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize with an error code, message and optional cause."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.cause = cause
        self.status_code = status_code
        self.__cause__ = cause

    def __str__(self) -> str:
        """Return string representation of the error."""
        text = f"{self.code.value}: {self.message}"
        if self.cause is not None:
            text = f"{text} ({self.cause})"
        return text


def RequestTimeoutError(cause: BaseException) -> TaxServiceClientError:
    """Create a timeout error."""
    return TaxServiceClientError(ErrorCode.TIMEOUT, "Request timeout", cause=cause)


def NetworkError(cause: BaseException) -> TaxServiceClientError:
    """Create a network (I/O) error."""
    return TaxServiceClientError(ErrorCode.NETWORK, "Request failed", cause=cause)


def InvalidUrlError(cause: BaseException) -> TaxServiceClientError:
    """Create an error for a malformed destination URL."""
    return TaxServiceClientError(ErrorCode.INVALID_URL, "Invalid request URL", cause=cause)


def ParseError(cause: BaseException, status_code: int | None = None) -> TaxServiceClientError:
    """Create an error for a response that could not be decoded."""
    return TaxServiceClientError(
        ErrorCode.PARSE,
        "Failed to parse response",
        cause=cause,
        status_code=status_code,
    )


def SerializationError(cause: BaseException) -> TaxServiceClientError:
    """Create an error for a request body that could not be serialized."""
    return TaxServiceClientError(
        ErrorCode.SERIALIZATION, "Failed to serialize request", cause=cause
    )


def NotConfiguredError() -> TaxServiceClientError:
    """Create an error for calls made without URL and credentials."""
    return TaxServiceClientError(
        ErrorCode.NOT_CONFIGURED, "Tax service URL and credentials are not configured"
    )

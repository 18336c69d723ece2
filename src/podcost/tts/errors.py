"""Structured TTS exceptions.

Every failure raised out of the speech engine is a ``TTSError`` carrying a
machine-readable code, the provider it concerns (if any) and whether the
caller may retry it. The engine itself never retries.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Failure taxonomy for speech generation."""

    INVALID_INPUT = "INVALID_INPUT"
    COST_LIMIT_EXCEEDED = "COST_LIMIT_EXCEEDED"
    RATE_LIMIT = "RATE_LIMIT"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    AUTH_ERROR = "AUTH_ERROR"
    API_ERROR = "API_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    STORAGE_ERROR = "STORAGE_ERROR"


class TTSError(Exception):
    """Base exception for TTS-related errors."""

    code: ErrorCode = ErrorCode.API_ERROR
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retryable: bool | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.retryable = self.default_retryable if retryable is None else retryable
        self.status_code = status_code
        self.original_error = original_error

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "provider": self.provider,
            "retryable": self.retryable,
            "status_code": self.status_code,
        }


class TTSInvalidInputError(TTSError):
    """Malformed request, rejected before any external call."""

    code = ErrorCode.INVALID_INPUT


class TTSCostLimitError(TTSError):
    """Per-request or daily cost ceiling would be breached."""

    code = ErrorCode.COST_LIMIT_EXCEEDED


class TTSRateLimitError(TTSError):
    """Provider signaled throttling."""

    code = ErrorCode.RATE_LIMIT
    default_retryable = True


class TTSQuotaError(TTSError):
    """Provider billing or quota is exhausted."""

    code = ErrorCode.QUOTA_EXCEEDED


class TTSAuthError(TTSError):
    """Exception raised for authentication failures.

    This typically occurs when:
    - API key is missing or invalid
    - API key permissions are insufficient
    """

    code = ErrorCode.AUTH_ERROR


class TTSAPIError(TTSError):
    """Exception raised for generic provider failures.

    Retryable only when the provider answered with a 5xx status.
    """

    code = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retryable: bool | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        if retryable is None:
            retryable = status_code is not None and status_code >= 500
        super().__init__(message, provider, retryable, status_code, original_error)


class TTSNotImplementedError(TTSError):
    """Requested provider variant has no real implementation."""

    code = ErrorCode.NOT_IMPLEMENTED


class TTSStorageError(TTSError):
    """Blob upload or delete failed."""

    code = ErrorCode.STORAGE_ERROR
    default_retryable = True


def error_for_status(
    status_code: int | None,
    message: str,
    provider: str,
    error_code: str | None = None,
    original_error: Exception | None = None,
) -> TTSError:
    """Map a provider HTTP status to the matching ``TTSError``.

    Args:
        status_code: HTTP status returned by the provider, if any
        message: Human-readable error text
        provider: Provider name to tag the error with
        error_code: Provider-specific error code from the response body
        original_error: Underlying exception

    Returns:
        The structured error to raise
    """
    if status_code == 429:
        if error_code == "insufficient_quota":
            return TTSQuotaError(
                f"Quota exceeded: {message}", provider, None, status_code, original_error
            )
        return TTSRateLimitError(
            f"Rate limit exceeded: {message}", provider, None, status_code, original_error
        )
    if status_code == 400:
        return TTSInvalidInputError(
            f"Invalid request parameters: {message}",
            provider,
            None,
            status_code,
            original_error,
        )
    if status_code == 401:
        return TTSAuthError(
            f"Authentication failed: {message}", provider, None, status_code, original_error
        )
    return TTSAPIError(
        f"API call failed: {message}", provider, None, status_code, original_error
    )

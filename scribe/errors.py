"""Error taxonomy for the recording, upload and transcription pipeline."""

from enum import Enum


class ScribeError(Exception):
    """Base class for pipeline errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class PermissionDenied(ScribeError):
    """Raised when the platform refuses access to the audio input device."""

    def __init__(self, device: str | None = None, cause: Exception | None = None):
        self.device = device
        target = f" '{device}'" if device else ""
        super().__init__(f"Access to audio input device{target} was denied", cause)


class SizeLimitExceeded(ScribeError):
    """Raised when a recording or file is larger than the provider accepts."""

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        size_mb = size_bytes / (1024 * 1024)
        limit_mb = limit_bytes / (1024 * 1024)
        super().__init__(
            f"Audio file size ({size_mb:.1f}MB) exceeds the {limit_mb:.0f}MB limit"
        )


class UploadError(ScribeError):
    """Raised when the object store rejects a recording upload."""

    def __init__(self, object_name: str, message: str, cause: Exception | None = None):
        self.object_name = object_name
        super().__init__(f"Failed to upload '{object_name}': {message}", cause)


class UrlResolutionError(UploadError):
    """Raised when no fetchable URL can be produced for an uploaded object."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        ScribeError.__init__(self, f"Failed to get public URL for '{object_name}'", cause)
        self.object_name = object_name


class GatewayUnreachable(ScribeError):
    """Raised when the transcription endpoint cannot be reached or answers garbage."""


class ProviderError(ScribeError):
    """Raised when the speech-to-text provider call fails."""


class StepTimeout(ProviderError):
    """Raised when a bounded step does not finish in time."""

    def __init__(self, step: str, timeout: float):
        self.step = step
        self.timeout = timeout
        super().__init__(f"{step} timed out after {timeout:g}s")


class AudioFetchError(ProviderError):
    """Raised when the gateway cannot retrieve the uploaded audio."""


class AnalysisDegraded(ScribeError):
    """Raised when the optional analysis pass fails. Never fatal."""


class SessionExpired(ScribeError):
    """Raised when the user's credential is missing, invalid or expired."""


class PersistenceFailure(ScribeError):
    """Raised when a best-effort database write fails."""


class ErrorCategory(str, Enum):
    """User-facing error categories. Used for messaging only."""
    AUTH = "auth"
    CONNECTIVITY = "connectivity"
    SIZE_LIMIT = "size_limit"
    UPLOAD = "upload"
    PROVIDER = "provider"
    PERMISSION = "permission"
    UNKNOWN = "unknown"


_TYPE_CATEGORIES = [
    (SessionExpired, ErrorCategory.AUTH),
    (PermissionDenied, ErrorCategory.PERMISSION),
    (SizeLimitExceeded, ErrorCategory.SIZE_LIMIT),
    (UploadError, ErrorCategory.UPLOAD),
    (GatewayUnreachable, ErrorCategory.CONNECTIVITY),
    (ProviderError, ErrorCategory.PROVIDER),
]


def classify_error(error: BaseException) -> ErrorCategory:
    """Map an exception to the category used for the user notification."""
    for error_type, category in _TYPE_CATEGORIES:
        if isinstance(error, error_type):
            return category

    message = str(error).lower()
    if "cors" in message or "connection" in message or "network" in message:
        return ErrorCategory.CONNECTIVITY
    if "jwt" in message or "session" in message or "auth" in message:
        return ErrorCategory.AUTH
    if "timeout" in message or "timed out" in message:
        return ErrorCategory.PROVIDER
    if "limit" in message or "too large" in message:
        return ErrorCategory.SIZE_LIMIT
    return ErrorCategory.UNKNOWN


def format_error_message(error) -> str:
    """Extract a readable message from an exception, string or error mapping."""
    if isinstance(error, str):
        return error
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    if isinstance(error, dict):
        if isinstance(error.get("message"), str):
            return error["message"]
        inner = error.get("error")
        if isinstance(inner, str):
            return inner
        if isinstance(inner, dict) and isinstance(inner.get("message"), str):
            return inner["message"]
    return "Unknown error occurred"

"""User-facing notifications emitted by the capture controller and the pipeline."""

from dataclasses import dataclass

from scribe.config import MAX_AUDIO_SIZE_MB
from scribe.errors import ErrorCategory, classify_error, format_error_message


@dataclass(frozen=True)
class Notice:
    """A single toast-style notification."""
    title: str
    description: str
    variant: str = "default"  # "default" or "destructive"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


_CATEGORY_NOTICES = {
    ErrorCategory.AUTH: (
        "Session expired",
        "Please sign out and back in to refresh your session. Showing sample data instead.",
    ),
    ErrorCategory.CONNECTIVITY: (
        "Transcription service unreachable",
        "Could not reach the transcription service. Showing sample data instead.",
    ),
    ErrorCategory.UPLOAD: (
        "Upload failed",
        "Your recording could not be uploaded. Showing sample data instead.",
    ),
    ErrorCategory.PROVIDER: (
        "Transcription failed",
        "The transcription service could not process this recording. Showing sample data instead.",
    ),
    ErrorCategory.UNKNOWN: (
        "Processing error",
        "Something went wrong while processing your recording. Showing sample data instead.",
    ),
}


def notice_for_error(error: BaseException) -> Notice:
    """Build the notification for a terminal failure."""
    category = classify_error(error)
    if category == ErrorCategory.PERMISSION:
        return Notice("Permission denied", "Please allow microphone access to record", "destructive")
    if category == ErrorCategory.SIZE_LIMIT:
        return Notice(
            "Recording too large",
            f"{format_error_message(error)}. Please record a shorter meeting (max {MAX_AUDIO_SIZE_MB}MB).",
            "destructive",
        )
    title, description = _CATEGORY_NOTICES[category]
    detail = format_error_message(error)
    return Notice(title, f"{description} ({detail})", "destructive")

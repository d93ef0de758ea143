"""Processing pipeline - takes a finished recording to a delivered transcript.

Upload, remote transcription and result validation run in sequence. Any
failure after audio exists ends in a synthetic transcript, so the caller's
ready callback always receives text exactly once. Device-permission and
size-limit failures are terminal: there is nothing to transcribe, so only a
notice is emitted.
"""

import logging

from scribe.config import MAX_AUDIO_SIZE_BYTES
from scribe.database import get_access_token, insert_transcription, upload_recording
from scribe.errors import (
    PermissionDenied,
    ProviderError,
    SessionExpired,
    SizeLimitExceeded,
    classify_error,
    format_error_message,
)
from scribe.models import TranscriptionResult
from scribe.notices import Notice, notice_for_error
from scribe.processing.fallback import generate_fallback_transcript

logger = logging.getLogger(__name__)


def _transcribe(client, gateway, audio_bytes: bytes, content_type: str, user_id: str) -> TranscriptionResult:
    """Run the remote steps. Raises on any failure."""
    if not user_id:
        raise SessionExpired("User not authenticated")
    access_token = get_access_token(client)

    if len(audio_bytes) > MAX_AUDIO_SIZE_BYTES:
        raise SizeLimitExceeded(len(audio_bytes), MAX_AUDIO_SIZE_BYTES)

    ref = upload_recording(client, user_id, audio_bytes, content_type)
    result = gateway.process_audio(ref, access_token)

    if result.error:
        raise ProviderError(result.error)
    if not result.transcription or not result.transcription.strip():
        raise ProviderError("Transcription failed or returned empty results")
    return result


def _persist_fallback(client, user_id: str, result: TranscriptionResult):
    """Best-effort insert of a synthetic transcript. Failures are only logged."""
    if not user_id:
        return
    try:
        insert_transcription(client, user_id, result.transcription)
    except Exception:
        logger.warning("Could not persist fallback transcription", exc_info=True, extra={"user_id": user_id})


def process_recording(
    client,
    gateway,
    audio_bytes: bytes,
    content_type: str,
    user_id: str,
    on_transcription_ready,
    on_fallback=None,
    on_notice=None,
    fallback=generate_fallback_transcript,
) -> TranscriptionResult | None:
    """Upload a recording, transcribe it and deliver the text.

    Args:
        client: Supabase client signed in as the recording's owner
        gateway: GatewayClient (anything with process_audio(ref, access_token))
        audio_bytes: Finished recording
        content_type: Declared MIME type of the recording
        user_id: Owning user
        on_transcription_ready: callback(text), called exactly once unless the failure is terminal
        on_fallback: Optional callback(category) when synthetic text was delivered
        on_notice: Optional callback(Notice) for user-visible status
        fallback: Synthetic transcript factory

    Returns:
        The delivered TranscriptionResult, or None for permission/size failures.
    """
    notify = on_notice or (lambda notice: None)
    notify(Notice("Processing audio", "Sending to transcription service..."))
    logger.info("Processing recording", extra={"user_id": user_id, "size": len(audio_bytes), "content_type": content_type})

    try:
        result = _transcribe(client, gateway, audio_bytes, content_type, user_id)
    except (PermissionDenied, SizeLimitExceeded) as e:
        logger.warning("Recording rejected", extra={"reason": format_error_message(e)})
        notify(notice_for_error(e))
        return None
    except Exception as e:
        category = classify_error(e)
        logger.warning(
            "Transcription unavailable, delivering fallback transcript",
            exc_info=True,
            extra={"category": category.value},
        )
        result = TranscriptionResult(
            transcription=fallback(),
            error=format_error_message(e),
            message="Real transcription unavailable. Using sample data.",
        )
        on_transcription_ready(result.transcription)
        if on_fallback:
            on_fallback(category)
        notify(notice_for_error(e))
        _persist_fallback(client, user_id, result)
        return result

    on_transcription_ready(result.transcription)
    notify(Notice("Transcription complete", "Your recording has been processed successfully."))
    return result

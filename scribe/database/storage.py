"""Supabase storage operations for recorded audio."""

import logging
import time

from scribe.config import (
    AUDIO_BUCKET_NAME,
    CONTENT_TYPE_EXTENSIONS,
    DEFAULT_AUDIO_CONTENT_TYPE,
    DEFAULT_AUDIO_EXTENSION,
    RECORDING_FILE_PREFIX,
)
from scribe.errors import UploadError, UrlResolutionError
from scribe.models import UploadedAudioRef

logger = logging.getLogger(__name__)


def extension_for_content_type(content_type: str | None) -> str:
    """Infer a file extension from a declared MIME type."""
    mime_type = (content_type or "").lower()
    for fragment, extension in CONTENT_TYPE_EXTENSIONS:
        if fragment in mime_type:
            return extension
    return DEFAULT_AUDIO_EXTENSION


def make_recording_filename(content_type: str | None, now: float | None = None) -> str:
    """Build 'recording_<epochMillis><ext>' for a new upload."""
    millis = int((now if now is not None else time.time()) * 1000)
    return f"{RECORDING_FILE_PREFIX}{millis}{extension_for_content_type(content_type)}"


def upload_recording(
    client,
    user_id: str,
    audio_bytes: bytes,
    content_type: str | None,
    now: float | None = None,
) -> UploadedAudioRef:
    """Upload a finished recording under {user_id}/{file_name} and resolve its public URL.

    No retries: the pipeline decides what to do when the upload fails.
    """
    content_type = content_type or DEFAULT_AUDIO_CONTENT_TYPE
    file_name = make_recording_filename(content_type, now)
    path = f"{user_id}/{file_name}"
    bucket = client.storage.from_(AUDIO_BUCKET_NAME)

    logger.info("Uploading recording", extra={"bucket": AUDIO_BUCKET_NAME, "path": path, "size": len(audio_bytes)})
    try:
        bucket.upload(path, audio_bytes, {"content-type": content_type})
    except Exception as e:
        message = str(e)
        if "permission" in message.lower() or "policy" in message.lower():
            message = "Storage permission error: you don't have access to upload files. Please sign in again."
        raise UploadError(path, message, e) from e

    try:
        public_url = bucket.get_public_url(path)
    except Exception as e:
        raise UrlResolutionError(path, e) from e
    if not public_url:
        raise UrlResolutionError(path)

    return UploadedAudioRef(
        user_id=user_id,
        file_name=file_name,
        path=path,
        public_url=public_url,
        size=len(audio_bytes),
        content_type=content_type,
    )


def download_recording(client, path: str) -> bytes:
    """Download a stored recording with the client's credentials."""
    return client.storage.from_(AUDIO_BUCKET_NAME).download(path)

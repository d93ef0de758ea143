# Database layer - Supabase operations

from scribe.database.client import (
    create_supabase_client,
    sign_in,
    get_access_token,
    with_retry,
)

from scribe.database.transcriptions import (
    meeting_title,
    insert_transcription,
    get_user_transcriptions,
    get_transcription_by_id,
)

from scribe.database.storage import (
    extension_for_content_type,
    make_recording_filename,
    upload_recording,
    download_recording,
)

__all__ = [
    # Client
    "create_supabase_client",
    "sign_in",
    "get_access_token",
    "with_retry",
    # Transcriptions
    "meeting_title",
    "insert_transcription",
    "get_user_transcriptions",
    "get_transcription_by_id",
    # Storage
    "extension_for_content_type",
    "make_recording_filename",
    "upload_recording",
    "download_recording",
]

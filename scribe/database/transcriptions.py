"""Transcription record operations. This system only ever inserts records."""

from datetime import datetime

from scribe.config import TRANSCRIPTIONS_TABLE, UI_HISTORY_PAGE_SIZE
from scribe.database.client import with_retry


def meeting_title(now: datetime | None = None) -> str:
    """Title derived from the creation date."""
    now = now or datetime.now()
    return f"Meeting on {now.month}/{now.day}/{now.year}"


def insert_transcription(
    client,
    user_id: str,
    content: str,
    summary: str = None,
    action_items: list = None,
    now: datetime = None,
) -> dict:
    """Insert a new transcription record and return it."""
    data = {
        "user_id": user_id,
        "title": meeting_title(now),
        "content": content,
    }
    if summary:
        data["summary"] = summary
    if action_items:
        data["action_items"] = action_items

    result = client.from_(TRANSCRIPTIONS_TABLE).insert(data).execute()
    return result.data[0] if result.data else data


@with_retry()
def get_user_transcriptions(client, user_id: str, limit: int = UI_HISTORY_PAGE_SIZE) -> list:
    """Get a user's transcriptions, newest first."""
    result = (
        client.from_(TRANSCRIPTIONS_TABLE)
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return result.data or []


@with_retry()
def get_transcription_by_id(client, transcription_id: str) -> dict:
    """Get a single transcription by ID."""
    result = client.from_(TRANSCRIPTIONS_TABLE).select("*").eq("id", transcription_id).single().execute()
    return result.data

"""Configuration constants and environment settings."""

import os
from collections.abc import Mapping

from pydantic import BaseModel

# Storage and persistence
AUDIO_BUCKET_NAME = "audio-recordings"
TRANSCRIPTIONS_TABLE = "transcriptions"
RECORDING_FILE_PREFIX = "recording_"

# File size limits (the speech-to-text provider rejects files above 25MB)
MAX_AUDIO_SIZE_MB = 25
MAX_AUDIO_SIZE_BYTES = MAX_AUDIO_SIZE_MB * 1024 * 1024
SIZE_WARNING_RATIO = 0.8

# Capture settings
RECORDING_TIMESLICE_MS = 500
CAPTURE_CONSTRAINTS = {
    "echoCancellation": True,
    "noiseSuppression": True,
    "sampleRate": 16000,
    "channelCount": 1,
}

# Timeouts (seconds)
AUDIO_DOWNLOAD_TIMEOUT = 10
PROVIDER_CALL_TIMEOUT = 20
GATEWAY_REQUEST_TIMEOUT = 60

# Speech-to-text provider
TRANSCRIPTION_MODEL = "whisper-1"
TRANSCRIPTION_LANGUAGE = "en"
TRANSCRIPTION_RESPONSE_FORMAT = "json"

# Default container when the recorder's declared type is unknown
DEFAULT_AUDIO_EXTENSION = ".webm"
DEFAULT_AUDIO_CONTENT_TYPE = "audio/webm"

# Content type fragments mapped to file extensions, checked in order
CONTENT_TYPE_EXTENSIONS = [
    ("webm", ".webm"),
    ("mp3", ".mp3"),
    ("mpeg", ".mp3"),
    ("m4a", ".m4a"),
    ("wav", ".wav"),
    ("mp4", ".mp4"),
    ("ogg", ".ogg"),
]

# MIME type mapping for audio extensions
AUDIO_MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".mp4": "audio/mp4",
    ".mpeg": "audio/mpeg",
    ".mpga": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
}

# Extensions the transcription provider validates uploads against
PROVIDER_AUDIO_EXTENSIONS = {".flac", ".m4a", ".mp3", ".mp4", ".mpeg", ".mpga", ".ogg", ".wav", ".webm"}

# Gateway CORS policy
CORS_ALLOW_ORIGINS = ["*"]
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_ALLOW_METHODS = ["POST", "OPTIONS"]
CLIENT_INFO = "scribe-py/0.1.0"

# LLM Models by provider
LLM_MODELS = {
    "Gemini": ["gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.0-flash"],
    "OpenAI": ["gpt-4o", "gpt-4o-mini"],
    "Anthropic": ["claude-sonnet-4-20250514"],
}

# Default model for the analysis pass and Q&A
DEFAULT_MODEL = "gpt-4o-mini"

# Transcript excerpt sent to the LLM
MAX_PROMPT_TRANSCRIPT_CHARS = 12000

# UI Dimensions
UI_TRANSCRIPT_HEIGHT = 400
UI_TEXT_AREA_HEIGHT = 68
UI_HISTORY_PAGE_SIZE = 20


class SessionKey:
    """Session state key names to avoid typos."""
    USER_ID = "user_id"
    USER_EMAIL = "user_email"
    ACCESS_TOKEN = "access_token"
    SUPABASE_CLIENT = "supabase_client"
    TRANSCRIPTION = "transcription"
    TRANSCRIPTION_SUMMARY = "transcription_summary"
    TRANSCRIPTION_ACTIONS = "transcription_actions"
    USED_DEMO_DATA = "used_demo_data"
    SELECTED_TRANSCRIPTION = "selected_transcription"
    SELECTED_MODEL = "selected_model"
    CHAT_HISTORY = "chat_history"
    AI_SUMMARY = "ai_summary"
    AI_ACTIONS = "ai_actions"
    LAST_AUDIO_DIGEST = "last_audio_digest"


class Settings(BaseModel, frozen=True):
    """Runtime settings shared by the UI, the CLI and the gateway."""

    supabase_url: str = ""
    supabase_anon_key: str = ""
    openai_api_key: str = ""
    gemini_api_key: str = ""
    anthropic_api_key: str = ""
    gateway_url: str = ""
    analysis_model: str = DEFAULT_MODEL
    log_level: str = "INFO"
    gateway_host: str = "0.0.0.0"
    gateway_port: int = 8000

    @property
    def process_audio_url(self) -> str:
        """URL of the process-audio endpoint."""
        if self.gateway_url:
            return self.gateway_url
        return f"{self.supabase_url.rstrip('/')}/functions/v1/process-audio"

    @property
    def transcription_configured(self) -> bool:
        return bool(self.openai_api_key)


def load_settings(secrets: Mapping | None = None) -> Settings:
    """Loads settings from environment variables, falling back to a secrets mapping."""
    secrets = secrets if secrets is not None else {}

    def lookup(key: str, default: str = "") -> str:
        return os.environ.get(key, secrets.get(key, default))

    return Settings(
        supabase_url=lookup("SUPABASE_URL"),
        supabase_anon_key=lookup("SUPABASE_ANON_KEY"),
        openai_api_key=lookup("OPENAI_API_KEY"),
        gemini_api_key=lookup("GEMINI_API_KEY"),
        anthropic_api_key=lookup("ANTHROPIC_API_KEY"),
        gateway_url=lookup("SCRIBE_GATEWAY_URL"),
        analysis_model=lookup("SCRIBE_ANALYSIS_MODEL", DEFAULT_MODEL),
        log_level=lookup("SCRIBE_LOG_LEVEL", "INFO"),
        gateway_host=lookup("SCRIBE_GATEWAY_HOST", "0.0.0.0"),
        gateway_port=int(lookup("SCRIBE_GATEWAY_PORT", "8000")),
    )


# Analysis prompt - secondary pass run by the gateway after transcription
ANALYSIS_PROMPT = """You are analyzing the transcript of a meeting.

## TRANSCRIPT
{transcript}

## TASK
1. Write a concise summary (one or two short paragraphs) of what was discussed and decided.
2. List every concrete action item, naming the owner when the transcript makes it clear.

## OUTPUT FORMAT (JSON object only, no markdown)
{{"summary": "...", "action_items": ["Owner: task", "..."]}}

Output valid JSON only."""

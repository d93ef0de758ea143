"""OpenAI Whisper implementation of the speech-to-text provider."""

import logging

from openai import OpenAI, OpenAIError

from scribe.config import (
    PROVIDER_CALL_TIMEOUT,
    TRANSCRIPTION_LANGUAGE,
    TRANSCRIPTION_MODEL,
    TRANSCRIPTION_RESPONSE_FORMAT,
)
from scribe.errors import ProviderError

logger = logging.getLogger(__name__)


class WhisperTranscriber:
    """Submits audio to the OpenAI transcription endpoint."""

    def __init__(
        self,
        client: OpenAI,
        model: str = TRANSCRIPTION_MODEL,
        language: str = TRANSCRIPTION_LANGUAGE,
        response_format: str = TRANSCRIPTION_RESPONSE_FORMAT,
        timeout: float = PROVIDER_CALL_TIMEOUT,
    ):
        self._client = client
        self._model = model
        self._language = language
        self._response_format = response_format
        self._timeout = timeout

    def transcribe(self, audio_data: bytes, file_name: str, content_type: str) -> str:
        """
        Transcribes audio data and returns plain text.

        The provider validates uploads by file extension, so `file_name`
        must already carry an accepted extension.
        """
        try:
            response = self._client.audio.transcriptions.create(
                model=self._model,
                file=(file_name, audio_data, content_type),
                language=self._language,
                response_format=self._response_format,
                timeout=self._timeout,
            )
        except OpenAIError as e:
            logger.exception("Transcription provider call failed")
            raise ProviderError(f"Transcription failed: {e}", e) from e

        text = response if isinstance(response, str) else getattr(response, "text", None)
        if not isinstance(text, str) or not text.strip():
            raise ProviderError("Invalid response from transcription provider: no text")

        logger.info("Audio transcription successful", extra={"characters": len(text)})
        return text.strip()

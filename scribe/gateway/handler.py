"""Transcription gateway - brokers between stored audio and the speech-to-text provider.

One invocation moves through:

    Received -> Validated -> AudioFetched -> Transcribed -> [Analyzed]
             -> Persisted (best effort) -> Responded

Validation, authentication and fetch failures short-circuit to Responded.
There is no retry inside one invocation. Every branch answers with a
well-formed body: either the transcription, or a synthetic transcript plus
`error` and `message` fields the client uses to trigger its own fallback.
"""

import logging
import os
from enum import Enum

import requests
from pydantic import ValidationError

from scribe.config import (
    AUDIO_DOWNLOAD_TIMEOUT,
    AUDIO_MIME_TYPES,
    MAX_AUDIO_SIZE_BYTES,
    PROVIDER_CALL_TIMEOUT,
)
from scribe.database import download_recording, insert_transcription
from scribe.errors import (
    AnalysisDegraded,
    AudioFetchError,
    PersistenceFailure,
    SessionExpired,
    SizeLimitExceeded,
    format_error_message,
)
from scribe.models import ProcessAudioRequest, TranscriptionResult
from scribe.processing.audio import call_with_timeout, normalize_audio_filename, sniff_audio_format
from scribe.processing.fallback import generate_fallback_transcript

logger = logging.getLogger(__name__)


class GatewayState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    AUDIO_FETCHED = "audio_fetched"
    TRANSCRIBED = "transcribed"
    ANALYZED = "analyzed"
    PERSISTED = "persisted"
    RESPONDED = "responded"


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "body"
    if first["type"] == "missing":
        return f"Missing required fields: {field}"
    return f"Invalid field '{field}': {first['msg']}"


class TranscriptionGateway:
    """Handles process-audio invocations.

    Args:
        transcriber: Provider with transcribe(audio, file_name, content_type), or None in demo mode
        client_factory: callable(access_token) returning a Supabase client acting as the caller
        analyzer: Optional callable(transcript) -> {"summary": str, "action_items": list}
        http: requests-compatible module or session used to fetch audio by URL
    """

    def __init__(
        self,
        transcriber,
        client_factory,
        analyzer=None,
        http=requests,
        download_timeout: float = AUDIO_DOWNLOAD_TIMEOUT,
        provider_timeout: float = PROVIDER_CALL_TIMEOUT,
        max_file_size: int = MAX_AUDIO_SIZE_BYTES,
        fallback=generate_fallback_transcript,
    ):
        self._transcriber = transcriber
        self._client_factory = client_factory
        self._analyzer = analyzer
        self._http = http
        self._download_timeout = download_timeout
        self._provider_timeout = provider_timeout
        self._max_file_size = max_file_size
        self._fallback = fallback

    def error_response(self, error: str, reason: str) -> dict:
        """Body for every failure branch: synthetic text plus the error marker."""
        logger.warning("Responding with fallback data", extra={"error": error, "state": GatewayState.RESPONDED.value})
        return TranscriptionResult(
            transcription=self._fallback(),
            error=error,
            message=f"Returned mock data due to {reason}",
        ).to_payload()

    def handle(self, payload: dict | None, authorization: str | None) -> dict:
        """Process one invocation. Never raises."""
        try:
            return self._handle(payload, authorization)
        except Exception as e:
            logger.exception("Uncaught error in process-audio")
            return self.error_response(f"Uncaught error: {format_error_message(e)}", "internal error")

    def _handle(self, payload: dict | None, authorization: str | None) -> dict:
        logger.info("process-audio invoked", extra={"state": GatewayState.RECEIVED.value})

        token = _bearer_token(authorization)
        if not token:
            return self.error_response("Missing Authorization header", "auth error")

        if not isinstance(payload, dict):
            return self.error_response("Invalid JSON in request body", "request parsing error")

        try:
            request = ProcessAudioRequest.model_validate(payload)
        except ValidationError as e:
            return self.error_response(_validation_message(e), "missing fields")

        logger.info(
            "Request data received",
            extra={
                "has_audio_url": bool(request.audio_url),
                "file_name": request.file_name,
                "file_size": request.file_size,
            },
        )

        if request.file_size is not None and request.file_size > self._max_file_size:
            error = SizeLimitExceeded(request.file_size, self._max_file_size)
            return self.error_response(str(error), "file size limit")

        if self._transcriber is None:
            logger.info("Transcription provider not configured, returning mock data")
            return self.error_response("Transcription provider not configured", "demo mode")

        try:
            client = self._authenticate(token, request.user_id)
        except SessionExpired as e:
            return self.error_response(f"Authentication failed: {e}", "auth error")
        logger.info("Request validated", extra={"state": GatewayState.VALIDATED.value})

        try:
            audio_data, observed_type = self._fetch_audio(client, request)
        except Exception as e:
            return self.error_response(f"Failed to download audio: {format_error_message(e)}", "download error")
        logger.info("Audio fetched", extra={"state": GatewayState.AUDIO_FETCHED.value, "size": len(audio_data)})

        # fileSize is optional and client-declared; the fetched bytes are what reach the provider
        if len(audio_data) > self._max_file_size:
            error = SizeLimitExceeded(len(audio_data), self._max_file_size)
            return self.error_response(str(error), "file size limit")

        # Unrecognized bytes fall back to the observed type, then to the uploaded name
        declared_type = observed_type or AUDIO_MIME_TYPES.get(os.path.splitext(request.file_name)[1].lower())
        extension, content_type = sniff_audio_format(audio_data, declared_type)
        file_name = normalize_audio_filename(request.file_name, extension)

        try:
            text = call_with_timeout(
                self._transcriber.transcribe,
                self._provider_timeout,
                "transcription",
                audio_data,
                file_name,
                content_type,
            )
        except Exception as e:
            return self.error_response(f"Transcription failed: {format_error_message(e)}", "transcription error")
        logger.info("Audio transcribed", extra={"state": GatewayState.TRANSCRIBED.value, "file_name": file_name})

        result = TranscriptionResult(transcription=text)
        self._analyze(result)
        self._persist(client, request.user_id, result)

        logger.info("Responding with transcription", extra={"state": GatewayState.RESPONDED.value})
        return result.to_payload()

    def _authenticate(self, token: str, user_id: str):
        """Resolve the caller from the bearer token and check it owns the request."""
        client = self._client_factory(token)
        try:
            response = client.auth.get_user(token)
        except Exception as e:
            raise SessionExpired(format_error_message(e), e) from e
        user = getattr(response, "user", None)
        if user is None:
            raise SessionExpired("Invalid or expired session")
        if user.id != user_id:
            raise SessionExpired("Session does not match the requested user")
        return client

    def _fetch_url(self, url: str) -> tuple[bytes, str | None]:
        response = self._http.get(url, timeout=self._download_timeout)
        response.raise_for_status()
        return response.content, response.headers.get("Content-Type")

    def _fetch_audio(self, client, request: ProcessAudioRequest) -> tuple[bytes, str | None]:
        """Pull the audio from storage as the caller, falling back to its public URL."""
        path = f"{request.user_id}/{request.file_name}"
        try:
            data = call_with_timeout(download_recording, self._download_timeout, "audio download", client, path)
            observed_type = None
        except Exception as e:
            logger.warning("Storage download failed, fetching by URL", extra={"path": path, "reason": str(e)})
            data, observed_type = call_with_timeout(
                self._fetch_url, self._download_timeout, "audio download", request.audio_url
            )

        if not data:
            raise AudioFetchError("Empty audio file")
        return data, observed_type

    def _analyze(self, result: TranscriptionResult):
        """Optional summary/action-items pass. Failure leaves the transcription alone."""
        if self._analyzer is None:
            return
        try:
            analysis = call_with_timeout(self._analyzer, self._provider_timeout, "analysis", result.transcription)
        except Exception as e:
            degraded = AnalysisDegraded(f"Analysis failed: {format_error_message(e)}", e)
            logger.warning(str(degraded))
            return
        result.summary = analysis.get("summary") or None
        result.action_items = analysis.get("action_items") or None
        logger.info("Transcript analyzed", extra={"state": GatewayState.ANALYZED.value})

    def _persist(self, client, user_id: str, result: TranscriptionResult):
        """Insert the transcript. The caller already has the text, so failure is only logged."""
        try:
            insert_transcription(client, user_id, result.transcription, result.summary, result.action_items)
        except Exception as e:
            failure = PersistenceFailure(f"Failed to persist transcription for user '{user_id}'", e)
            logger.warning(str(failure), exc_info=True)
            return
        logger.info("Transcription persisted", extra={"state": GatewayState.PERSISTED.value})

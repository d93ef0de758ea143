"""Client for the process-audio transcription endpoint."""

import logging

import requests

from scribe.config import CLIENT_INFO, GATEWAY_REQUEST_TIMEOUT
from scribe.errors import GatewayUnreachable, ProviderError, SessionExpired
from scribe.models import ProcessAudioRequest, TranscriptionResult, UploadedAudioRef

logger = logging.getLogger(__name__)


class GatewayClient:
    """Invokes the transcription gateway over HTTP."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout: float = GATEWAY_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._session = session or requests.Session()

    def process_audio(self, ref: UploadedAudioRef, access_token: str) -> TranscriptionResult:
        """Ask the gateway to transcribe an uploaded recording."""
        headers = {
            "Authorization": f"Bearer {access_token}",
            "x-client-info": CLIENT_INFO,
            "Content-Type": "application/json",
        }
        if self._api_key:
            headers["apikey"] = self._api_key

        payload = ProcessAudioRequest.from_ref(ref).to_payload()
        logger.info("Invoking process-audio", extra={"file_name": ref.file_name, "file_size": ref.size})

        try:
            response = self._session.post(self._url, json=payload, headers=headers, timeout=self._timeout)
        except requests.Timeout as e:
            raise ProviderError("The transcription service timed out. Please try again with a shorter recording", e) from e
        except requests.RequestException as e:
            raise GatewayUnreachable(f"Could not reach the transcription service: {e}", e) from e

        if response.status_code in (401, 403):
            raise SessionExpired("Authentication error: please sign out and back in to refresh your session")
        if not response.ok:
            raise GatewayUnreachable(f"Transcription service error {response.status_code}: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as e:
            raise GatewayUnreachable("Transcription service returned an invalid response", e) from e
        if not isinstance(body, dict):
            raise GatewayUnreachable("Transcription service returned an invalid response")

        return TranscriptionResult.model_validate(body)

# Gateway layer - process-audio service between storage and the speech-to-text provider

from scribe.gateway.handler import (
    GatewayState,
    TranscriptionGateway,
)

from scribe.gateway.provider import (
    WhisperTranscriber,
)

__all__ = [
    # Handler
    "GatewayState",
    "TranscriptionGateway",
    # Provider
    "WhisperTranscriber",
]

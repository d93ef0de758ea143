# Processing layer - audio helpers, fallback transcripts, gateway client, pipeline

from scribe.processing.audio import (
    sniff_audio_format,
    normalize_audio_filename,
    call_with_timeout,
)

from scribe.processing.fallback import (
    DEMO_TRANSCRIPT,
    generate_fallback_transcript,
)

from scribe.processing.gateway_client import (
    GatewayClient,
)

from scribe.processing.pipeline import (
    process_recording,
)

__all__ = [
    # Audio
    "sniff_audio_format",
    "normalize_audio_filename",
    "call_with_timeout",
    # Fallback
    "DEMO_TRANSCRIPT",
    "generate_fallback_transcript",
    # Gateway client
    "GatewayClient",
    # Pipeline
    "process_recording",
]

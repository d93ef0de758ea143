# Capture layer - microphone session and chunk accumulation
#
# Device backends live in scribe.capture.devices and are imported where they
# are used: sounddevice needs the PortAudio system library at import time.

from scribe.capture.base import AudioDevice

from scribe.capture.controller import (
    CaptureController,
    CaptureState,
    Recording,
)

__all__ = [
    "AudioDevice",
    "CaptureController",
    "CaptureState",
    "Recording",
]

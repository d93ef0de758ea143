"""Audio helpers - container detection, filename normalization and bounded calls."""

import os
import concurrent.futures

from scribe.config import (
    AUDIO_MIME_TYPES,
    DEFAULT_AUDIO_EXTENSION,
    PROVIDER_AUDIO_EXTENSIONS,
)
from scribe.database.storage import extension_for_content_type
from scribe.errors import StepTimeout


def _looks_like_mpeg_frame(data: bytes) -> bool:
    """MPEG audio frame sync: 11 set bits."""
    return len(data) >= 2 and data[0] == 0xFF and (data[1] & 0xE0) == 0xE0


def sniff_audio_format(data: bytes, declared_type: str | None = None) -> tuple[str, str]:
    """Detect the audio container from its leading bytes.

    Returns (extension, content_type). Falls back to the declared or observed
    content type when the bytes are not recognized.
    """
    header = data[:16]
    if header[:4] == b"RIFF" and header[8:12] == b"WAVE":
        ext = ".wav"
    elif header[:4] == b"\x1a\x45\xdf\xa3":
        ext = ".webm"
    elif header[:4] == b"OggS":
        ext = ".ogg"
    elif header[:4] == b"fLaC":
        ext = ".flac"
    elif header[:3] == b"ID3" or _looks_like_mpeg_frame(header):
        ext = ".mp3"
    elif header[4:8] == b"ftyp":
        # M4A brands mark audio-only MP4 containers
        brand = header[8:12]
        ext = ".m4a" if brand in (b"M4A ", b"M4B ") else ".mp4"
    else:
        ext = extension_for_content_type(declared_type) if declared_type else DEFAULT_AUDIO_EXTENSION

    return ext, AUDIO_MIME_TYPES.get(ext, "application/octet-stream")


def normalize_audio_filename(file_name: str, extension: str) -> str:
    """Replace a filename's extension with one the transcription provider accepts."""
    if extension not in PROVIDER_AUDIO_EXTENSIONS:
        extension = DEFAULT_AUDIO_EXTENSION
    stem, current = os.path.splitext(os.path.basename(file_name))
    if current.lower() == extension:
        return os.path.basename(file_name)
    return f"{stem or 'recording'}{extension}"


def call_with_timeout(func, timeout: float, step: str, *args, **kwargs):
    """Run a blocking call on a worker thread and stop waiting after `timeout` seconds.

    Raises StepTimeout when the call does not finish in time. The worker is
    abandoned, not interrupted.
    """
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"scribe-{step}")
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError as e:
        future.cancel()
        raise StepTimeout(step, timeout) from e
    finally:
        executor.shutdown(wait=False)

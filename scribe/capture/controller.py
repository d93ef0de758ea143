"""Capture controller - owns the microphone session and chunk accumulation."""

import concurrent.futures
import logging
import os
import tempfile
import threading
import time
from dataclasses import dataclass, field
from enum import Enum

from scribe.config import (
    CAPTURE_CONSTRAINTS,
    MAX_AUDIO_SIZE_BYTES,
    RECORDING_TIMESLICE_MS,
    SIZE_WARNING_RATIO,
)
from scribe.database.storage import extension_for_content_type
from scribe.errors import PermissionDenied
from scribe.notices import Notice, notice_for_error

logger = logging.getLogger(__name__)


@dataclass
class Recording:
    """A finished recording. Lives until the next recording starts or the controller closes."""
    chunks: list[bytes]
    mime_type: str
    blob: bytes
    duration_seconds: float
    preview_path: str | None = field(default=None)

    @property
    def size(self) -> int:
        """Size of the encoded file, which is what gets uploaded."""
        return len(self.blob)

    def create_preview(self) -> str:
        """Write the blob to a temp file for playback. Replaces any earlier preview."""
        self.release_preview()
        with tempfile.NamedTemporaryFile(delete=False, suffix=extension_for_content_type(self.mime_type)) as tmp:
            tmp.write(self.blob)
            self.preview_path = tmp.name
        return self.preview_path

    def release_preview(self):
        if self.preview_path and os.path.exists(self.preview_path):
            os.unlink(self.preview_path)
        self.preview_path = None

    def release(self):
        """Drop the audio data and delete the preview file."""
        self.release_preview()
        self.chunks = []
        self.blob = b""


class CaptureState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPING = "stopping"
    STOPPED = "stopped"


def _format_mb(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):.1f}MB"


class CaptureController:
    """Drives an audio device, tracks the recording size and hands finished recordings off.

    Args:
        device_factory: Callable returning a fresh AudioDevice per recording
        on_recording_ready: callback(Recording), run on the executor after stop()
        on_notice: callback(Notice) for user-visible status
        executor: Runs the handoff; defaults to a single worker thread
        max_bytes: Hard cap; the recording auto-stops when it is reached
        warning_ratio: Fraction of the cap that triggers the size warning
        timeslice_ms: Slice length requested from the device
        constraints: Device constraints (mono, 16kHz, echo cancellation, noise suppression)
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        device_factory,
        on_recording_ready=None,
        on_notice=None,
        executor: concurrent.futures.Executor | None = None,
        max_bytes: int = MAX_AUDIO_SIZE_BYTES,
        warning_ratio: float = SIZE_WARNING_RATIO,
        timeslice_ms: int = RECORDING_TIMESLICE_MS,
        constraints: dict | None = None,
        clock=time.monotonic,
    ):
        self._device_factory = device_factory
        self._on_recording_ready = on_recording_ready
        self._on_notice = on_notice
        self._executor = executor
        self._owns_executor = executor is None
        self._max_bytes = max_bytes
        self._warning_bytes = int(max_bytes * warning_ratio)
        self._timeslice_ms = timeslice_ms
        self._constraints = dict(constraints or CAPTURE_CONSTRAINTS)
        self._clock = clock

        self._lock = threading.RLock()
        self._state = CaptureState.IDLE
        self._device = None
        self._chunks: list[bytes] = []
        self._overhead = 0
        self._size = 0
        self._warned = False
        self._limit_reached = False
        self._started_at = None
        self._stopped_at = None
        self._recording: Recording | None = None
        self._pending = None

    # Properties

    @property
    def is_recording(self) -> bool:
        return self._state == CaptureState.RECORDING

    @property
    def estimated_size(self) -> int:
        return self._size

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return end - self._started_at

    @property
    def recording(self) -> Recording | None:
        return self._recording

    # Lifecycle

    def start(self):
        """Open the input device and begin accumulating slices.

        Raises PermissionDenied if the device cannot be opened.
        """
        with self._lock:
            if self._state in (CaptureState.RECORDING, CaptureState.STOPPING):
                return
            self._release_recording()
            self._chunks = []
            self._size = 0
            self._warned = False
            self._limit_reached = False
            self._stopped_at = None

            device = self._device_factory()
            try:
                device.open(self._constraints, self.handle_chunk, self.handle_device_error, self._timeslice_ms)
            except Exception as e:
                error = e if isinstance(e, PermissionDenied) else PermissionDenied(cause=e)
                logger.warning("Could not open audio input", extra={"reason": str(e)})
                self._notify(notice_for_error(error))
                if error is e:
                    raise
                raise error from e

            self._device = device
            self._overhead = getattr(device, "encoding_overhead", 0)
            self._state = CaptureState.RECORDING
            self._started_at = self._clock()

        logger.info("Recording started", extra={"mime_type": device.mime_type})
        self._notify(Notice("Recording started", "Your meeting is now being recorded"))

    def handle_chunk(self, data: bytes):
        """Accept one slice from the device."""
        if not data:
            return
        warn = False
        auto_stop = False
        with self._lock:
            if self._state not in (CaptureState.RECORDING, CaptureState.STOPPING) or self._limit_reached:
                return
            # The cap applies to the encoded file, header included
            if self._size + len(data) + self._overhead > self._max_bytes:
                self._limit_reached = True
                auto_stop = True
            else:
                self._chunks.append(data)
                self._size += len(data)
                if self._size + self._overhead >= self._max_bytes:
                    self._limit_reached = True
                    auto_stop = True
                elif self._size + self._overhead > self._warning_bytes and not self._warned:
                    self._warned = True
                    warn = True
            size = self._size

        if warn:
            self._notify(Notice(
                "Recording size warning",
                f"Recording is approaching the {_format_mb(self._max_bytes)} limit ({_format_mb(size)})",
            ))
        if auto_stop:
            logger.warning("Recording reached size limit", extra={"size": size, "limit": self._max_bytes})
            self._notify(Notice(
                "Recording stopped",
                f"Recording reached the {_format_mb(self._max_bytes)} limit. Processing shorter recording.",
                "destructive",
            ))
            self.stop()

    def handle_device_error(self, error: Exception):
        """The device stream died mid-recording.

        With audio captured, the partial recording is finalized and handed off
        like a normal stop. Without audio, the attempt ends here.
        """
        logger.error("Audio input failed while recording", extra={"reason": str(error)})
        with self._lock:
            if self._state != CaptureState.RECORDING:
                return
            has_audio = bool(self._chunks)

        if has_audio:
            self._notify(Notice("Recording interrupted", "The microphone stopped. Processing what was recorded."))
            self.stop()
            return

        with self._lock:
            device = self._device
            self._device = None
            self._state = CaptureState.STOPPED
            self._stopped_at = self._clock()
        device.close()
        self._notify(Notice("Recording error", "The microphone stopped before any audio was recorded.", "destructive"))

    def stop(self) -> Recording | None:
        """Finalize the recording and hand it off. Safe to call repeatedly."""
        with self._lock:
            if self._state != CaptureState.RECORDING:
                return None
            self._state = CaptureState.STOPPING
            device = self._device

        # Outside the lock: the device may flush its last slices through handle_chunk
        device.close()

        with self._lock:
            self._device = None
            self._stopped_at = self._clock()
            self._state = CaptureState.STOPPED
            chunks = self._chunks
            self._chunks = []
            duration = self._stopped_at - self._started_at

        if not chunks:
            logger.warning("Recording stopped with no audio")
            self._notify(Notice("Recording error", "No audio was recorded. Please try again.", "destructive"))
            return None

        self._release_recording()
        recording = Recording(
            chunks=chunks,
            mime_type=device.mime_type,
            blob=device.encode(chunks),
            duration_seconds=duration,
        )
        self._recording = recording
        logger.info(
            "Recording stopped",
            extra={"chunks": len(chunks), "size": recording.size, "duration_seconds": round(duration, 2)},
        )
        self._notify(Notice("Recording stopped", f"Processing your recording ({_format_mb(recording.size)})..."))
        self._hand_off(recording)
        return recording

    def wait_for_handoff(self, timeout: float | None = None):
        """Block until the last handoff finishes. Returns its result."""
        if self._pending is None:
            return None
        return self._pending.result(timeout=timeout)

    def close(self):
        """Stop any active recording and release every resource."""
        self.stop()
        self._release_recording()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    # Internals

    def _hand_off(self, recording: Recording):
        if not self._on_recording_ready:
            return
        if self._executor is None:
            self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="scribe-handoff")
        self._pending = self._executor.submit(self._on_recording_ready, recording)

    def _release_recording(self):
        if self._recording is not None:
            self._recording.release()
            self._recording = None

    def _notify(self, notice: Notice):
        if self._on_notice:
            self._on_notice(notice)

"""Audio input devices for the capture controller."""

import io
import logging
import queue
import threading

import numpy as np
import sounddevice as sd
import soundfile as sf

from scribe.capture.base import AudioDevice
from scribe.errors import PermissionDenied

logger = logging.getLogger(__name__)


class SoundDeviceInput(AudioDevice):
    """Local microphone via PortAudio. Records 16-bit PCM and finalizes to WAV."""

    mime_type = "audio/wav"
    encoding_overhead = 44

    def __init__(self, device: str | int | None = None):
        self._device = device
        self._stream = None
        self._queue: queue.Queue = queue.Queue()
        self._closed = threading.Event()
        self._pump_thread = None
        self._on_data = None
        self._on_error = None
        self._samplerate = 16000
        self._channels = 1

    def open(self, constraints: dict, on_data, on_error, timeslice_ms: int):
        self._samplerate = int(constraints.get("sampleRate", 16000))
        self._channels = int(constraints.get("channelCount", 1))
        self._on_data = on_data
        self._on_error = on_error
        if constraints.get("echoCancellation") or constraints.get("noiseSuppression"):
            logger.debug("PortAudio input has no echo cancellation or noise suppression; recording raw input")

        def callback(indata, frames, time_info, status):
            if status:
                # XRuns etc. are reported but recording continues
                logger.warning("Audio input status", extra={"status": str(status)})
            self._queue.put(indata.tobytes())

        try:
            self._stream = sd.InputStream(
                samplerate=self._samplerate,
                channels=self._channels,
                dtype="int16",
                blocksize=int(self._samplerate * timeslice_ms / 1000),
                callback=callback,
                device=self._device,
                finished_callback=self._stream_finished,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            raise PermissionDenied(str(self._device) if self._device is not None else None, e) from e

        self._pump_thread = threading.Thread(target=self._pump, name="scribe-capture", daemon=True)
        self._pump_thread.start()

    def _pump(self):
        while not self._closed.is_set():
            try:
                data = self._queue.get(timeout=0.1)
            except queue.Empty:
                continue
            self._on_data(data)

    def _stream_finished(self):
        if not self._closed.is_set() and self._on_error:
            self._on_error(RuntimeError("Audio input stream ended unexpectedly"))

    def close(self):
        if self._closed.is_set():
            return
        self._closed.set()
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
        # A close triggered from inside on_data runs on the pump thread itself
        if self._pump_thread is not None and self._pump_thread is not threading.current_thread():
            self._pump_thread.join()
            while True:
                try:
                    data = self._queue.get_nowait()
                except queue.Empty:
                    break
                self._on_data(data)

    def encode(self, chunks: list[bytes]) -> bytes:
        samples = np.frombuffer(b"".join(chunks), dtype=np.int16).reshape(-1, self._channels)
        buffer = io.BytesIO()
        sf.write(buffer, samples, self._samplerate, subtype="PCM_16", format="WAV")
        return buffer.getvalue()


def list_input_devices():
    """Return PortAudio's device listing."""
    return sd.query_devices()

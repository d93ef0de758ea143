"""Audio device interface used by the capture controller."""


class AudioDevice:
    """An audio source that delivers encoded slices to a callback.

    Implementations call `on_data(bytes)` once per timeslice and
    `on_error(exception)` if the stream dies while recording.
    """

    mime_type = "application/octet-stream"
    # Bytes encode() adds on top of the raw slices (container headers)
    encoding_overhead = 0

    def open(self, constraints: dict, on_data, on_error, timeslice_ms: int):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def encode(self, chunks: list[bytes]) -> bytes:
        """Join recorded slices into one file."""
        return b"".join(chunks)

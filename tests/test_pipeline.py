"""
Unit tests for the recording-to-transcript pipeline.
"""
from unittest.mock import MagicMock, patch

import pytest

from scribe.capture import CaptureController
from scribe.errors import ErrorCategory, GatewayUnreachable, UploadError
from scribe.gateway import TranscriptionGateway, WhisperTranscriber
from scribe.models import TranscriptionResult
from scribe.processing import GatewayClient
from scribe.processing.pipeline import process_recording

SYNTHETIC = "Sam: synthetic transcript"


@pytest.fixture
def gateway():
    gateway = MagicMock()
    gateway.process_audio.return_value = TranscriptionResult(transcription="hello world")
    return gateway


@pytest.fixture
def callbacks():
    return MagicMock()


def run(client, gateway, callbacks, notices, audio=b"audio-bytes", user_id="user-1"):
    return process_recording(
        client,
        gateway,
        audio,
        "audio/webm",
        user_id,
        on_transcription_ready=callbacks.ready,
        on_fallback=callbacks.fallback,
        on_notice=notices.append,
        fallback=lambda: SYNTHETIC,
    )


class TestSuccess:
    """Real transcription delivered."""

    def test_delivers_transcription_once(self, mock_supabase, gateway, callbacks, notices):
        result = run(mock_supabase, gateway, callbacks, notices)

        callbacks.ready.assert_called_once_with("hello world")
        callbacks.fallback.assert_not_called()
        assert result.transcription == "hello world"
        assert [n.title for n in notices] == ["Processing audio", "Transcription complete"]

    def test_uploads_then_invokes_gateway_with_session_token(self, mock_supabase, gateway, callbacks, notices):
        run(mock_supabase, gateway, callbacks, notices)

        mock_supabase.storage.from_.return_value.upload.assert_called_once()
        ref, token = gateway.process_audio.call_args[0]
        assert ref.user_id == "user-1"
        assert ref.path.startswith("user-1/recording_")
        assert token == "token-123"

    def test_client_does_not_insert_on_success(self, mock_supabase, gateway, callbacks, notices):
        run(mock_supabase, gateway, callbacks, notices)
        mock_supabase.from_.assert_not_called()

    def test_callback_error_does_not_cause_second_delivery(self, mock_supabase, gateway, callbacks, notices):
        callbacks.ready.side_effect = RuntimeError("ui crashed")

        with pytest.raises(RuntimeError):
            run(mock_supabase, gateway, callbacks, notices)
        assert callbacks.ready.call_count == 1


class TestFallback:
    """Every failure after audio exists still delivers text exactly once."""

    @pytest.mark.parametrize("setup,category", [
        (lambda client, gw: setattr(gw.process_audio, "side_effect", GatewayUnreachable("down")),
         ErrorCategory.CONNECTIVITY),
        (lambda client, gw: setattr(gw.process_audio, "return_value",
                                    TranscriptionResult(transcription="sample", error="Transcription failed")),
         ErrorCategory.PROVIDER),
        (lambda client, gw: setattr(gw.process_audio, "return_value", TranscriptionResult(transcription="  ")),
         ErrorCategory.PROVIDER),
        (lambda client, gw: setattr(client.storage.from_.return_value.upload, "side_effect", Exception("denied")),
         ErrorCategory.UPLOAD),
        (lambda client, gw: setattr(client.auth.get_session, "return_value", None),
         ErrorCategory.AUTH),
        (lambda client, gw: setattr(gw.process_audio, "side_effect", RuntimeError("weird")),
         ErrorCategory.UNKNOWN),
    ])
    def test_failure_delivers_synthetic_transcript(self, mock_supabase, gateway, callbacks, notices, setup, category):
        setup(mock_supabase, gateway)

        result = run(mock_supabase, gateway, callbacks, notices)

        callbacks.ready.assert_called_once_with(SYNTHETIC)
        callbacks.fallback.assert_called_once_with(category)
        assert result.degraded
        assert result.transcription == SYNTHETIC
        error_notices = [n for n in notices if n.is_error]
        assert len(error_notices) == 1

    def test_missing_user_is_auth_failure(self, mock_supabase, gateway, callbacks, notices):
        run(mock_supabase, gateway, callbacks, notices, user_id="")
        callbacks.fallback.assert_called_once_with(ErrorCategory.AUTH)
        gateway.process_audio.assert_not_called()

    def test_gateway_error_body_text_is_not_delivered(self, mock_supabase, gateway, callbacks, notices):
        gateway.process_audio.return_value = TranscriptionResult(transcription="gateway sample", error="demo")
        run(mock_supabase, gateway, callbacks, notices)
        callbacks.ready.assert_called_once_with(SYNTHETIC)

    def test_fallback_is_persisted(self, mock_supabase, gateway, callbacks, notices):
        gateway.process_audio.side_effect = GatewayUnreachable("down")
        run(mock_supabase, gateway, callbacks, notices)

        data = mock_supabase.from_.return_value.insert.call_args[0][0]
        assert data["content"] == SYNTHETIC
        assert data["user_id"] == "user-1"

    def test_persistence_failure_is_swallowed(self, mock_supabase, gateway, callbacks, notices):
        gateway.process_audio.side_effect = UploadError("p", "denied")
        mock_supabase.from_.return_value.insert.return_value.execute.side_effect = RuntimeError("db down")

        result = run(mock_supabase, gateway, callbacks, notices)

        assert result.transcription == SYNTHETIC
        callbacks.ready.assert_called_once()


class TestTerminalFailures:
    """Failures with nothing to transcribe."""

    @patch("scribe.processing.pipeline.MAX_AUDIO_SIZE_BYTES", 4)
    def test_oversize_recording(self, mock_supabase, gateway, callbacks, notices):
        result = run(mock_supabase, gateway, callbacks, notices, audio=b"12345")

        assert result is None
        callbacks.ready.assert_not_called()
        callbacks.fallback.assert_not_called()
        mock_supabase.storage.from_.return_value.upload.assert_not_called()
        assert notices[-1].title == "Recording too large"


class TestEndToEnd:
    """Capture controller feeding the pipeline."""

    def test_recording_is_transcribed_once(self, fake_device, sync_executor, mock_supabase, gateway, callbacks, notices):
        def on_recording_ready(recording):
            return process_recording(
                mock_supabase,
                gateway,
                recording.blob,
                recording.mime_type,
                "user-1",
                on_transcription_ready=callbacks.ready,
                on_notice=notices.append,
            )

        controller = CaptureController(
            lambda: fake_device,
            on_recording_ready=on_recording_ready,
            on_notice=notices.append,
            executor=sync_executor,
        )
        controller.start()
        fake_device.emit(b"chunk-1")
        fake_device.emit(b"chunk-2")
        controller.stop()

        result = controller.wait_for_handoff()
        callbacks.ready.assert_called_once_with("hello world")
        assert result.transcription == "hello world"
        uploaded = mock_supabase.storage.from_.return_value.upload.call_args[0]
        assert uploaded[1] == b"chunk-1chunk-2"
        assert uploaded[2] == {"content-type": "audio/webm"}

    def test_size_capped_recording_still_transcribes(self, fake_device, sync_executor, mock_supabase, gateway, callbacks, notices):
        controller = CaptureController(
            lambda: fake_device,
            on_recording_ready=lambda r: process_recording(
                mock_supabase, gateway, r.blob, r.mime_type, "user-1", callbacks.ready
            ),
            executor=sync_executor,
            max_bytes=10,
        )
        controller.start()
        fake_device.emit(b"x" * 6)
        fake_device.emit(b"x" * 6)

        assert not controller.is_recording
        callbacks.ready.assert_called_once_with("hello world")
        assert mock_supabase.storage.from_.return_value.upload.call_args[0][1] == b"x" * 6

    def test_three_chunks_through_gateway_and_provider(self, fake_device, sync_executor, mock_supabase, callbacks):
        openai_client = MagicMock()
        openai_client.audio.transcriptions.create.return_value = MagicMock(text="hello world")
        handler = TranscriptionGateway(WhisperTranscriber(openai_client), lambda token: mock_supabase)

        session = MagicMock()

        def post(url, json, headers, timeout):
            body = handler.handle(json, headers["Authorization"])
            return MagicMock(status_code=200, ok=True, json=MagicMock(return_value=body))

        session.post.side_effect = post
        gateway = GatewayClient("http://gateway/process-audio", session=session)

        controller = CaptureController(
            lambda: fake_device,
            on_recording_ready=lambda r: process_recording(
                mock_supabase, gateway, r.blob, r.mime_type, "user-1", callbacks.ready
            ),
            executor=sync_executor,
        )
        controller.start()
        for second in range(3):
            fake_device.emit(bytes([second]) * 16000)
        controller.stop()

        result = controller.wait_for_handoff()
        assert result.transcription == "hello world"
        callbacks.ready.assert_called_once_with("hello world")
        persisted = mock_supabase.from_.return_value.insert.call_args[0][0]
        assert persisted["content"] == "hello world"
        create_kwargs = openai_client.audio.transcriptions.create.call_args[1]
        assert create_kwargs["model"] == "whisper-1"
        assert create_kwargs["language"] == "en"

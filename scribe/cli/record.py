#!/usr/bin/env python3
"""
Record a meeting from the local microphone and transcribe it.

Examples:
  scribe-record --email me@example.com --out notes/standup.txt
  scribe-record --list-devices
"""

import argparse
import os
import sys
import threading
from pathlib import Path

from scribe.capture import CaptureController
from scribe.capture.devices import SoundDeviceInput, list_input_devices
from scribe.config import load_settings
from scribe.database import create_supabase_client, sign_in
from scribe.errors import PermissionDenied, SessionExpired
from scribe.logging_setup import setup_logging
from scribe.notices import Notice
from scribe.processing import GatewayClient, process_recording
from scribe.utils import format_seconds_to_timestamp, format_size


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="scribe-record",
        description="Record the microphone and transcribe the meeting.",
    )
    p.add_argument("--device", type=str, default=None,
                   help="Input device name/index (as in --list-devices).")
    p.add_argument("--list-devices", action="store_true", help="List input devices and exit.")
    p.add_argument("--email", type=str, default=os.environ.get("SCRIBE_EMAIL"),
                   help="Account email (default: $SCRIBE_EMAIL).")
    p.add_argument("--password", type=str, default=os.environ.get("SCRIBE_PASSWORD"),
                   help="Account password (default: $SCRIBE_PASSWORD).")
    p.add_argument("--out", type=Path, default=None,
                   help="Also write the transcript to this path (parent dirs are created).")
    p.add_argument("--log-level", type=str, default=None, help="Log level (default from settings).")
    return p.parse_args(argv)


def _device_arg(value: str | None):
    if value is not None and value.isdigit():
        return int(value)
    return value


def print_notice(notice: Notice):
    stream = sys.stderr if notice.is_error else sys.stdout
    print(f"[{notice.title}] {notice.description}", file=stream)


def record_and_transcribe(args: argparse.Namespace) -> int:
    settings = load_settings()
    client = create_supabase_client(settings)
    try:
        user_id, _ = sign_in(client, args.email, args.password)
    except SessionExpired as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    gateway = GatewayClient(settings.process_audio_url, api_key=settings.supabase_anon_key)
    delivered = {}

    def on_transcription_ready(text: str):
        delivered["text"] = text

    def on_fallback(category):
        delivered["fallback"] = category

    def on_recording_ready(recording):
        return process_recording(
            client,
            gateway,
            recording.blob,
            recording.mime_type,
            user_id,
            on_transcription_ready=on_transcription_ready,
            on_fallback=on_fallback,
            on_notice=print_notice,
        )

    controller = CaptureController(
        lambda: SoundDeviceInput(_device_arg(args.device)),
        on_recording_ready=on_recording_ready,
        on_notice=print_notice,
    )

    print("Press Enter to START recording…")
    input()
    try:
        controller.start()
    except PermissionDenied:
        return 2

    print("Recording… Press Enter to STOP.")
    stop_flag = threading.Event()

    def stopper():
        input()
        stop_flag.set()

    threading.Thread(target=stopper, daemon=True).start()
    # The controller may stop on its own at the size limit
    while controller.is_recording and not stop_flag.wait(0.2):
        pass

    try:
        recording = controller.stop() or controller.recording
        if recording is None:
            return 1
        print(
            f"Recorded {format_seconds_to_timestamp(recording.duration_seconds)}"
            f"  |  {format_size(recording.size)}"
        )
        controller.wait_for_handoff()
    finally:
        controller.close()

    text = delivered.get("text")
    if not text:
        return 1

    if "fallback" in delivered:
        print("[warn] Real transcription was unavailable; this is sample data.", file=sys.stderr)
    print()
    print(text)

    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")
        print(f"\nSaved {args.out}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level or load_settings().log_level)

    if args.list_devices:
        print(list_input_devices())
        return 0

    if not args.email or not args.password:
        print("[error] --email and --password (or SCRIBE_EMAIL/SCRIBE_PASSWORD) are required", file=sys.stderr)
        return 2

    return record_and_transcribe(args)


if __name__ == "__main__":
    raise SystemExit(main())

"""Command-line interface for the ElevenLabs client.

WHY: Quick terminal access to the most common operations (list voices
and models, synthesize a line of text to a file, transcribe a recording)
without writing a script, and a smoke test for an API key.

HOW: argparse with one subcommand per operation. Configuration is built
once here with ClientConfig.from_env() (explicit flags win over
ELEVENLABS_API_KEY / ELEVENLABS_BASE_URL and .env). Results go to stdout
or the requested file; status messages go to stderr.

RULES:
- Status output goes to stderr (not stdout)
- Any ElevenLabsError prints "Error: <message>" to stderr and exits 1
- tts --stream writes chunks to disk as they arrive
- tts --timestamps also writes {stem}-alignment.json next to the audio
- --verbose turns on DEBUG logging (request lines, never the API key)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from elevenlabs_client.api.client import ElevenLabsClient
from elevenlabs_client.api.errors import ElevenLabsError
from elevenlabs_client.api.models import TimestampChunk
from elevenlabs_client.config import DEFAULT_TIMEOUT_S, ClientConfig
from elevenlabs_client.endpoints.text_to_speech import DEFAULT_MODEL_ID, DEFAULT_OUTPUT_FORMAT

DEFAULT_STT_MODEL = "scribe_v1"


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _build_client(args: argparse.Namespace) -> ElevenLabsClient:
    config = ClientConfig.from_env(
        api_key=args.api_key,
        base_url=args.base_url,
        timeout=args.timeout,
    )
    return ElevenLabsClient(config)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_voices(client: ElevenLabsClient, args: argparse.Namespace) -> None:
    voices = (client.voices.list() or {}).get("voices", [])
    for voice in voices:
        print("{}\t{}\t{}".format(
            voice.get("voice_id", ""), voice.get("name", ""), voice.get("category", "")
        ))
    _status("{} voices".format(len(voices)))


def _cmd_models(client: ElevenLabsClient, args: argparse.Namespace) -> None:
    models = client.models.list() or []
    for model in models:
        print("{}\t{}".format(model.get("model_id", ""), model.get("name", "")))
    _status("{} models".format(len(models)))


def _cmd_tts(client: ElevenLabsClient, args: argparse.Namespace) -> None:
    output = Path(args.output)

    if args.timestamps:
        _tts_with_timestamps(client, args, output)
    elif args.stream:
        _status("Streaming audio to {}...".format(output))
        with open(output, "wb") as f:
            result = client.text_to_speech.stream(
                args.voice_id,
                args.text,
                f.write,
                model_id=args.model_id,
                output_format=args.output_format,
            )
        _status("Wrote {} chunks to {}".format(result.chunk_count, output))
    else:
        _status("Synthesizing...")
        audio = client.text_to_speech.convert(
            args.voice_id,
            args.text,
            model_id=args.model_id,
            output_format=args.output_format,
        )
        output.write_bytes(audio)
        _status("Wrote {} bytes to {}".format(len(audio), output))


def _tts_with_timestamps(
    client: ElevenLabsClient, args: argparse.Namespace, output: Path
) -> None:
    alignment: Dict[str, List[Any]] = {
        "characters": [],
        "character_start_times_seconds": [],
        "character_end_times_seconds": [],
    }

    _status("Streaming audio with timestamps to {}...".format(output))
    with open(output, "wb") as f:

        def on_object(obj: Dict[str, Any]) -> None:
            chunk = TimestampChunk.from_dict(obj)
            f.write(chunk.audio_bytes())
            if chunk.alignment:
                alignment["characters"].extend(chunk.alignment.characters)
                alignment["character_start_times_seconds"].extend(
                    chunk.alignment.character_start_times_seconds
                )
                alignment["character_end_times_seconds"].extend(
                    chunk.alignment.character_end_times_seconds
                )

        result = client.text_to_speech.stream_with_timestamps(
            args.voice_id,
            args.text,
            on_object,
            output_format=args.output_format,
            model_id=args.model_id,
        )

    alignment_path = output.with_name("{}-alignment.json".format(output.stem))
    alignment_path.write_text(json.dumps(alignment, indent=2), encoding="utf-8")
    _status("Wrote {} chunks to {} and alignment to {}".format(
        result.chunk_count, output, alignment_path
    ))


def _cmd_transcribe(client: ElevenLabsClient, args: argparse.Namespace) -> None:
    input_path = Path(args.input_file)
    if not input_path.is_file():
        raise FileNotFoundError("File not found: {}".format(input_path))

    _status("Uploading {}...".format(input_path.name))
    with open(input_path, "rb") as f:
        result = client.speech_to_text.create(
            args.model_id,
            file=f,
            filename=input_path.name,
            language_code=args.language,
            diarize=args.diarize,
        )

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print((result or {}).get("text", ""))


_COMMANDS = {
    "voices": _cmd_voices,
    "models": _cmd_models,
    "tts": _cmd_tts,
    "transcribe": _cmd_transcribe,
}


# ---------------------------------------------------------------------------
# Parser / entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Global: --api-key, --base-url, --timeout, --verbose
    - Subcommands: voices, models, tts, transcribe
    """
    parser = argparse.ArgumentParser(
        prog="elevenlabs_client",
        description="Call the ElevenLabs API from the command line.",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key (default: $ELEVENLABS_API_KEY or .env).",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="API base URL (default: $ELEVENLABS_BASE_URL or https://api.elevenlabs.io).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_S,
        help="Request timeout in seconds (default: %(default)s).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every request to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("voices", help="List the voices on this account.")
    subparsers.add_parser("models", help="List available models.")

    tts = subparsers.add_parser("tts", help="Synthesize text to an audio file.")
    tts.add_argument("voice_id", help="Voice ID to speak with.")
    tts.add_argument("text", help="Text to synthesize.")
    tts.add_argument("-o", "--output", required=True, help="Output audio file path.")
    tts.add_argument(
        "--model-id",
        default=DEFAULT_MODEL_ID,
        help="Model ID (default: %(default)s).",
    )
    tts.add_argument(
        "--output-format",
        default=DEFAULT_OUTPUT_FORMAT,
        help="Audio output format (default: %(default)s).",
    )
    mode = tts.add_mutually_exclusive_group()
    mode.add_argument(
        "--stream",
        action="store_true",
        help="Stream audio chunks to disk as they arrive.",
    )
    mode.add_argument(
        "--timestamps",
        action="store_true",
        help="Stream with character timing; also writes {stem}-alignment.json.",
    )

    transcribe = subparsers.add_parser("transcribe", help="Transcribe an audio/video file.")
    transcribe.add_argument("input_file", help="Path to the audio or video file.")
    transcribe.add_argument(
        "--model-id",
        default=DEFAULT_STT_MODEL,
        help="Speech-to-text model (default: %(default)s).",
    )
    transcribe.add_argument("--language", default=None, help="ISO 639 language code.")
    transcribe.add_argument(
        "--diarize",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Annotate which speaker is talking.",
    )
    transcribe.add_argument(
        "--json",
        action="store_true",
        help="Print the full JSON response instead of the text.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m elevenlabs_client``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        with _build_client(args) as client:
            _COMMANDS[args.command](client, args)
    except (ElevenLabsError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

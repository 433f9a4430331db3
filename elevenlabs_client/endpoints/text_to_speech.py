"""Text-to-speech endpoints: buffered, streamed, and timestamped synthesis.

WHY: These are the core synthesis calls. Each comes in a buffered form
(the whole MP3 at once) and a streamed form (chunks as they are
generated), with or without character-level timing.

HOW: convert() and stream() send a JSON body and receive audio bytes;
the with-timestamps variants receive JSON: one object for the buffered
call, newline-delimited objects for the stream.

RULES:
- stream() always sends output_format and model_id (API defaults made explicit)
- Optional arguments left as None are not sent
- Timestamp stream callbacks receive decoded dicts, not bytes
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from elevenlabs_client.api.models import StreamResult, compact
from elevenlabs_client.api.transport import AUDIO_ACCEPT, ChunkCallback, ObjectCallback
from elevenlabs_client.endpoints.base import BaseEndpoint

DEFAULT_MODEL_ID = "eleven_multilingual_v2"
DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"


class TextToSpeech(BaseEndpoint):
    """POST /v1/text-to-speech/{voice_id} and its streaming variants."""

    def convert(
        self,
        voice_id: str,
        text: str,
        model_id: Optional[str] = None,
        voice_settings: Optional[Dict[str, Any]] = None,
        output_format: Optional[str] = None,
        optimize_streaming: bool = False,
    ) -> bytes:
        """Synthesize text and return the complete audio file.

        Args:
            voice_id: Voice to speak with.
            text: Text to synthesize.
            model_id: e.g. "eleven_multilingual_v2".
            voice_settings: stability, similarity_boost, style, ...
            output_format: e.g. "mp3_44100_128" (query parameter).
            optimize_streaming: Ask for a chunked audio response.

        Returns:
            Audio bytes (MP3 unless output_format says otherwise).
        """
        body = compact([
            ("text", text),
            ("model_id", model_id),
            ("voice_settings", voice_settings),
        ])
        headers = {"Accept": AUDIO_ACCEPT} if optimize_streaming else None
        return self._http.post_binary(
            self._path("/v1/text-to-speech/{}", voice_id),
            json=body,
            params=[("output_format", output_format)],
            headers=headers,
        )

    def convert_with_timestamps(
        self,
        voice_id: str,
        text: str,
        enable_logging: Optional[bool] = None,
        optimize_streaming_latency: Optional[int] = None,
        output_format: Optional[str] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        """Synthesize text and return base64 audio plus character alignment.

        Extra keyword options (model_id, language_code, voice_settings, seed,
        previous_text, next_text, ...) are sent in the JSON body when not None.
        """
        return self._http.post(
            self._path("/v1/text-to-speech/{}/with-timestamps", voice_id),
            json=_timestamp_body(text, options),
            params=_timestamp_query(enable_logging, optimize_streaming_latency, output_format),
        )

    def stream(
        self,
        voice_id: str,
        text: str,
        on_chunk: ChunkCallback,
        model_id: Optional[str] = None,
        output_format: Optional[str] = None,
        voice_settings: Optional[Dict[str, Any]] = None,
    ) -> StreamResult:
        """Stream synthesized audio, calling on_chunk with each byte chunk."""
        body = compact([
            ("text", text),
            ("model_id", model_id or DEFAULT_MODEL_ID),
            ("voice_settings", voice_settings),
        ])
        return self._http.post_streaming(
            self._path("/v1/text-to-speech/{}/stream", voice_id),
            on_chunk,
            json=body,
            params=[("output_format", output_format or DEFAULT_OUTPUT_FORMAT)],
        )

    def stream_with_timestamps(
        self,
        voice_id: str,
        text: str,
        on_object: ObjectCallback,
        enable_logging: Optional[bool] = None,
        optimize_streaming_latency: Optional[int] = None,
        output_format: Optional[str] = None,
        **options: Any,
    ) -> StreamResult:
        """Stream audio with timing; on_object receives each decoded JSON object.

        Each object holds audio_base64 plus alignment/normalized_alignment;
        see models.TimestampChunk for a typed view.
        """
        return self._http.post_streaming_with_timestamps(
            self._path("/v1/text-to-speech/{}/stream/with-timestamps", voice_id),
            on_object,
            json=_timestamp_body(text, options),
            params=_timestamp_query(enable_logging, optimize_streaming_latency, output_format),
        )

    text_to_speech = convert
    text_to_speech_with_timestamps = convert_with_timestamps
    text_to_speech_stream = stream
    text_to_speech_stream_with_timestamps = stream_with_timestamps


# Body keys accepted by the with-timestamps endpoints, in wire order.
_TIMESTAMP_BODY_KEYS: List[str] = [
    "model_id",
    "language_code",
    "voice_settings",
    "pronunciation_dictionary_locators",
    "seed",
    "previous_text",
    "next_text",
    "previous_request_ids",
    "next_request_ids",
    "apply_text_normalization",
    "apply_language_text_normalization",
    "use_pvc_as_ivc",
]


def _timestamp_body(text: str, options: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(options) - set(_TIMESTAMP_BODY_KEYS)
    if unknown:
        raise TypeError("Unexpected options: {}".format(", ".join(sorted(unknown))))
    return compact([("text", text)] + [(key, options.get(key)) for key in _TIMESTAMP_BODY_KEYS])


def _timestamp_query(
    enable_logging: Optional[bool],
    optimize_streaming_latency: Optional[int],
    output_format: Optional[str],
) -> list:
    return [
        ("enable_logging", enable_logging),
        ("optimize_streaming_latency", optimize_streaming_latency),
        ("output_format", output_format),
    ]

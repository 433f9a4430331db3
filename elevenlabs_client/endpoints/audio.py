"""Audio processing endpoints: isolation, sound effects, forced alignment.

HOW: Each takes a file (or a text prompt) and returns audio bytes or
JSON. isolate_stream() is the one multipart upload with a streamed
response.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Dict, Optional, Union

from elevenlabs_client.api.models import FormField, StreamResult, compact, file_part
from elevenlabs_client.api.transport import ChunkCallback
from elevenlabs_client.endpoints.base import BaseEndpoint


class AudioIsolation(BaseEndpoint):
    """POST /v1/audio-isolation removes background noise from speech."""

    def isolate(
        self,
        audio_file: Union[BinaryIO, bytes],
        filename: str,
        file_format: Optional[str] = None,
    ) -> bytes:
        parts = [file_part("audio", audio_file, filename), FormField("file_format", file_format)]
        return self._http.post_multipart("/v1/audio-isolation", parts, raw=True)

    def isolate_stream(
        self,
        audio_file: Union[BinaryIO, bytes],
        filename: str,
        on_chunk: ChunkCallback,
        file_format: Optional[str] = None,
    ) -> StreamResult:
        parts = [file_part("audio", audio_file, filename), FormField("file_format", file_format)]
        return self._http.post_multipart_streaming("/v1/audio-isolation/stream", parts, on_chunk)


class SoundGeneration(BaseEndpoint):
    """POST /v1/sound-generation turns a text prompt into a sound effect."""

    def generate(
        self,
        text: str,
        loop: Optional[bool] = None,
        duration_seconds: Optional[float] = None,
        prompt_influence: Optional[float] = None,
        output_format: Optional[str] = None,
    ) -> bytes:
        body = compact([
            ("text", text),
            ("loop", loop),
            ("duration_seconds", duration_seconds),
            ("prompt_influence", prompt_influence),
        ])
        return self._http.post_binary(
            "/v1/sound-generation",
            json=body,
            params=[("output_format", output_format)],
        )

    sound_generation = generate


class ForcedAlignment(BaseEndpoint):
    """POST /v1/forced-alignment aligns a transcript to audio."""

    def create(
        self,
        audio_file: Union[BinaryIO, bytes],
        filename: str,
        text: str,
        enabled_spooled_file: Optional[bool] = None,
    ) -> Dict[str, Any]:
        parts = [
            file_part("file", audio_file, filename),
            FormField("text", text),
            FormField("enabled_spooled_file", enabled_spooled_file),
        ]
        return self._http.post_multipart("/v1/forced-alignment", parts)

    align = create
    force_align = create

"""Text-to-dialogue endpoints: several voices in one audio file."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from elevenlabs_client.api.models import StreamResult, compact
from elevenlabs_client.api.transport import ChunkCallback
from elevenlabs_client.endpoints.base import BaseEndpoint
from elevenlabs_client.endpoints.text_to_speech import DEFAULT_OUTPUT_FORMAT


class TextToDialogue(BaseEndpoint):
    """POST /v1/text-to-dialogue and /v1/text-to-dialogue/stream.

    inputs is a list of {"text": ..., "voice_id": ...} dicts, spoken in order.
    """

    def convert(
        self,
        inputs: List[Dict[str, str]],
        model_id: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
        seed: Optional[int] = None,
    ) -> bytes:
        body = compact([
            ("inputs", inputs),
            ("model_id", model_id),
            ("settings", settings or None),
            ("seed", seed),
        ])
        return self._http.post_binary("/v1/text-to-dialogue", json=body)

    def stream(
        self,
        inputs: List[Dict[str, str]],
        on_chunk: ChunkCallback,
        model_id: Optional[str] = None,
        language_code: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
        pronunciation_dictionary_locators: Optional[List[Dict[str, str]]] = None,
        seed: Optional[int] = None,
        apply_text_normalization: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> StreamResult:
        body = compact([
            ("inputs", inputs),
            ("model_id", model_id),
            ("language_code", language_code),
            ("settings", settings),
            ("pronunciation_dictionary_locators", pronunciation_dictionary_locators),
            ("seed", seed),
            ("apply_text_normalization", apply_text_normalization),
        ])
        return self._http.post_streaming(
            "/v1/text-to-dialogue/stream",
            on_chunk,
            json=body,
            params=[("output_format", output_format or DEFAULT_OUTPUT_FORMAT)],
        )

    text_to_dialogue = convert
    text_to_dialogue_stream = stream

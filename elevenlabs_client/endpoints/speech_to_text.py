"""Speech-to-text endpoints: transcribe a file or URL, fetch a transcript.

WHY: Transcription accepts either an uploaded file or a cloud storage URL,
plus many optional tuning fields. Building that multipart form correctly
is the only logic here.

RULES:
- Exactly one of (file + filename) or cloud_storage_url is required
- enable_logging is a query parameter, everything else a form field
- webhook_metadata dicts are JSON-encoded; strings are sent as-is
"""

from __future__ import annotations

import json
from typing import Any, BinaryIO, Dict, List, Optional, Union

from elevenlabs_client.api.models import FormField, MultipartPart, file_part, form_fields
from elevenlabs_client.endpoints.base import BaseEndpoint

# Optional form fields, in wire order.
_FORM_KEYS: List[str] = [
    "language_code",
    "tag_audio_events",
    "num_speakers",
    "timestamps_granularity",
    "diarize",
    "diarization_threshold",
    "additional_formats",
    "file_format",
    "webhook",
    "webhook_id",
    "temperature",
    "seed",
    "use_multi_channel",
]


class SpeechToText(BaseEndpoint):
    """POST /v1/speech-to-text and GET /v1/speech-to-text/transcripts/{id}."""

    def create(
        self,
        model_id: str,
        file: Optional[Union[BinaryIO, bytes]] = None,
        filename: Optional[str] = None,
        cloud_storage_url: Optional[str] = None,
        enable_logging: Optional[bool] = None,
        webhook_metadata: Optional[Union[str, Dict[str, Any]]] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        """Transcribe an audio/video file.

        Args:
            model_id: e.g. "scribe_v1".
            file: Binary stream (or bytes) of the media file.
            filename: Name sent with the file part; required with file.
            cloud_storage_url: HTTPS URL to transcribe instead of a file.
            enable_logging: Query flag; False enables zero-retention mode.
            webhook_metadata: Dict (JSON-encoded) or string passed to the webhook.
            **options: Any of language_code, tag_audio_events, num_speakers,
                timestamps_granularity, diarize, diarization_threshold,
                additional_formats, file_format, webhook, webhook_id,
                temperature, seed, use_multi_channel.

        Returns:
            Transcript JSON, or the webhook acknowledgement.
        """
        unknown = set(options) - set(_FORM_KEYS)
        if unknown:
            raise TypeError("Unexpected options: {}".format(", ".join(sorted(unknown))))

        parts: List[MultipartPart] = [FormField("model_id", model_id)]
        if file is not None and filename:
            parts.append(file_part("file", file, filename))
        elif cloud_storage_url:
            parts.append(FormField("cloud_storage_url", cloud_storage_url))
        else:
            raise ValueError("Either file with filename or cloud_storage_url must be provided")

        parts.extend(form_fields((key, options.get(key)) for key in _FORM_KEYS))

        if webhook_metadata is not None:
            if isinstance(webhook_metadata, dict):
                webhook_metadata = json.dumps(webhook_metadata)
            parts.append(FormField("webhook_metadata", webhook_metadata))

        return self._http.post_multipart(
            "/v1/speech-to-text",
            parts,
            params=[("enable_logging", enable_logging)],
        )

    def get_transcript(self, transcription_id: str) -> Dict[str, Any]:
        return self._http.get(self._path("/v1/speech-to-text/transcripts/{}", transcription_id))

    transcribe = create
    get_transcription = get_transcript
    retrieve_transcript = get_transcript

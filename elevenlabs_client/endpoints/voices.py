"""Voice management endpoints: list, inspect, clone, edit, delete.

WHY: Voice IDs drive every synthesis call; applications need to list
them, clone new ones from samples, and check a voice is still usable.

HOW: Reads are JSON GETs. create() and edit() send multipart forms with
one "files" part per audio sample and one "labels[key]" field per label.

RULES:
- Samples are (filename, stream) pairs or bare streams; bare streams are
  sent as "sample_<n>.mp3"
- is_banned()/is_active() return False instead of raising on API errors
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Dict, List, Optional, Sequence, Tuple, Union

from elevenlabs_client.api.errors import APIError
from elevenlabs_client.api.models import FormField, MultipartPart, file_part
from elevenlabs_client.endpoints.base import BaseEndpoint

logger = logging.getLogger(__name__)

Sample = Union[BinaryIO, bytes, Tuple[str, Union[BinaryIO, bytes]]]


class Voices(BaseEndpoint):
    """/v1/voices resource group."""

    def get(self, voice_id: str) -> Dict[str, Any]:
        return self._http.get(self._path("/v1/voices/{}", voice_id))

    def list(self) -> Dict[str, Any]:
        return self._http.get("/v1/voices")

    def create(
        self,
        name: str,
        samples: Sequence[Sample] = (),
        description: Optional[str] = None,
        labels: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Clone a new voice from audio samples (POST /v1/voices/add)."""
        parts: List[MultipartPart] = [
            FormField("name", name),
            FormField("description", description or ""),
        ]
        parts.extend(_label_fields(labels))
        parts.extend(_sample_parts(samples))
        return self._http.post_multipart("/v1/voices/add", parts)

    def edit(
        self,
        voice_id: str,
        samples: Sequence[Sample] = (),
        name: Optional[str] = None,
        description: Optional[str] = None,
        labels: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Update a voice's name, description, labels, or samples."""
        parts: List[MultipartPart] = [
            FormField("name", name),
            FormField("description", description),
        ]
        parts.extend(_label_fields(labels))
        parts.extend(_sample_parts(samples))
        return self._http.post_multipart(self._path("/v1/voices/{}/edit", voice_id), parts)

    def delete(self, voice_id: str) -> Dict[str, Any]:
        return self._http.delete(self._path("/v1/voices/{}", voice_id))

    def is_banned(self, voice_id: str) -> bool:
        """True if the voice's safety_control is BAN; False if it cannot be fetched."""
        try:
            voice = self.get(voice_id)
        except APIError as exc:
            logger.info("Could not fetch voice %s (%s); treating as not banned", voice_id, exc)
            return False
        return (voice or {}).get("safety_control") == "BAN"

    def is_active(self, voice_id: str) -> bool:
        """True if the voice appears in the account's voice list."""
        try:
            voices = self.list()
        except APIError as exc:
            logger.info("Could not list voices (%s); treating %s as inactive", exc, voice_id)
            return False
        return any(v.get("voice_id") == voice_id for v in (voices or {}).get("voices", []))

    get_voice = get
    list_voices = list
    create_voice = create
    edit_voice = edit
    delete_voice = delete


def _label_fields(labels: Optional[Dict[str, Any]]) -> List[FormField]:
    if not labels:
        return []
    return [FormField("labels[{}]".format(key), str(value)) for key, value in labels.items()]


def _sample_parts(samples: Sequence[Sample]) -> List[MultipartPart]:
    parts: List[MultipartPart] = []
    for index, sample in enumerate(samples or ()):
        if isinstance(sample, tuple):
            filename, stream = sample
        else:
            filename, stream = "sample_{}.mp3".format(index + 1), sample
        parts.append(file_part("files", stream, filename))
    return parts

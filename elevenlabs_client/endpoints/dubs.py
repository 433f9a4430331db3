"""Dubbing endpoints: create jobs and edit the resulting dubbing resource.

WHY: Dubbing is a multi-step workflow: upload, poll the job, optionally
edit segments and speakers, render, then download per-language audio.
Each step is one API call.

RULES:
- create() uploads the file as multipart; target_lang is the first target
- Segment/speaker edits send only the fields the caller set
- get_dubbed_audio() returns bytes; everything else returns JSON
"""

from __future__ import annotations

from typing import Any, BinaryIO, Dict, List, Optional, Union

from elevenlabs_client.api.models import FormField, MultipartPart, compact, file_part
from elevenlabs_client.endpoints.base import BaseEndpoint


class Dubs(BaseEndpoint):
    """/v1/dubbing resource group."""

    def create(
        self,
        file_io: Union[BinaryIO, bytes],
        filename: str,
        target_languages: List[str],
        name: Optional[str] = None,
        mode: str = "automatic",
        num_speakers: int = 1,
        **options: Any,
    ) -> Dict[str, Any]:
        """Start a dubbing job (POST /v1/dubbing).

        Extra keyword options (drop_background_audio, use_profanity_filter,
        dubbing_studio, ...) are sent as form fields when not None.
        """
        if not target_languages:
            raise ValueError("target_languages must contain at least one language code")

        parts: List[MultipartPart] = [
            file_part("file", file_io, filename),
            FormField("mode", mode),
            FormField("name", name),
            FormField("target_lang", target_languages[0]),
            FormField("num_speakers", num_speakers),
        ]
        parts.extend(FormField(key, value) for key, value in options.items())
        return self._http.post_multipart("/v1/dubbing", parts)

    def get(self, dubbing_id: str) -> Dict[str, Any]:
        return self._http.get(self._path("/v1/dubbing/{}", dubbing_id))

    def list(
        self,
        dubbing_status: Optional[str] = None,
        filter_by_creator: Optional[str] = None,
        page_size: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._http.get(
            "/v1/dubbing",
            params=[
                ("dubbing_status", dubbing_status),
                ("filter_by_creator", filter_by_creator),
                ("page_size", page_size),
                ("cursor", cursor),
            ],
        )

    def delete(self, dubbing_id: str) -> Dict[str, Any]:
        return self._http.delete(self._path("/v1/dubbing/{}", dubbing_id))

    def get_resource(self, dubbing_id: str) -> Dict[str, Any]:
        return self._http.get(self._path("/v1/dubbing/resource/{}", dubbing_id))

    def create_segment(
        self,
        dubbing_id: str,
        speaker_id: str,
        start_time: float,
        end_time: float,
        text: Optional[str] = None,
        translations: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        body = compact([
            ("start_time", start_time),
            ("end_time", end_time),
            ("text", text),
            ("translations", translations),
        ])
        return self._http.post(
            self._path("/v1/dubbing/resource/{}/speaker/{}/segment", dubbing_id, speaker_id),
            json=body,
        )

    def update_segment(
        self,
        dubbing_id: str,
        segment_id: str,
        language: str,
        start_time: Optional[float] = None,
        end_time: Optional[float] = None,
        text: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = compact([("start_time", start_time), ("end_time", end_time), ("text", text)])
        return self._http.patch(
            self._path("/v1/dubbing/resource/{}/segment/{}/{}", dubbing_id, segment_id, language),
            json=body,
        )

    def delete_segment(self, dubbing_id: str, segment_id: str) -> Dict[str, Any]:
        return self._http.delete(
            self._path("/v1/dubbing/resource/{}/segment/{}", dubbing_id, segment_id)
        )

    def render_project(
        self,
        dubbing_id: str,
        language: str,
        render_type: str,
        normalize_volume: Optional[bool] = None,
    ) -> Dict[str, Any]:
        body = compact([("render_type", render_type), ("normalize_volume", normalize_volume)])
        return self._http.post(
            self._path("/v1/dubbing/resource/{}/render/{}", dubbing_id, language),
            json=body,
        )

    def get_dubbed_audio(self, dubbing_id: str, language_code: str) -> bytes:
        return self._http.get_binary(
            self._path("/v1/dubbing/{}/audio/{}", dubbing_id, language_code)
        )

    def get_dubbed_transcript(
        self,
        dubbing_id: str,
        language_code: str,
        format_type: Optional[str] = None,
    ) -> Any:
        """Transcript for one language; format_type is "srt" or "webvtt"."""
        return self._http.get(
            self._path("/v1/dubbing/{}/transcript/{}", dubbing_id, language_code),
            params=[("format_type", format_type)],
        )

    dubbed_audio = get_dubbed_audio
    dubbed_transcript = get_dubbed_transcript

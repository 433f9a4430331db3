"""Request descriptors, multipart parts, and streaming response dataclasses.

WHY: Every endpoint wrapper builds the same few things: an ordered set of
optional query parameters, a JSON body without unset keys, or a multipart
form mixing scalar fields with file streams. Typed dataclasses make these
structures explicit and keep the wrappers free of HTTP-library details.

HOW: FormField and FilePart describe multipart parts; RequestDescriptor
bundles one call's method, path, query, body, and header overrides.
build_query() and compact() are the explicit filter steps that drop unset
(None) values while preserving caller order. TimestampChunk parses one
object from a timestamp-annotated audio stream.

RULES:
- None values never reach the wire (query, JSON body, or form fields)
- Order of query parameters is the order the caller listed them in
- Booleans render as "true"/"false" in queries and form fields
- FilePart streams are passed through untouched; they are never read here
"""

from __future__ import annotations

import base64
import json
import os
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, Iterable, List, Mapping, Optional, Tuple, Union

# ---------------------------------------------------------------------------
# MIME types for uploaded files
# ---------------------------------------------------------------------------

MIME_TYPES: Dict[str, str] = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    ".pdf": "application/pdf",
    ".epub": "application/epub+zip",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".doc": "application/msword",
    ".txt": "text/plain",
    ".html": "text/html",
    ".htm": "text/html",
    ".md": "text/markdown",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def mime_for(filename: str) -> str:
    """Guess the upload content type from a filename's extension.

    RULES:
    - Case-insensitive, only the last extension counts ("a.tar.gz" → ".gz")
    - Unknown or missing extensions return application/octet-stream
    """
    ext = os.path.splitext(filename or "")[1].lower()
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


# ---------------------------------------------------------------------------
# Multipart parts
# ---------------------------------------------------------------------------


@dataclass
class FormField:
    """A scalar multipart field (text value)."""

    name: str
    value: Any


@dataclass
class FilePart:
    """A file multipart part backed by a binary stream.

    RULES:
    - stream is a readable binary file object or raw bytes
    - filename is sent in the Content-Disposition header
    - content_type defaults to mime_for(filename)
    """

    name: str
    stream: Union[BinaryIO, bytes]
    filename: str
    content_type: str = ""

    def __post_init__(self) -> None:
        if not self.content_type:
            self.content_type = mime_for(self.filename)


MultipartPart = Union[FormField, FilePart]


def file_part(
    name: str,
    stream: Union[BinaryIO, bytes],
    filename: str,
    content_type: Optional[str] = None,
) -> FilePart:
    return FilePart(name=name, stream=stream, filename=filename, content_type=content_type or "")


def form_fields(pairs: Iterable[Tuple[str, Any]]) -> List[FormField]:
    """Turn (name, value) pairs into FormFields, dropping unset values."""
    return [FormField(name, value) for name, value in pairs if value is not None]


# ---------------------------------------------------------------------------
# Query and body builders
# ---------------------------------------------------------------------------


def render_scalar(value: Any) -> str:
    """Render a query/form value the way the API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def build_query(
    pairs: Union[Iterable[Tuple[str, Any]], Mapping[str, Any], None],
) -> List[Tuple[str, str]]:
    """Filter and render an ordered set of optional query parameters.

    WHY: Most endpoints take a handful of optional query parameters. Only
    the ones the caller actually set may appear in the URL, and their
    order must be stable so requests are reproducible in tests and logs.

    HOW: Walks the pairs in order, skips None, expands lists and tuples to
    repeated keys, and renders each value with render_scalar().

    RULES:
    - None values (and None items inside lists) are dropped
    - Caller order is preserved; a mapping contributes in insertion order
    - Returns a list of (key, str) tuples, empty when nothing is set
    """
    if pairs is None:
        return []
    items = pairs.items() if isinstance(pairs, Mapping) else pairs

    query: List[Tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            query.extend((key, render_scalar(v)) for v in value if v is not None)
        else:
            query.append((key, render_scalar(value)))
    return query


def compact(pairs: Union[Iterable[Tuple[str, Any]], Mapping[str, Any]]) -> Dict[str, Any]:
    """Build a JSON body from (key, value) pairs, dropping None values."""
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    return {key: value for key, value in items if value is not None}


# ---------------------------------------------------------------------------
# Request / response value objects
# ---------------------------------------------------------------------------


@dataclass
class RequestDescriptor:
    """Everything needed to issue one API call.

    RULES:
    - json and multipart are mutually exclusive
    - params is already filtered by build_query() when built by the transport
    - headers are per-call overrides applied on top of the client defaults
    """

    method: str
    path: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    json: Any = None
    multipart: Optional[List[MultipartPart]] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if self.json is not None and self.multipart is not None:
            raise ValueError("A request cannot have both a JSON body and multipart parts")


@dataclass
class StreamResult:
    """Final status of a streaming call once the body is fully consumed."""

    status_code: int
    headers: Dict[str, str]
    chunk_count: int


@dataclass
class Alignment:
    """Character-level timing for a chunk of synthesized audio."""

    characters: List[str]
    character_start_times_seconds: List[float]
    character_end_times_seconds: List[float]

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional[Alignment]:
        if not data:
            return None
        return cls(
            characters=list(data.get("characters", [])),
            character_start_times_seconds=list(data.get("character_start_times_seconds", [])),
            character_end_times_seconds=list(data.get("character_end_times_seconds", [])),
        )


@dataclass
class TimestampChunk:
    """One object from a timestamp-annotated text-to-speech stream.

    WHY: The with-timestamps endpoints deliver base64 audio alongside the
    timing of every character. Callers writing the audio to disk or
    driving captions need both halves in typed form.

    RULES:
    - audio_base64 may be empty on the final alignment-only objects
    - alignment/normalized_alignment are None when the API omits them
    """

    audio_base64: str
    alignment: Optional[Alignment] = None
    normalized_alignment: Optional[Alignment] = None

    @classmethod
    def from_dict(cls, data: dict) -> TimestampChunk:
        return cls(
            audio_base64=data.get("audio_base64") or "",
            alignment=Alignment.from_dict(data.get("alignment")),
            normalized_alignment=Alignment.from_dict(data.get("normalized_alignment")),
        )

    def audio_bytes(self) -> bytes:
        if not self.audio_base64:
            return b""
        return base64.b64decode(self.audio_base64)

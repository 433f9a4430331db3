"""Synchronous HTTP transport shared by every endpoint wrapper.

WHY: Every API call needs the same plumbing: base URL, API-key header,
JSON or multipart encoding, response decoding, and status → error mapping.
Streaming endpoints additionally hand chunks to the caller as they arrive
instead of buffering whole audio files in memory.

HOW: HttpTransport wraps one httpx.Client. Each call is described by a
RequestDescriptor, turned into an httpx.Request by build_request(), and
sent exactly once. Buffered calls decode the body by content type;
streaming calls iterate the response and invoke a callback per raw chunk
(byte mode) or per decoded JSON line (timestamp mode). Non-2xx statuses go
through errors.handle_response(); httpx network failures become
TransportError / StreamingError.

RULES:
- Exactly one network call per invocation; no retries, no caching
- The xi-api-key header is on every request
- Files are handed to httpx as streams, never read here
- Streaming callbacks run on the calling thread, in arrival order
- On a non-2xx streaming response no callback is ever invoked
- The response is always closed, even when a callback raises
"""

from __future__ import annotations

import json as jsonlib
import logging
from collections.abc import Callable
from typing import Any, Dict, List, Optional, Tuple

import httpx

from elevenlabs_client.api.errors import (
    StreamingError,
    TransportError,
    handle_response,
    is_success,
)
from elevenlabs_client.api.models import (
    FilePart,
    FormField,
    MultipartPart,
    RequestDescriptor,
    StreamResult,
    build_query,
    render_scalar,
)
from elevenlabs_client.config import API_KEY_HEADER, ClientConfig

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]
ObjectCallback = Callable[[Any], None]

AUDIO_ACCEPT = "audio/mpeg"


class HttpTransport:
    """Blocking HTTP transport bound to one configured httpx.Client.

    WHY: Endpoint wrappers should only say *what* to call; this class owns
    *how* requests are built, sent, decoded, and mapped to errors.

    HOW: The httpx.Client carries base URL, default headers, and timeouts.
    An optional httpx.BaseTransport can be injected to replace networking
    entirely (tests use httpx.MockTransport).

    RULES:
    - Use as a context manager or call close() when done
    - Safe for sequential use; concurrent use is only as safe as httpx.Client
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                API_KEY_HEADER: config.api_key,
                "User-Agent": config.user_agent,
            },
            timeout=httpx.Timeout(config.timeout, connect=config.open_timeout),
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def describe(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        multipart: Optional[List[MultipartPart]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> RequestDescriptor:
        return RequestDescriptor(
            method=method,
            path=path,
            params=build_query(params),
            json=json,
            multipart=multipart,
            headers=dict(headers or {}),
        )

    def build_request(self, descriptor: RequestDescriptor) -> httpx.Request:
        """Turn a RequestDescriptor into an httpx.Request.

        RULES:
        - JSON bodies are sent with Content-Type: application/json
        - Multipart scalar fields go to data=, files to files= as
          (filename, stream, content_type) so httpx streams them
        - Per-call headers are applied last, but cannot drop the API key
        """
        kwargs: Dict[str, Any] = {}
        if descriptor.params:
            kwargs["params"] = descriptor.params
        if descriptor.json is not None:
            kwargs["json"] = descriptor.json
        if descriptor.multipart is not None:
            data, files = _split_multipart(descriptor.multipart)
            kwargs["data"] = data
            kwargs["files"] = files

        request = self._client.build_request(
            descriptor.method,
            descriptor.path,
            headers=descriptor.headers or None,
            **kwargs,
        )
        request.headers[API_KEY_HEADER] = self._config.api_key
        return request

    # ------------------------------------------------------------------
    # Buffered requests
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        multipart: Optional[List[MultipartPart]] = None,
        headers: Optional[Dict[str, str]] = None,
        raw: bool = False,
    ) -> Any:
        """Send one request and return the fully-buffered, decoded body.

        WHY: The common case for every non-streaming endpoint.

        HOW: Builds the request, sends it once, then either maps the error
        status or decodes the body by content type.

        RULES:
        - JSON responses → parsed dict/list
        - text/* responses → str
        - anything else (audio, zip) → bytes
        - empty body → None
        - raw=True → bytes, whatever the content type
        - Raises an APIError subclass on non-2xx, TransportError on network failure

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE).
            path: API path, e.g. "/v1/voices".
            params: Ordered (key, value) pairs or a mapping; None values dropped.
            json: JSON-serializable request body.
            multipart: FormField/FilePart list for multipart/form-data bodies.
            headers: Extra headers for this call.
            raw: Return the body bytes without decoding.

        Returns:
            The decoded response body.
        """
        descriptor = self.describe(
            method, path, params=params, json=json, multipart=multipart, headers=headers
        )
        request = self.build_request(descriptor)

        try:
            response = self._client.send(request)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", descriptor.method, descriptor.path, exc)
            raise TransportError(
                "{} {} failed: {}".format(descriptor.method, descriptor.path, exc)
            ) from exc

        logger.debug("%s %s -> %d", descriptor.method, descriptor.path, response.status_code)

        if not is_success(response.status_code):
            handle_response(response.status_code, response.text)

        if raw:
            return response.content
        return _decode_body(response, descriptor)

    def get(self, path: str, params: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return self.request("GET", path, params=params, headers=headers)

    def post(
        self,
        path: str,
        json: Any = None,
        params: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        return self.request("POST", path, params=params, json=json, headers=headers)

    def patch(self, path: str, json: Any = None, params: Any = None) -> Any:
        return self.request("PATCH", path, params=params, json=json)

    def delete(self, path: str, json: Any = None, params: Any = None) -> Any:
        return self.request("DELETE", path, params=params, json=json)

    def post_multipart(
        self,
        path: str,
        parts: List[MultipartPart],
        params: Any = None,
        raw: bool = False,
    ) -> Any:
        return self.request("POST", path, params=params, multipart=parts, raw=raw)

    def get_binary(self, path: str, params: Any = None) -> bytes:
        return self.request("GET", path, params=params, raw=True)

    def post_binary(
        self,
        path: str,
        json: Any = None,
        params: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> bytes:
        return self.request("POST", path, params=params, json=json, headers=headers, raw=True)

    # ------------------------------------------------------------------
    # Streaming requests
    # ------------------------------------------------------------------

    def stream(
        self,
        method: str,
        path: str,
        on_chunk: ChunkCallback,
        *,
        params: Any = None,
        json: Any = None,
        multipart: Optional[List[MultipartPart]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> StreamResult:
        """Send one request and hand each received body chunk to on_chunk.

        WHY: Synthesized audio can be played or written while it is still
        being generated; buffering it first defeats the purpose.

        HOW: Sends with stream=True. A non-2xx status is read in full and
        mapped to its error before any chunk is delivered. Otherwise every
        chunk httpx yields is passed to on_chunk as it arrives.

        RULES:
        - on_chunk is called once per chunk, in order, never concurrently
        - Chunks are not accumulated; the return value is only metadata
        - Non-2xx → mapped APIError, zero on_chunk calls
        - Failure before a response → TransportError
        - Failure while reading the body → StreamingError
        - Exceptions raised by on_chunk propagate unchanged

        Returns:
            StreamResult with the status, headers, and number of chunks.
        """
        count = 0
        with self._open_stream(method, path, params, json, multipart, headers) as response:
            try:
                for chunk in response.iter_bytes():
                    on_chunk(chunk)
                    count += 1
            except httpx.HTTPError as exc:
                logger.warning("Stream %s %s broke after %d chunks: %s", method, path, count, exc)
                raise StreamingError(
                    "Stream interrupted after {} chunks: {}".format(count, exc)
                ) from exc
            return StreamResult(response.status_code, dict(response.headers), count)

    def stream_json_lines(
        self,
        method: str,
        path: str,
        on_object: ObjectCallback,
        *,
        params: Any = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> StreamResult:
        """Stream a newline-delimited JSON body, one decoded object per callback.

        WHY: The timestamp endpoints stream one JSON object per line, and a
        line can be split across any number of network chunks.

        HOW: Raw bytes are appended to a buffer; every complete line is
        decoded and delivered, the remainder waits for the next chunk. A
        final line without a terminator is decoded when the stream ends.

        RULES:
        - Blank lines are skipped
        - Malformed lines are logged and skipped; the stream continues
        - Same error and ordering rules as stream()

        Returns:
            StreamResult whose chunk_count is the number of objects delivered.
        """
        decoder = _JsonLineDecoder(on_object)
        with self._open_stream(method, path, params, json, None, headers) as response:
            try:
                for chunk in response.iter_bytes():
                    decoder.feed(chunk)
            except httpx.HTTPError as exc:
                logger.warning(
                    "Stream %s %s broke after %d objects: %s", method, path, decoder.count, exc
                )
                raise StreamingError(
                    "Stream interrupted after {} objects: {}".format(decoder.count, exc)
                ) from exc
            decoder.flush()
            return StreamResult(response.status_code, dict(response.headers), decoder.count)

    def post_streaming(
        self,
        path: str,
        on_chunk: ChunkCallback,
        json: Any = None,
        params: Any = None,
    ) -> StreamResult:
        return self.stream(
            "POST", path, on_chunk, params=params, json=json, headers={"Accept": AUDIO_ACCEPT}
        )

    def get_streaming(self, path: str, on_chunk: ChunkCallback, params: Any = None) -> StreamResult:
        return self.stream("GET", path, on_chunk, params=params, headers={"Accept": AUDIO_ACCEPT})

    def post_streaming_with_timestamps(
        self,
        path: str,
        on_object: ObjectCallback,
        json: Any = None,
        params: Any = None,
    ) -> StreamResult:
        return self.stream_json_lines("POST", path, on_object, params=params, json=json)

    def post_multipart_streaming(
        self,
        path: str,
        parts: List[MultipartPart],
        on_chunk: ChunkCallback,
        params: Any = None,
    ) -> StreamResult:
        return self.stream("POST", path, on_chunk, params=params, multipart=parts)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open_stream(
        self,
        method: str,
        path: str,
        params: Any,
        json: Any,
        multipart: Optional[List[MultipartPart]],
        headers: Optional[Dict[str, str]],
    ) -> _StreamContext:
        descriptor = self.describe(
            method, path, params=params, json=json, multipart=multipart, headers=headers
        )
        request = self.build_request(descriptor)

        try:
            response = self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", descriptor.method, descriptor.path, exc)
            raise TransportError(
                "{} {} failed: {}".format(descriptor.method, descriptor.path, exc)
            ) from exc

        logger.debug(
            "%s %s -> %d (streaming)", descriptor.method, descriptor.path, response.status_code
        )
        return _StreamContext(response)


class _StreamContext:
    """Closes a streamed response on exit; raises the mapped error on entry for non-2xx."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    def __enter__(self) -> httpx.Response:
        response = self._response
        if is_success(response.status_code):
            return response
        try:
            try:
                response.read()
            except httpx.HTTPError as exc:
                raise StreamingError(
                    "Failed to read error body (status {}): {}".format(response.status_code, exc)
                ) from exc
            handle_response(response.status_code, response.text)
        finally:
            response.close()
        return response  # pragma: no cover - handle_response always raises here

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self._response.close()


class _JsonLineDecoder:
    """Incremental newline-delimited JSON decoder feeding a callback."""

    def __init__(self, on_object: ObjectCallback) -> None:
        self._on_object = on_object
        self._buffer = bytearray()
        self.count = 0

    def feed(self, chunk: bytes) -> None:
        # Only the new bytes are scanned; consumed lines are dropped once per chunk.
        scan_from = len(self._buffer)
        self._buffer += chunk
        start = 0
        end = self._buffer.find(b"\n", scan_from)
        while end != -1:
            self._emit(bytes(self._buffer[start:end]))
            start = end + 1
            end = self._buffer.find(b"\n", start)
        if start:
            del self._buffer[:start]

    def flush(self) -> None:
        line = bytes(self._buffer)
        self._buffer.clear()
        self._emit(line)

    def _emit(self, line: bytes) -> None:
        line = line.strip()
        if not line:
            return
        try:
            obj = jsonlib.loads(line)
        except ValueError:
            logger.warning("Skipping malformed line in timestamp stream: %r", line[:80])
            return
        self._on_object(obj)
        self.count += 1


# ---------------------------------------------------------------------------
# Module-private helpers
# ---------------------------------------------------------------------------


def _split_multipart(
    parts: List[MultipartPart],
) -> Tuple[Dict[str, List[str]], List[Tuple[str, Tuple[str, Any, str]]]]:
    """Split multipart parts into httpx data= and files= arguments.

    RULES:
    - Repeated scalar names become repeated form fields, in order
    - None-valued scalar fields are dropped
    - List values expand to one field per item
    """
    data: Dict[str, List[str]] = {}
    files: List[Tuple[str, Tuple[str, Any, str]]] = []
    for part in parts:
        if isinstance(part, FilePart):
            files.append((part.name, (part.filename, part.stream, part.content_type)))
        elif isinstance(part, FormField):
            if part.value is None:
                continue
            values = part.value if isinstance(part.value, (list, tuple)) else [part.value]
            data.setdefault(part.name, []).extend(render_scalar(v) for v in values)
        else:
            raise TypeError("Unsupported multipart part: {!r}".format(part))
    return data, files


def _decode_body(response: httpx.Response, descriptor: RequestDescriptor) -> Any:
    content = response.content
    if not content:
        return None

    content_type = response.headers.get("content-type", "").lower()
    if "json" in content_type:
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                "{} {} returned invalid JSON: {}".format(descriptor.method, descriptor.path, exc)
            ) from exc
    if content_type.startswith("text/"):
        return response.text
    return content

"""Typed error hierarchy and the HTTP status → error mapper.

WHY: Callers need to tell an invalid API key from an exhausted quota from a
malformed request without parsing strings. Every non-2xx response is turned
into exactly one typed exception carrying the status code and the most
readable message the API body offers.

HOW: ErrorKind is a closed enumeration. Two explicit tables map status codes
to kinds and kinds to exception classes; anything not in the status table
falls into the generic APIError. Message extraction understands the error
body shapes the API is known to return and degrades step by step to the raw
text or a fixed default.

RULES:
- 2xx bodies pass through handle_response() unchanged
- 400/401/402/403/404/422/429/503 map to their own class, nothing else
- Every other non-2xx status maps to APIError (exact class) with status_code
- Multiple validation entries are joined with "; " in their original order
- Mapping is pure: the same (status, body) always yields the same error
- Network-level failures are TransportError, never an APIError subclass
"""

from __future__ import annotations

import enum
import json
from typing import Any, Dict, Optional, Type

_RAW_MESSAGE_LIMIT = 200
_VALIDATION_JOINER = "; "


class ErrorKind(enum.Enum):
    """Closed set of HTTP error kinds the API can produce."""

    BAD_REQUEST = "bad_request"
    AUTHENTICATION = "authentication"
    PAYMENT_REQUIRED = "payment_required"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UNPROCESSABLE_ENTITY = "unprocessable_entity"
    RATE_LIMIT = "rate_limit"
    SERVICE_UNAVAILABLE = "service_unavailable"
    API = "api"


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------


class ElevenLabsError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ElevenLabsError, ValueError):
    """Raised when a ClientConfig cannot be built or fails validation."""


class TransportError(ElevenLabsError):
    """Raised when the request never produced an HTTP response.

    WHY: Connection refused, DNS failure, and timeouts are not API errors
    and must not be confused with them.

    RULES:
    - Always chained to the underlying httpx exception (raise ... from exc)
    """


class StreamingError(TransportError):
    """Raised when a chunked response breaks after the stream has started."""


class APIError(ElevenLabsError):
    """Raised when the API answers with a non-2xx status.

    WHY: Subclasses name the well-known failure modes; this class is the
    catch-all for every other status and the common base callers can catch.

    HOW: Carries the numeric status code, the extracted message and the
    raw body so callers can log or inspect it.

    RULES:
    - str(error) is the human-readable message only
    - status_code is always the status the server returned
    """

    kind = ErrorKind.API

    def __init__(self, message: str, status_code: int, body: Any = None) -> None:
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    def __repr__(self) -> str:
        return "{}(status_code={}, message={!r})".format(
            type(self).__name__, self.status_code, self.message
        )


class BadRequestError(APIError):
    kind = ErrorKind.BAD_REQUEST


ValidationError = BadRequestError


class AuthenticationError(APIError):
    kind = ErrorKind.AUTHENTICATION


class PaymentRequiredError(APIError):
    kind = ErrorKind.PAYMENT_REQUIRED


class ForbiddenError(APIError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(APIError):
    kind = ErrorKind.NOT_FOUND


class UnprocessableEntityError(APIError):
    kind = ErrorKind.UNPROCESSABLE_ENTITY


class RateLimitError(APIError):
    kind = ErrorKind.RATE_LIMIT


class ServiceUnavailableError(APIError):
    kind = ErrorKind.SERVICE_UNAVAILABLE


# ---------------------------------------------------------------------------
# Classification tables
# ---------------------------------------------------------------------------

STATUS_KINDS: Dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.AUTHENTICATION,
    402: ErrorKind.PAYMENT_REQUIRED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    422: ErrorKind.UNPROCESSABLE_ENTITY,
    429: ErrorKind.RATE_LIMIT,
    503: ErrorKind.SERVICE_UNAVAILABLE,
}

ERROR_CLASSES: Dict[ErrorKind, Type[APIError]] = {
    ErrorKind.BAD_REQUEST: BadRequestError,
    ErrorKind.AUTHENTICATION: AuthenticationError,
    ErrorKind.PAYMENT_REQUIRED: PaymentRequiredError,
    ErrorKind.FORBIDDEN: ForbiddenError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.UNPROCESSABLE_ENTITY: UnprocessableEntityError,
    ErrorKind.RATE_LIMIT: RateLimitError,
    ErrorKind.SERVICE_UNAVAILABLE: ServiceUnavailableError,
    ErrorKind.API: APIError,
}

DEFAULT_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.BAD_REQUEST: "Bad request - invalid parameters",
    ErrorKind.AUTHENTICATION: "Invalid API key or authentication failed",
    ErrorKind.PAYMENT_REQUIRED: "Payment required",
    ErrorKind.FORBIDDEN: "Access forbidden",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.UNPROCESSABLE_ENTITY: "Unprocessable entity - invalid data",
    ErrorKind.RATE_LIMIT: "Rate limit exceeded",
    ErrorKind.SERVICE_UNAVAILABLE: "Service unavailable",
    ErrorKind.API: "HTTP {status_code}",
}

_missing = [k for k in ErrorKind if k not in ERROR_CLASSES or k not in DEFAULT_MESSAGES]
if _missing:
    raise RuntimeError("Error kinds without a class or default message: {}".format(_missing))
del _missing


def is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def classify(status_code: int) -> Optional[ErrorKind]:
    """Return the ErrorKind for a status code, or None for 2xx."""
    if is_success(status_code):
        return None
    return STATUS_KINDS.get(status_code, ErrorKind.API)


# ---------------------------------------------------------------------------
# Message extraction
# ---------------------------------------------------------------------------


def extract_error_message(body: Any) -> str:
    """Pull a human-readable message out of an API error body.

    WHY: The API reports errors in several shapes. Validation failures come
    back as a list of {loc, msg, type} entries, most other errors as a
    plain string or a {message: ...} object under "detail".

    HOW: Parses the body as JSON when it is text; falls back to the raw
    text when that fails. Known shapes are tried in order, and anything
    unrecognised is dumped back to JSON so no information is lost.

    RULES:
    - None or empty bodies return ""
    - Non-JSON text is returned as-is, truncated to 200 chars + "..."
    - detail (str) → detail
    - detail (list) → "; ".join of each entry's msg
    - detail (dict) → detail["message"], else the dict as JSON
    - top-level "message", "error" or "errors" strings are used next
    - Any other JSON → the whole body as JSON
    """
    if body is None:
        return ""

    if isinstance(body, (bytes, bytearray)):
        body = bytes(body).decode("utf-8", errors="replace")

    if isinstance(body, str):
        text = body.strip()
        if not text:
            return ""
        try:
            parsed = json.loads(text)
        except ValueError:
            return _truncate(text)
        if isinstance(parsed, str):
            return parsed
    else:
        parsed = body

    if not parsed:
        return ""

    if isinstance(parsed, dict):
        message = _message_from_mapping(parsed)
        if message:
            return message

    return _dump(parsed)


def _message_from_mapping(data: Dict[str, Any]) -> str:
    detail = data.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list) and detail:
        return _join_validation_entries(detail)
    if isinstance(detail, dict) and detail:
        nested = detail.get("message")
        if isinstance(nested, str) and nested:
            return nested
        return _dump(detail)

    for key in ("message", "error", "errors"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _join_validation_entries(entries: list) -> str:
    parts = []
    for entry in entries:
        if isinstance(entry, dict) and entry.get("msg"):
            parts.append(str(entry["msg"]))
        elif isinstance(entry, str):
            parts.append(entry)
        else:
            parts.append(_dump(entry))
    return _VALIDATION_JOINER.join(parts)


def _dump(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def _truncate(text: str) -> str:
    if len(text) > _RAW_MESSAGE_LIMIT:
        return text[:_RAW_MESSAGE_LIMIT] + "..."
    return text


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


def error_for_status(status_code: int, body: Any = None) -> APIError:
    """Build (without raising) the typed error for a non-2xx response."""
    kind = classify(status_code)
    if kind is None:
        raise ValueError("Status {} is not an error status".format(status_code))

    message = extract_error_message(body)
    if not message:
        message = DEFAULT_MESSAGES[kind].format(status_code=status_code)
    return ERROR_CLASSES[kind](message, status_code, body)


def handle_response(status_code: int, body: Any = None) -> Any:
    """Return the body for 2xx statuses, raise the mapped error otherwise."""
    if is_success(status_code):
        return body
    raise error_for_status(status_code, body)

"""ElevenLabs API client: typed, synchronous access to the REST API.

WHY: Text-to-speech, voice, transcription, and dubbing features are all
exposed as plain HTTP endpoints. This package wraps them behind one client
object so callers deal with Python values and typed exceptions instead of
status codes and multipart encoding.

HOW: Three layers: configuration (ClientConfig), a shared HTTP transport
with a streaming variant and a status → error mapper (api/), and thin
endpoint wrappers (endpoints/) that translate arguments into transport
calls.

RULES:
- Every request goes through HttpTransport (no direct httpx use elsewhere)
- Every non-2xx response becomes one of the typed errors in api.errors
- The environment is only read by ClientConfig.from_env()
"""

__version__ = "0.1.0"

from elevenlabs_client.api.client import ElevenLabsClient  # noqa: E402
from elevenlabs_client.api.errors import (  # noqa: E402
    APIError,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ElevenLabsError,
    ErrorKind,
    ForbiddenError,
    NotFoundError,
    PaymentRequiredError,
    RateLimitError,
    ServiceUnavailableError,
    StreamingError,
    TransportError,
    UnprocessableEntityError,
    ValidationError,
)
from elevenlabs_client.config import ClientConfig  # noqa: E402

__all__ = [
    "APIError",
    "AuthenticationError",
    "BadRequestError",
    "ClientConfig",
    "ConfigurationError",
    "ElevenLabsClient",
    "ElevenLabsError",
    "ErrorKind",
    "ForbiddenError",
    "NotFoundError",
    "PaymentRequiredError",
    "RateLimitError",
    "ServiceUnavailableError",
    "StreamingError",
    "TransportError",
    "UnprocessableEntityError",
    "ValidationError",
]

"""HTTP layer: transport, streaming, and the status → error mapper.

WHY: Request construction, response decoding, and error typing are shared
by every endpoint; keeping them here leaves the endpoint wrappers as
plain argument-to-request translation.

HOW: HttpTransport (transport.py) sends requests through httpx and maps
failures with errors.handle_response(). Request/response value objects
live in models.py. ElevenLabsClient (client.py) ties a transport to the
endpoint wrappers.

RULES:
- All HTTP calls go through HttpTransport (no direct httpx usage elsewhere)
- Authentication is the xi-api-key header from ClientConfig
"""

from elevenlabs_client.api.client import ElevenLabsClient
from elevenlabs_client.api.transport import HttpTransport

__all__ = ["ElevenLabsClient", "HttpTransport"]

"""Base class shared by all endpoint wrappers.

WHY: Every resource group (voices, text-to-speech, dubbing, ...) is a thin
translation from method arguments to one transport call. A common base
keeps the constructor and path helpers in one place.

HOW: BaseEndpoint stores the HttpTransport it was given. Subclasses build
paths with _path() and call the transport's verbs directly.

To add a new resource group:
1. Create a module in endpoints/
2. Subclass BaseEndpoint and add one method per API operation
3. Declare aliases as plain class attributes (alias = method)
4. Export it in endpoints/__init__.py and attach it in ElevenLabsClient
"""

from __future__ import annotations

from urllib.parse import quote

from elevenlabs_client.api.transport import HttpTransport


class BaseEndpoint:
    """Holds the transport used by a resource group."""

    def __init__(self, http: HttpTransport) -> None:
        self._http = http

    @staticmethod
    def _path(template: str, *segments: object) -> str:
        """Format a path template with URL-escaped segments."""
        return template.format(*(quote(str(s), safe="") for s in segments))

"""Model listing endpoint."""

from __future__ import annotations

from typing import Any, Dict, List

from elevenlabs_client.endpoints.base import BaseEndpoint


class Models(BaseEndpoint):
    """GET /v1/models."""

    def list(self) -> List[Dict[str, Any]]:
        return self._http.get("/v1/models")

    list_models = list

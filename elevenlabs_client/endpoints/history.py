"""Generation history endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from elevenlabs_client.api.models import compact
from elevenlabs_client.endpoints.base import BaseEndpoint


class History(BaseEndpoint):
    """/v1/history: previously generated audio."""

    def list(
        self,
        page_size: Optional[int] = None,
        start_after_history_item_id: Optional[str] = None,
        voice_id: Optional[str] = None,
        search: Optional[str] = None,
        source: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._http.get(
            "/v1/history",
            params=[
                ("page_size", page_size),
                ("start_after_history_item_id", start_after_history_item_id),
                ("voice_id", voice_id),
                ("search", search),
                ("source", source),
            ],
        )

    def get(self, history_item_id: str) -> Dict[str, Any]:
        return self._http.get(self._path("/v1/history/{}", history_item_id))

    def delete(self, history_item_id: str) -> Dict[str, Any]:
        return self._http.delete(self._path("/v1/history/{}", history_item_id))

    def get_audio(self, history_item_id: str) -> bytes:
        return self._http.get_binary(self._path("/v1/history/{}/audio", history_item_id))

    def download(self, history_item_ids: List[str], output_format: Optional[str] = None) -> bytes:
        """One item → audio file bytes; several → zip archive bytes."""
        body = compact([("history_item_ids", history_item_ids), ("output_format", output_format)])
        return self._http.post_binary("/v1/history/download", json=body)

    get_history_item = get
    get_generated_items = list
    delete_history_item = delete
    get_audio_from_history_item = get_audio
    download_history_items = download

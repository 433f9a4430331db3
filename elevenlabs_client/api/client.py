"""Client facade bundling the transport and every endpoint wrapper.

WHY: Callers want one object (client.voices.list(),
client.text_to_speech.stream(...)) rather than wiring a transport into
each wrapper by hand.

HOW: ElevenLabsClient builds one HttpTransport from a ClientConfig and
hands it to one instance of each endpoint wrapper. It is a context
manager; exiting closes the underlying connection pool.

RULES:
- config is required; ElevenLabsClient.from_env() is the env-reading shortcut
- transport (optional) replaces httpx networking, e.g. httpx.MockTransport
- Wrappers share the client's single HttpTransport
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from elevenlabs_client.api.transport import HttpTransport
from elevenlabs_client.config import ClientConfig
from elevenlabs_client.endpoints import (
    AudioIsolation,
    Dubs,
    ForcedAlignment,
    History,
    Models,
    SoundGeneration,
    SpeechToText,
    TextToDialogue,
    TextToSpeech,
    Voices,
)


class ElevenLabsClient:
    """Synchronous ElevenLabs API client.

    Use as::

        config = ClientConfig.from_env()
        with ElevenLabsClient(config) as client:
            audio = client.text_to_speech.convert(voice_id, "Hello")
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config
        self.http = HttpTransport(config, transport=transport)

        self.text_to_speech = TextToSpeech(self.http)
        self.text_to_dialogue = TextToDialogue(self.http)
        self.voices = Voices(self.http)
        self.models = Models(self.http)
        self.speech_to_text = SpeechToText(self.http)
        self.audio_isolation = AudioIsolation(self.http)
        self.sound_generation = SoundGeneration(self.http)
        self.forced_alignment = ForcedAlignment(self.http)
        self.dubs = Dubs(self.http)
        self.history = History(self.http)

    @classmethod
    def from_env(
        cls,
        transport: Optional[httpx.BaseTransport] = None,
        **config_kwargs: Any,
    ) -> ElevenLabsClient:
        """Build a client from ELEVENLABS_API_KEY / ELEVENLABS_BASE_URL (and .env)."""
        return cls(ClientConfig.from_env(**config_kwargs), transport=transport)

    def __enter__(self) -> ElevenLabsClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self.http.close()

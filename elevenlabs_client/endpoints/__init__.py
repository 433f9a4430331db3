"""Endpoint wrappers, one class per API resource group.

WHY: Each resource group maps method arguments onto one HttpTransport
call. Keeping them separate from the transport means adding an endpoint
never touches request, streaming, or error-handling code.

RULES:
- Wrappers never import httpx; they only call HttpTransport verbs
- Optional arguments left as None never reach the wire
- Aliases are plain class attributes bound to the same function
"""

from __future__ import annotations

from elevenlabs_client.endpoints.audio import AudioIsolation, ForcedAlignment, SoundGeneration
from elevenlabs_client.endpoints.dubs import Dubs
from elevenlabs_client.endpoints.history import History
from elevenlabs_client.endpoints.models import Models
from elevenlabs_client.endpoints.speech_to_text import SpeechToText
from elevenlabs_client.endpoints.text_to_dialogue import TextToDialogue
from elevenlabs_client.endpoints.text_to_speech import TextToSpeech
from elevenlabs_client.endpoints.voices import Voices

__all__ = [
    "AudioIsolation",
    "Dubs",
    "ForcedAlignment",
    "History",
    "Models",
    "SoundGeneration",
    "SpeechToText",
    "TextToDialogue",
    "TextToSpeech",
    "Voices",
]

"""Tests for the endpoint wrappers and the client facade.

WHY: Each wrapper is a translation from Python arguments to one HTTP
call. A wrong path, method, body key, or query parameter is a silent
bug that only shows up against the live API.

HOW: Tests drive a full ElevenLabsClient over httpx.MockTransport (see
conftest.make_client), then assert on the single recorded request and
on the value returned to the caller.

RULES:
- One class per resource group
- Aliases are checked for identity with their target method
- Multipart bodies are inspected with conftest.parse_multipart
"""

from __future__ import annotations

import io
import json
from urllib.parse import parse_qsl

import httpx
import pytest

from conftest import Recorder, parse_multipart
from elevenlabs_client import ElevenLabsClient
from elevenlabs_client.api.errors import NotFoundError, ServiceUnavailableError
from elevenlabs_client.api.models import TimestampChunk
from elevenlabs_client.endpoints import (
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

AUDIO = b"ID3\x04\x00fake-mpeg-frames"


def _audio_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=AUDIO, headers={"content-type": "audio/mpeg"})


def _json_body(request: httpx.Request):
    return json.loads(request.content)


def _fields(parts):
    return [(p["name"], p["content"].decode()) for p in parts if p["filename"] is None]


def _files(parts):
    return [p for p in parts if p["filename"] is not None]


# ---------------------------------------------------------------------------
# Client facade
# ---------------------------------------------------------------------------


class TestClient:
    """ElevenLabsClient wires one transport into every wrapper."""

    def test_wrappers_share_transport(self, make_client):
        client = make_client(Recorder())
        wrappers = [
            client.text_to_speech,
            client.text_to_dialogue,
            client.voices,
            client.models,
            client.speech_to_text,
            client.audio_isolation,
            client.sound_generation,
            client.forced_alignment,
            client.dubs,
            client.history,
        ]
        assert all(w._http is client.http for w in wrappers)

    def test_context_manager_closes(self, config):
        with ElevenLabsClient(config, transport=httpx.MockTransport(Recorder())) as client:
            client.models.list()
        assert client.http._client.is_closed


# ---------------------------------------------------------------------------
# Text to speech
# ---------------------------------------------------------------------------


class TestTextToSpeech:
    """Buffered, streamed, and timestamped synthesis."""

    def test_convert(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        audio = client.text_to_speech.convert(
            "voice123", "Hello there", model_id="eleven_turbo_v2", output_format="mp3_22050_32"
        )

        request = recorder.last
        assert audio == AUDIO
        assert request.method == "POST"
        assert request.url.path == "/v1/text-to-speech/voice123"
        assert _json_body(request) == {"text": "Hello there", "model_id": "eleven_turbo_v2"}
        assert request.url.params.multi_items() == [("output_format", "mp3_22050_32")]

    def test_convert_sends_only_set_fields(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        client.text_to_speech.convert("v", "Hi")

        assert _json_body(recorder.last) == {"text": "Hi"}
        assert recorder.last.url.query == b""

    def test_convert_optimize_streaming_sets_accept(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        client.text_to_speech.convert("v", "Hi", optimize_streaming=True)

        assert recorder.last.headers["accept"] == "audio/mpeg"

    def test_voice_id_is_escaped(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        client.text_to_speech.convert("a/b c", "Hi")

        assert recorder.last.url.raw_path == b"/v1/text-to-speech/a%2Fb%20c"

    def test_stream_uses_defaults(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, content=iter([b"a", b"b"])))
        client = make_client(recorder)
        chunks = []

        result = client.text_to_speech.stream("v", "Hi", chunks.append)

        request = recorder.last
        assert chunks == [b"a", b"b"]
        assert result.chunk_count == 2
        assert request.url.path == "/v1/text-to-speech/v/stream"
        assert _json_body(request) == {"text": "Hi", "model_id": "eleven_multilingual_v2"}
        assert request.url.params["output_format"] == "mp3_44100_128"

    def test_convert_with_timestamps(self, make_client):
        payload = {"audio_base64": "AAA=", "alignment": {"characters": ["H"]}}
        recorder = Recorder(lambda request: httpx.Response(200, json=payload))
        client = make_client(recorder)

        result = client.text_to_speech.convert_with_timestamps(
            "v", "Hi", enable_logging=False, seed=42, model_id="m1"
        )

        request = recorder.last
        assert result == payload
        assert request.url.path == "/v1/text-to-speech/v/with-timestamps"
        assert _json_body(request) == {"text": "Hi", "model_id": "m1", "seed": 42}
        assert request.url.params.multi_items() == [("enable_logging", "false")]

    def test_unknown_timestamp_option_rejected_before_request(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)

        with pytest.raises(TypeError, match="bogus"):
            client.text_to_speech.convert_with_timestamps("v", "Hi", bogus=1)
        assert recorder.requests == []

    def test_stream_with_timestamps(self, make_client):
        lines = [
            {"audio_base64": "aGVs", "alignment": {"characters": ["h", "e", "l"]}},
            {"audio_base64": "bG8=", "alignment": None},
        ]
        raw = ("\n".join(json.dumps(line) for line in lines) + "\n").encode()
        recorder = Recorder(lambda request: httpx.Response(200, content=iter([raw[:10], raw[10:]])))
        client = make_client(recorder)
        objects = []

        result = client.text_to_speech.stream_with_timestamps(
            "v", "hello", objects.append, output_format="mp3_44100_64"
        )

        assert objects == lines
        assert result.chunk_count == 2
        assert recorder.last.url.path == "/v1/text-to-speech/v/stream/with-timestamps"
        assert recorder.last.url.params["output_format"] == "mp3_44100_64"
        audio = b"".join(TimestampChunk.from_dict(o).audio_bytes() for o in objects)
        assert audio == b"hello"

    def test_aliases(self):
        assert TextToSpeech.text_to_speech is TextToSpeech.convert
        assert TextToSpeech.text_to_speech_with_timestamps is TextToSpeech.convert_with_timestamps
        assert TextToSpeech.text_to_speech_stream is TextToSpeech.stream
        assert (
            TextToSpeech.text_to_speech_stream_with_timestamps
            is TextToSpeech.stream_with_timestamps
        )


class TestTimestampChunk:
    """Typed view of one timestamp stream object."""

    def test_from_dict(self):
        chunk = TimestampChunk.from_dict({
            "audio_base64": "aGk=",
            "alignment": {
                "characters": ["h", "i"],
                "character_start_times_seconds": [0.0, 0.1],
                "character_end_times_seconds": [0.1, 0.2],
            },
        })
        assert chunk.audio_bytes() == b"hi"
        assert chunk.alignment.characters == ["h", "i"]
        assert chunk.alignment.character_end_times_seconds == [0.1, 0.2]
        assert chunk.normalized_alignment is None

    def test_alignment_only_object(self):
        chunk = TimestampChunk.from_dict({"audio_base64": None})
        assert chunk.audio_bytes() == b""
        assert chunk.alignment is None


# ---------------------------------------------------------------------------
# Text to dialogue
# ---------------------------------------------------------------------------


class TestTextToDialogue:
    """Multi-voice synthesis."""

    INPUTS = [{"text": "Hi", "voice_id": "a"}, {"text": "Hello", "voice_id": "b"}]

    def test_convert_drops_empty_settings(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        audio = client.text_to_dialogue.convert(self.INPUTS, settings={}, seed=3)

        assert audio == AUDIO
        assert recorder.last.url.path == "/v1/text-to-dialogue"
        assert _json_body(recorder.last) == {"inputs": self.INPUTS, "seed": 3}

    def test_stream(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, content=iter([b"1", b"2", b"3"])))
        client = make_client(recorder)
        chunks = []

        client.text_to_dialogue.stream(self.INPUTS, chunks.append, language_code="en")

        assert chunks == [b"1", b"2", b"3"]
        assert recorder.last.url.path == "/v1/text-to-dialogue/stream"
        assert _json_body(recorder.last) == {"inputs": self.INPUTS, "language_code": "en"}
        assert recorder.last.url.params["output_format"] == "mp3_44100_128"

    def test_aliases(self):
        assert TextToDialogue.text_to_dialogue is TextToDialogue.convert
        assert TextToDialogue.text_to_dialogue_stream is TextToDialogue.stream


# ---------------------------------------------------------------------------
# Voices and models
# ---------------------------------------------------------------------------


class TestVoices:
    """Voice CRUD and status helpers."""

    def test_list_and_get(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, json={"voices": []}))
        client = make_client(recorder)

        assert client.voices.list() == {"voices": []}
        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/v1/voices"

        client.voices.get("v1")
        assert recorder.last.url.path == "/v1/voices/v1"

    def test_create_multipart(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, json={"voice_id": "new"}))
        client = make_client(recorder)

        result = client.voices.create(
            "Narrator",
            samples=[("take1.wav", io.BytesIO(b"wav-1")), io.BytesIO(b"mp3-2")],
            description="Warm",
            labels={"accent": "british", "age": 40},
        )

        parts = parse_multipart(recorder.last)
        files = _files(parts)
        assert result == {"voice_id": "new"}
        assert recorder.last.url.path == "/v1/voices/add"
        assert _fields(parts) == [
            ("name", "Narrator"),
            ("description", "Warm"),
            ("labels[accent]", "british"),
            ("labels[age]", "40"),
        ]
        assert [(f["name"], f["filename"], f["content"]) for f in files] == [
            ("files", "take1.wav", b"wav-1"),
            ("files", "sample_2.mp3", b"mp3-2"),
        ]
        assert files[0]["content_type"] == "audio/wav"

    def test_edit_sends_only_set_fields(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)

        client.voices.edit("v1", samples=[("s.mp3", b"mp3")], name="Renamed")

        parts = parse_multipart(recorder.last)
        assert recorder.last.url.path == "/v1/voices/v1/edit"
        assert _fields(parts) == [("name", "Renamed")]
        assert len(_files(parts)) == 1

    def test_delete(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)

        client.voices.delete("v1")

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/v1/voices/v1"

    def test_is_banned(self, make_client):
        client = make_client(lambda request: httpx.Response(200, json={"safety_control": "BAN"}))
        assert client.voices.is_banned("v1") is True

    def test_is_banned_false_on_api_error(self, make_client):
        client = make_client(lambda request: httpx.Response(404, json={"detail": "no"}))
        assert client.voices.is_banned("v1") is False

    def test_is_active(self, make_client):
        body = {"voices": [{"voice_id": "v1"}, {"voice_id": "v2"}]}
        client = make_client(lambda request: httpx.Response(200, json=body))
        assert client.voices.is_active("v2") is True
        assert client.voices.is_active("v3") is False

    def test_is_active_false_on_api_error(self, make_client):
        client = make_client(lambda request: httpx.Response(503, text=""))
        assert client.voices.is_active("v1") is False

    def test_other_methods_raise(self, make_client):
        client = make_client(lambda request: httpx.Response(404, json={"detail": "gone"}))
        with pytest.raises(NotFoundError):
            client.voices.get("v1")

    def test_aliases(self):
        assert Voices.get_voice is Voices.get
        assert Voices.list_voices is Voices.list
        assert Voices.create_voice is Voices.create
        assert Voices.edit_voice is Voices.edit
        assert Voices.delete_voice is Voices.delete


class TestModels:
    def test_list(self, make_client):
        models = [{"model_id": "eleven_multilingual_v2", "name": "Multilingual v2"}]
        recorder = Recorder(lambda request: httpx.Response(200, json=models))
        client = make_client(recorder)

        assert client.models.list() == models
        assert recorder.last.url.path == "/v1/models"
        assert Models.list_models is Models.list


# ---------------------------------------------------------------------------
# Speech to text
# ---------------------------------------------------------------------------


class TestSpeechToText:
    """Transcription uploads and transcript retrieval."""

    def test_create_with_file(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, json={"text": "hi"}))
        client = make_client(recorder)

        result = client.speech_to_text.create(
            "scribe_v1",
            file=io.BytesIO(b"mp3-bytes"),
            filename="talk.mp3",
            enable_logging=False,
            language_code="en",
            diarize=True,
            webhook_metadata={"job": 7},
        )

        request = recorder.last
        parts = parse_multipart(request)
        files = _files(parts)
        assert result == {"text": "hi"}
        assert request.url.path == "/v1/speech-to-text"
        assert request.url.params.multi_items() == [("enable_logging", "false")]
        assert _fields(parts) == [
            ("model_id", "scribe_v1"),
            ("language_code", "en"),
            ("diarize", "true"),
            ("webhook_metadata", '{"job": 7}'),
        ]
        assert len(files) == 1
        assert files[0]["name"] == "file"
        assert files[0]["filename"] == "talk.mp3"
        assert files[0]["content_type"] == "audio/mpeg"
        assert files[0]["content"] == b"mp3-bytes"

    def test_create_with_cloud_url(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)

        client.speech_to_text.create("scribe_v1", cloud_storage_url="https://bucket/a.mp3")

        form = parse_qsl(recorder.last.content.decode())
        assert form == [("model_id", "scribe_v1"), ("cloud_storage_url", "https://bucket/a.mp3")]

    def test_create_requires_source(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)

        with pytest.raises(ValueError):
            client.speech_to_text.create("scribe_v1")
        with pytest.raises(ValueError):
            client.speech_to_text.create("scribe_v1", file=b"x")
        assert recorder.requests == []

    def test_unknown_option_rejected(self, make_client):
        client = make_client(Recorder())
        with pytest.raises(TypeError):
            client.speech_to_text.create("scribe_v1", cloud_storage_url="https://x", nope=1)

    def test_get_transcript(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, json={"text": "done"}))
        client = make_client(recorder)

        assert client.speech_to_text.get_transcript("tr_1") == {"text": "done"}
        assert recorder.last.url.path == "/v1/speech-to-text/transcripts/tr_1"

    def test_aliases(self):
        assert SpeechToText.transcribe is SpeechToText.create
        assert SpeechToText.get_transcription is SpeechToText.get_transcript
        assert SpeechToText.retrieve_transcript is SpeechToText.get_transcript


# ---------------------------------------------------------------------------
# Audio processing
# ---------------------------------------------------------------------------


class TestAudio:
    """Isolation, sound generation, forced alignment."""

    def test_isolate_returns_bytes(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        audio = client.audio_isolation.isolate(io.BytesIO(b"noisy"), "in.mp3", file_format="other")

        parts = parse_multipart(recorder.last)
        assert audio == AUDIO
        assert recorder.last.url.path == "/v1/audio-isolation"
        assert _fields(parts) == [("file_format", "other")]
        assert _files(parts)[0]["name"] == "audio"

    def test_isolate_stream(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, content=iter([b"c1", b"c2"])))
        client = make_client(recorder)
        chunks = []

        client.audio_isolation.isolate_stream(b"noisy", "in.wav", chunks.append)

        assert chunks == [b"c1", b"c2"]
        assert recorder.last.url.path == "/v1/audio-isolation/stream"

    def test_sound_generation(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        audio = client.sound_generation.generate(
            "door creak", duration_seconds=2.5, output_format="mp3_44100_64"
        )

        assert audio == AUDIO
        assert recorder.last.url.path == "/v1/sound-generation"
        assert _json_body(recorder.last) == {"text": "door creak", "duration_seconds": 2.5}
        assert recorder.last.url.params["output_format"] == "mp3_44100_64"
        assert SoundGeneration.sound_generation is SoundGeneration.generate

    def test_forced_alignment(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, json={"words": []}))
        client = make_client(recorder)

        result = client.forced_alignment.create(b"wav", "a.wav", "hello world")

        parts = parse_multipart(recorder.last)
        assert result == {"words": []}
        assert recorder.last.url.path == "/v1/forced-alignment"
        assert _fields(parts) == [("text", "hello world")]
        assert _files(parts)[0]["filename"] == "a.wav"
        assert ForcedAlignment.align is ForcedAlignment.create
        assert ForcedAlignment.force_align is ForcedAlignment.create


# ---------------------------------------------------------------------------
# Dubbing
# ---------------------------------------------------------------------------


class TestDubs:
    """Dubbing jobs and resource edits."""

    def test_create(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, json={"dubbing_id": "d1"}))
        client = make_client(recorder)

        result = client.dubs.create(
            io.BytesIO(b"mp4"), "clip.mp4", ["es", "fr"], drop_background_audio=True
        )

        parts = parse_multipart(recorder.last)
        files = _files(parts)
        assert result == {"dubbing_id": "d1"}
        assert recorder.last.url.path == "/v1/dubbing"
        assert _fields(parts) == [
            ("mode", "automatic"),
            ("target_lang", "es"),
            ("num_speakers", "1"),
            ("drop_background_audio", "true"),
        ]
        assert files[0]["content_type"] == "video/mp4"

    def test_create_requires_target_language(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)
        with pytest.raises(ValueError):
            client.dubs.create(b"x", "clip.mp4", [])
        assert recorder.requests == []

    def test_list_params(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)

        client.dubs.list(dubbing_status="dubbed", page_size=5)

        assert recorder.last.url.params.multi_items() == [
            ("dubbing_status", "dubbed"),
            ("page_size", "5"),
        ]

    def test_resource_paths_and_methods(self, make_client):
        recorder = Recorder()
        client = make_client(recorder)

        client.dubs.get("d1")
        client.dubs.get_resource("d1")
        client.dubs.create_segment("d1", "spk", 1.0, 2.5, text="Hola")
        client.dubs.update_segment("d1", "seg", "es", text="Hola!")
        client.dubs.delete_segment("d1", "seg")
        client.dubs.render_project("d1", "es", "mp4")
        client.dubs.delete("d1")

        calls = [(r.method, r.url.path) for r in recorder.requests]
        assert calls == [
            ("GET", "/v1/dubbing/d1"),
            ("GET", "/v1/dubbing/resource/d1"),
            ("POST", "/v1/dubbing/resource/d1/speaker/spk/segment"),
            ("PATCH", "/v1/dubbing/resource/d1/segment/seg/es"),
            ("DELETE", "/v1/dubbing/resource/d1/segment/seg"),
            ("POST", "/v1/dubbing/resource/d1/render/es"),
            ("DELETE", "/v1/dubbing/d1"),
        ]
        assert _json_body(recorder.requests[2]) == {
            "start_time": 1.0,
            "end_time": 2.5,
            "text": "Hola",
        }
        assert _json_body(recorder.requests[3]) == {"text": "Hola!"}
        assert _json_body(recorder.requests[5]) == {"render_type": "mp4"}

    def test_dubbed_audio_and_transcript(self, make_client):
        def handler(request):
            if request.url.path.endswith("/audio/es"):
                return _audio_response(request)
            return httpx.Response(200, text="WEBVTT\n")

        recorder = Recorder(handler)
        client = make_client(recorder)

        assert client.dubs.get_dubbed_audio("d1", "es") == AUDIO
        assert client.dubs.get_dubbed_transcript("d1", "es", format_type="webvtt") == "WEBVTT\n"
        assert recorder.last.url.path == "/v1/dubbing/d1/transcript/es"
        assert recorder.last.url.params["format_type"] == "webvtt"
        assert Dubs.dubbed_audio is Dubs.get_dubbed_audio
        assert Dubs.dubbed_transcript is Dubs.get_dubbed_transcript

    def test_error_propagates(self, make_client):
        client = make_client(lambda request: httpx.Response(503, json={"detail": "busy"}))
        with pytest.raises(ServiceUnavailableError):
            client.dubs.get("d1")


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestHistory:
    """Generation history listing and downloads."""

    def test_list_params(self, make_client):
        recorder = Recorder(lambda request: httpx.Response(200, json={"history": []}))
        client = make_client(recorder)

        client.history.list(page_size=20, voice_id="v1", source="TTS")

        assert recorder.last.url.path == "/v1/history"
        assert recorder.last.url.params.multi_items() == [
            ("page_size", "20"),
            ("voice_id", "v1"),
            ("source", "TTS"),
        ]

    def test_item_operations(self, make_client):
        recorder = Recorder(_audio_response)
        client = make_client(recorder)

        assert client.history.get_audio("h1") == AUDIO
        assert recorder.last.url.path == "/v1/history/h1/audio"

        client.history.delete("h1")
        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/v1/history/h1"

    def test_download(self, make_client):
        recorder = Recorder(
            lambda request: httpx.Response(
                200, content=b"PK\x03\x04zip", headers={"content-type": "application/zip"}
            )
        )
        client = make_client(recorder)

        data = client.history.download(["h1", "h2"])

        assert data == b"PK\x03\x04zip"
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/v1/history/download"
        assert _json_body(recorder.last) == {"history_item_ids": ["h1", "h2"]}

    def test_aliases(self):
        assert History.get_history_item is History.get
        assert History.get_generated_items is History.list
        assert History.delete_history_item is History.delete
        assert History.get_audio_from_history_item is History.get_audio
        assert History.download_history_items is History.download

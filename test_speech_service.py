"""Tests for the speech sources and the speech error taxonomy."""

from types import SimpleNamespace

import httpx
import openai

from game import events
from game.errors import (
    SpeechCaptureFailed,
    SpeechNetworkError,
    SpeechPermissionDenied,
    speech_error_for_kind,
)
from services.speech_service import SpeechSource, WhisperSpeechSource

TRANSCRIBE_URL = "https://api.openai.com/v1/audio/transcriptions"


def record(source):
    received = []
    source.subscribe(received.append)
    return received


class FakeTranscriptions:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    def create(self, model, file):
        self.calls += 1
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def whisper(tmp_path, text="", error=None):
    transcriptions = FakeTranscriptions(text, error)
    client = SimpleNamespace(audio=SimpleNamespace(transcriptions=transcriptions))
    audio = tmp_path / "clip.wav"
    audio.write_bytes(b"RIFF")
    return WhisperSpeechSource(client), str(audio), transcriptions


# ============================================================================
# SpeechSource
# ============================================================================


def test_chunks_accumulate_within_a_span():
    source = SpeechSource()
    received = record(source)
    source.start()
    source.push_transcript("red lorry")
    source.push_transcript("yellow lorry")
    assert received == [
        events.TranscriptUpdate(transcript="red lorry"),
        events.TranscriptUpdate(transcript="red lorry yellow lorry"),
    ]


def test_new_span_starts_empty():
    source = SpeechSource()
    source.start()
    source.push_transcript("old words")
    source.stop()
    source.start()
    assert source.transcript == ""


def test_chunks_outside_a_span_are_ignored():
    source = SpeechSource()
    received = record(source)
    source.push_transcript("too early")
    assert received == []


def test_unsupported_source_reports_on_start():
    source = SpeechSource(supported=False)
    received = record(source)
    source.start()
    assert received == [events.SpeechError(kind="unsupported")]
    assert not source.is_listening


def test_explicit_stop_is_silent_but_natural_end_is_reported():
    source = SpeechSource()
    received = record(source)
    source.start()
    source.stop()
    assert received == []
    source.start()
    source.report_ended()
    assert received == [events.SpeechStopped()]


def test_unsubscribe():
    source = SpeechSource()
    received = []
    unsubscribe = source.subscribe(received.append)
    unsubscribe()
    source.start()
    source.push_transcript("hello")
    assert received == []


# ============================================================================
# Whisper
# ============================================================================


def test_whisper_transcription_extends_transcript(tmp_path):
    source, audio, transcriptions = whisper(tmp_path, text=" Six slick snakes ")
    received = record(source)
    source.start()
    assert source.feed_audio(audio) == "Six slick snakes"
    assert received == [events.TranscriptUpdate(transcript="Six slick snakes")]
    assert transcriptions.calls == 1


def test_whisper_ignores_audio_when_not_listening(tmp_path):
    source, audio, transcriptions = whisper(tmp_path, text="ignored")
    assert source.feed_audio(audio) == ""
    assert transcriptions.calls == 0


def test_whisper_without_client_is_unsupported():
    assert not WhisperSpeechSource(None).is_supported


def test_whisper_connection_error_maps_to_network(tmp_path):
    request = httpx.Request("POST", TRANSCRIBE_URL)
    source, audio, _ = whisper(tmp_path, error=openai.APIConnectionError(request=request))
    received = record(source)
    source.start()
    source.feed_audio(audio)
    assert received[-1].kind == "network"
    assert not source.is_listening


def test_whisper_auth_error_maps_to_permission_denied(tmp_path):
    request = httpx.Request("POST", TRANSCRIBE_URL)
    response = httpx.Response(401, request=request)
    error = openai.AuthenticationError("bad key", response=response, body=None)
    source, audio, _ = whisper(tmp_path, error=error)
    received = record(source)
    source.start()
    source.feed_audio(audio)
    assert received[-1].kind == "permission-denied"


def test_whisper_missing_file_maps_to_other(tmp_path):
    source, _, transcriptions = whisper(tmp_path)
    received = record(source)
    source.start()
    source.feed_audio(str(tmp_path / "missing.wav"))
    assert received[-1].kind == "other"
    assert transcriptions.calls == 0


# ============================================================================
# Error taxonomy
# ============================================================================


def test_speech_error_for_kind():
    assert isinstance(speech_error_for_kind("network"), SpeechNetworkError)
    assert isinstance(speech_error_for_kind("permission-denied"), SpeechPermissionDenied)
    other = speech_error_for_kind("aborted")
    assert isinstance(other, SpeechCaptureFailed)
    assert other.message == "Speech recognition error: aborted."
    assert speech_error_for_kind("other", "no-speech").message == (
        "Speech recognition error: no-speech."
    )

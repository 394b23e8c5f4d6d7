"""Tests for per-browser-session game state."""

import pytest

from game import state_manager
from game.models import Phrase
from game.timeline import Phase
from services.storage import load_session


@pytest.fixture(autouse=True)
def fresh_states():
    state_manager.player_states.clear()
    state_manager.init_state_manager(None, "whisper-1", None)
    yield
    for sess_id in list(state_manager.player_states):
        state_manager.discard_timeline(sess_id)
    state_manager.player_states.clear()


def _phrases():
    return [Phrase(id="a", text="red lorry"), Phrase(id="b", text="yellow lorry")]


def test_states_are_per_session():
    first = state_manager.get_or_create_state("one")
    assert state_manager.get_or_create_state("one") is first
    assert state_manager.get_or_create_state("two") is not first


def test_begin_session_persists_and_creates_idle_timeline():
    timeline = state_manager.begin_session("s", _phrases())
    assert timeline.phase == Phase.IDLE
    assert state_manager.get_timeline("s") is timeline

    stored = load_session(state_manager.get_or_create_state("s").store)
    assert stored.id == timeline.session.id


def test_without_client_speech_is_unsupported():
    timeline = state_manager.begin_session("s", _phrases())
    assert not timeline.speech_supported


def test_replay_reuses_phrases_with_new_session():
    first = state_manager.begin_session("s", _phrases())
    replay = state_manager.replay_session("s")
    assert replay is not first
    assert replay.session.id != first.session.id
    assert [p.id for p in replay.session.phrases] == ["a", "b"]


def test_replay_without_game_returns_none():
    assert state_manager.replay_session("nobody") is None


def test_discard_timeline():
    state_manager.begin_session("s", _phrases())
    state_manager.discard_timeline("s")
    assert state_manager.get_timeline("s") is None

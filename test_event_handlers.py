"""Tests for the Gradio event handlers (no server is started)."""

import pytest

from app.event_handlers import VIEW_OUTPUT_COUNT, on_home, on_skip, on_start_speaking
from game import state_manager
from game.models import Phrase
from game.timeline import Phase
from services.storage import load_final_result, load_session


@pytest.fixture(autouse=True)
def fresh_states():
    state_manager.player_states.clear()
    state_manager.init_state_manager(None, "whisper-1", None)
    yield
    for sess_id in list(state_manager.player_states):
        state_manager.discard_timeline(sess_id)
    state_manager.player_states.clear()


def test_button_handler_renders_the_clicked_state():
    state_manager.begin_session("s", [Phrase(id="a", text="red lorry")])
    view = on_start_speaking("s")
    assert len(view) == VIEW_OUTPUT_COUNT
    assert state_manager.get_timeline("s").phase == Phase.LISTENING


def test_game_over_shows_persisted_result():
    state_manager.begin_session("s", [Phrase(id="a", text="red lorry")])
    on_start_speaking("s")
    view = on_skip("s")
    store = state_manager.get_or_create_state("s").store
    assert load_final_result(store).accuracy == 0
    assert "0%" in view[10]


def test_home_discards_abandoned_game():
    state_manager.begin_session("s", [Phrase(id="a", text="red lorry"), Phrase(id="b", text="blue")])
    on_start_speaking("s")
    store = state_manager.get_or_create_state("s").store
    assert load_session(store) is not None

    on_home("s")

    assert load_session(store) is None
    assert load_final_result(store) is None
    assert state_manager.get_timeline("s") is None

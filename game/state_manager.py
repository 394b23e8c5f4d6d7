"""Per-browser-session game state shared by the UI handlers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from game.models import Phrase, SessionSettings
from game.session import create_session
from game.timeline import DEFAULT_AUTO_CHECK_DELAY_MS, RoundTimeline
from services.speech_service import SpeechSource, WhisperSpeechSource
from services.storage import (
    KeyValueStore,
    clear_final_result,
    create_store,
    save_session,
)

logger = logging.getLogger(__name__)


@dataclass
class PlayerState:
    """Everything one browser session needs to play."""

    store: KeyValueStore
    speech: SpeechSource
    timeline: Optional[RoundTimeline] = None
    settings: Optional[SessionSettings] = None
    phrases: List[Phrase] = field(default_factory=list)
    auto_check_enabled: bool = True
    auto_check_delay_ms: int = DEFAULT_AUTO_CHECK_DELAY_MS


# These will be set by app.py via init_state_manager()
player_states: Dict[str, PlayerState] = {}
_openai_client = None
_transcription_model = "whisper-1"
_storage_dir: Optional[str] = None


def init_state_manager(openai_client, transcription_model: str, storage_dir: Optional[str]):
    """Wire the shared clients used when new player states are created."""
    global _openai_client, _transcription_model, _storage_dir
    _openai_client = openai_client
    _transcription_model = transcription_model
    _storage_dir = storage_dir
    logger.info(
        "State manager initialized. Speech capture available: %s",
        openai_client is not None,
    )


def get_or_create_state(session_id: str) -> PlayerState:
    """Get or create the player state for a browser session."""
    if session_id not in player_states:
        store_dir = os.path.join(_storage_dir, session_id) if _storage_dir else None
        player_states[session_id] = PlayerState(
            store=create_store(store_dir),
            speech=WhisperSpeechSource(_openai_client, model=_transcription_model),
        )
    return player_states[session_id]


def begin_session(
    session_id: str,
    phrases: List[Phrase],
    settings: Optional[SessionSettings] = None,
) -> RoundTimeline:
    """Create a fresh session and timeline, discarding any previous one."""
    state = get_or_create_state(session_id)
    discard_timeline(session_id)

    session = create_session(phrases, settings)
    save_session(state.store, session)
    clear_final_result(state.store)

    state.settings = settings
    state.phrases = list(phrases)
    state.timeline = RoundTimeline(
        session,
        speech=state.speech,
        store=state.store,
        auto_check_enabled=state.auto_check_enabled,
        auto_check_delay_ms=state.auto_check_delay_ms,
    )
    logger.info(
        "Session %s ready with %d phrases", session.id[:8], len(session.phrases)
    )
    return state.timeline


def replay_session(session_id: str) -> Optional[RoundTimeline]:
    """Play the same phrases again from the first one."""
    state = get_or_create_state(session_id)
    if not state.phrases:
        return None
    return begin_session(session_id, state.phrases, state.settings)


def get_timeline(session_id: str) -> Optional[RoundTimeline]:
    state = player_states.get(session_id)
    return state.timeline if state else None


def discard_timeline(session_id: str) -> None:
    """Stop timers and capture for the current timeline, if any."""
    state = player_states.get(session_id)
    if state and state.timeline:
        state.timeline.close()
        state.timeline = None


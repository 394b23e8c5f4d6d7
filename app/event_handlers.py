"""Event handlers for the tongue twister game.

Every play-screen handler returns the same list of updates (see
``render_view``) so they can share one ``outputs`` list in ``app.main``.
"""

import logging
from typing import List, Optional

import gradio as gr

from game.errors import GenerationFailure
from game.state_manager import (
    begin_session,
    discard_timeline,
    get_or_create_state,
    get_timeline,
    replay_session,
)
from game.timeline import Phase, RoundTimeline
from services.storage import clear_final_result, clear_session, load_final_result
from services.twister_generator import generate_twisters
from twister_config import create_validated_settings, validate_auto_check_delay
from ui.formatters import (
    format_error_html,
    format_game_over_html,
    format_hud_html,
    format_phrase_card_html,
    format_status_html,
)

logger = logging.getLogger(__name__)

GENERATION_ERROR_MESSAGE = "Failed to generate tongue twisters. Please check your API key."

# Number of updates returned by render_view (must match VIEW_OUTPUTS in app.main)
VIEW_OUTPUT_COUNT = 12


def render_view(timeline: Optional[RoundTimeline]) -> List:
    """Updates for HUD, card, status, buttons, screens and the refresh timer."""
    if timeline is None:
        return [gr.update()] * VIEW_OUTPUT_COUNT

    snapshot = timeline.snapshot()
    phase = snapshot.phase
    complete = phase == Phase.COMPLETE
    in_round = phase in (Phase.LISTENING, Phase.PAUSED)
    verdict = snapshot.final_verdict or snapshot.live_verdict
    can_check = in_round and bool(snapshot.transcript) and not (
        snapshot.final_verdict and snapshot.final_verdict.is_match
    )

    return [
        format_hud_html(snapshot),
        format_phrase_card_html(snapshot.phrase, verdict),
        format_status_html(snapshot),
        gr.update(visible=phase == Phase.IDLE),
        gr.update(visible=phase == Phase.LISTENING),
        gr.update(visible=phase == Phase.PAUSED),
        gr.update(visible=can_check),
        gr.update(visible=in_round),
        gr.update(visible=not complete),
        gr.update(visible=complete),
        format_game_over_html(load_final_result(timeline.store) or snapshot.final_result)
        if complete
        else gr.update(),
        gr.Timer(active=not complete and phase != Phase.IDLE),
    ]


def on_length_change(length: str):
    """Show the word count input only for custom length."""
    return gr.update(visible=length == "custom")


def on_start_game(custom_topic, preset_topic, length, custom_words, rounds, sess_id):
    """Validate the setup form, generate phrases and open the play screen.

    Returns:
        [setup_panel, setup_error_html] followed by the play view updates
    """
    try:
        settings = create_validated_settings(
            custom_topic=custom_topic,
            preset_topic=preset_topic or "",
            length=length,
            custom_word_count=custom_words,
            rounds=rounds,
        )
    except ValueError as e:
        return [gr.update(), format_error_html(str(e))] + render_view(None)

    try:
        phrases = generate_twisters(
            settings.topic, settings.length, settings.custom_word_count, settings.rounds
        )
    except GenerationFailure as e:
        logger.error("[APP] Generation failed: %s", e)
        return [gr.update(), format_error_html(GENERATION_ERROR_MESSAGE)] + render_view(None)

    timeline = begin_session(sess_id, phrases, settings)
    return [gr.update(visible=False), ""] + render_view(timeline)


def _with_timeline(sess_id, action) -> List:
    timeline = get_timeline(sess_id)
    if timeline is None:
        logger.warning("[APP] No active game for session %s", sess_id)
        return render_view(None)
    action(timeline)
    # A timer thread may be draining; let it finish so the click is rendered.
    timeline.flush()
    return render_view(timeline)


def on_start_speaking(sess_id):
    return _with_timeline(sess_id, lambda t: t.start())


def on_pause(sess_id):
    return _with_timeline(sess_id, lambda t: t.pause())


def on_resume(sess_id):
    return _with_timeline(sess_id, lambda t: t.resume())


def on_check(sess_id):
    return _with_timeline(sess_id, lambda t: t.check())


def on_skip(sess_id):
    return _with_timeline(sess_id, lambda t: t.skip())


def on_restart_mic(sess_id):
    return _with_timeline(sess_id, lambda t: t.restart_capture())


def on_refresh_tick(sess_id):
    return render_view(get_timeline(sess_id))


def on_submit_text(text, sess_id):
    """Keyboard fallback; also clears the textbox."""
    return _with_timeline(sess_id, lambda t: t.submit_text(text or "")) + [""]


def on_voice_input(audio_path, sess_id):
    """Transcribe a finished microphone recording into the current span."""
    if audio_path:
        state = get_or_create_state(sess_id)
        state.speech.feed_audio(audio_path)
    return render_view(get_timeline(sess_id))


def reset_voice_input():
    return gr.update(value=None)


def on_auto_check_change(enabled, delay_ms, sess_id):
    state = get_or_create_state(sess_id)
    try:
        delay = validate_auto_check_delay(delay_ms)
    except ValueError as e:
        logger.warning("[APP] %s", e)
        return
    state.auto_check_enabled = bool(enabled)
    state.auto_check_delay_ms = delay
    if state.timeline:
        state.timeline.set_auto_check(state.auto_check_enabled, delay)


def on_replay(sess_id):
    timeline = replay_session(sess_id)
    if timeline is None:
        return on_home(sess_id)
    return [gr.update(visible=False)] + render_view(timeline)


def on_home(sess_id):
    """Back to the setup screen, discarding the finished or abandoned game.

    Returns:
        [setup_panel] followed by the play view updates
    """
    discard_timeline(sess_id)
    store = get_or_create_state(sess_id).store
    clear_session(store)
    clear_final_result(store)
    view = [gr.update()] * VIEW_OUTPUT_COUNT
    view[8] = gr.update(visible=False)  # play panel
    view[9] = gr.update(visible=False)  # game over panel
    view[11] = gr.Timer(active=False)
    return [gr.update(visible=True)] + view


"""Tongue Twister Challenge - speak the phrase, beat the clock.

Gradio wiring for the setup, play and game-over screens. Game rules live in
the ``game`` package; this module only connects components to handlers.
"""

# IMPORTANT: Load environment variables FIRST, before any other imports
from dotenv import load_dotenv
load_dotenv()

import logging

import gradio as gr
from openai import OpenAI

from app.event_handlers import (
    on_auto_check_change,
    on_check,
    on_home,
    on_length_change,
    on_pause,
    on_refresh_tick,
    on_replay,
    on_restart_mic,
    on_resume,
    on_skip,
    on_start_game,
    on_start_speaking,
    on_submit_text,
    on_voice_input,
    reset_voice_input,
)
from app.ui_components import create_ui_components
from app.utils import get_ui_logs, new_session_id, setup_ui_logging
from config.settings import get_env_settings
from game.state_manager import init_state_manager
from ui.styles import TWISTER_CSS

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
setup_ui_logging()

# =============================================================================
# APP STARTUP
# =============================================================================

logger.info("🚀 Starting Tongue Twister App...")
env_settings = get_env_settings()

openai_client = None
if env_settings.openai_api_key:
    openai_client = OpenAI(api_key=env_settings.openai_api_key)
    logger.info("✅ OpenAI client initialized")
else:
    logger.warning("⚠️ OPENAI_API_KEY not set: generation and speech capture are disabled")

init_state_manager(
    openai_client,
    transcription_model=env_settings.transcription_model,
    storage_dir=env_settings.storage_dir,
)


# ============================================================================
# GRADIO UI
# ============================================================================


def create_app():
    """Create the Gradio application."""

    with gr.Blocks(title="Tongue Twister Challenge", css=TWISTER_CSS) as app:
        c = create_ui_components()
        session_id = c["session_id"]

        # Order must match render_view() in app.event_handlers
        view_outputs = [
            c["hud_html"],
            c["phrase_html"],
            c["status_html"],
            c["start_btn"],
            c["pause_btn"],
            c["resume_btn"],
            c["check_btn"],
            c["skip_btn"],
            c["play_panel"],
            c["game_over_panel"],
            c["game_over_html"],
            c["refresh_timer"],
        ]

        getattr(app, "load")(fn=new_session_id, inputs=None, outputs=[session_id])

        # ====== SETUP ======
        getattr(c["length_radio"], "change")(
            fn=on_length_change,
            inputs=[c["length_radio"]],
            outputs=[c["custom_words_number"]],
        )

        getattr(c["start_game_btn"], "click")(
            fn=on_start_game,
            inputs=[
                c["custom_topic_input"],
                c["preset_topic_radio"],
                c["length_radio"],
                c["custom_words_number"],
                c["rounds_slider"],
                session_id,
            ],
            outputs=[c["setup_panel"], c["setup_error_html"]] + view_outputs,
        )

        # ====== PLAY ACTIONS ======
        for button, handler in (
            (c["start_btn"], on_start_speaking),
            (c["pause_btn"], on_pause),
            (c["resume_btn"], on_resume),
            (c["check_btn"], on_check),
            (c["skip_btn"], on_skip),
            (c["restart_mic_btn"], on_restart_mic),
        ):
            getattr(button, "click")(fn=handler, inputs=[session_id], outputs=view_outputs)

        getattr(c["submit_text_btn"], "click")(
            fn=on_submit_text,
            inputs=[c["text_input"], session_id],
            outputs=view_outputs + [c["text_input"]],
        )
        getattr(c["text_input"], "submit")(
            fn=on_submit_text,
            inputs=[c["text_input"], session_id],
            outputs=view_outputs + [c["text_input"]],
        )

        getattr(c["voice_input"], "stop_recording")(
            on_voice_input, inputs=[c["voice_input"], session_id], outputs=view_outputs
        ).then(
            reset_voice_input,
            inputs=None,
            outputs=[c["voice_input"]],
        )

        for control in (c["auto_check_checkbox"], c["auto_check_delay_dropdown"]):
            getattr(control, "change")(
                fn=on_auto_check_change,
                inputs=[c["auto_check_checkbox"], c["auto_check_delay_dropdown"], session_id],
                outputs=None,
            )

        # Display refresh; the timeline keeps its own clock
        getattr(c["refresh_timer"], "tick")(
            fn=on_refresh_tick, inputs=[session_id], outputs=view_outputs
        )

        # ====== GAME OVER ======
        getattr(c["replay_btn"], "click")(
            fn=on_replay, inputs=[session_id], outputs=[c["setup_panel"]] + view_outputs
        )
        getattr(c["home_btn"], "click")(
            fn=on_home, inputs=[session_id], outputs=[c["setup_panel"]] + view_outputs
        )

        # ====== DEBUG ======
        getattr(c["refresh_logs_btn"], "click")(
            fn=get_ui_logs, inputs=None, outputs=[c["debug_logs_textbox"]]
        )

    return app


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    app = create_app()
    app.queue().launch(server_name="0.0.0.0", server_port=7860, share=False)

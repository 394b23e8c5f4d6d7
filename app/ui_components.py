"""UI component creation for the tongue twister game."""

import gradio as gr

from twister_config import (
    AUTO_CHECK_DELAY_OPTIONS,
    CUSTOM_WORDS_MAX,
    CUSTOM_WORDS_MIN,
    DEFAULT_AUTO_CHECK_DELAY,
    DEFAULT_CUSTOM_WORDS,
    DEFAULT_ROUNDS,
    PRESET_TOPICS,
    ROUND_MAX,
    ROUND_MIN,
    length_choices,
)
from game.timeline import DISPLAY_TICK_MS


def create_ui_components() -> dict:
    """Create all Gradio UI components and return them as a dictionary.

    Returns:
        Dictionary containing all UI components with descriptive keys.
    """
    session_id = gr.State(None)

    gr.Markdown("# Tongue Twister Challenge")

    # ====== SETUP SCREEN ======
    with gr.Column(visible=True) as setup_panel:
        gr.Markdown("Test your pronunciation skills!")
        gr.Markdown("### Theme")
        custom_topic_input = gr.Textbox(
            label="Custom topic",
            placeholder="e.g. Marvel Superheroes, Lord of the Rings, 80s Music...",
        )
        preset_topic_radio = gr.Radio(
            choices=PRESET_TOPICS, label="or select a preset", value=None
        )
        gr.Markdown("### Difficulty")
        length_radio = gr.Radio(choices=length_choices(), value="medium", label="Length")
        custom_words_number = gr.Number(
            value=DEFAULT_CUSTOM_WORDS,
            minimum=CUSTOM_WORDS_MIN,
            maximum=CUSTOM_WORDS_MAX,
            precision=0,
            label="Words",
            visible=False,
        )
        rounds_slider = gr.Slider(
            minimum=ROUND_MIN, maximum=ROUND_MAX, value=DEFAULT_ROUNDS, step=1, label="Rounds"
        )
        setup_error_html = gr.HTML("")
        start_game_btn = gr.Button("Start Game", variant="primary")

    # ====== PLAY SCREEN ======
    with gr.Column(visible=False) as play_panel:
        hud_html = gr.HTML("")
        phrase_html = gr.HTML("")
        status_html = gr.HTML("")
        with gr.Row():
            start_btn = gr.Button("Start Speaking", variant="primary")
            pause_btn = gr.Button("Pause", visible=False)
            resume_btn = gr.Button("Resume", visible=False)
            check_btn = gr.Button("Check", visible=False)
            skip_btn = gr.Button("Skip", visible=False)
            restart_mic_btn = gr.Button("Restart mic")
        voice_input = gr.Audio(
            sources=["microphone"], type="filepath", label="Speak the twister"
        )
        with gr.Row():
            text_input = gr.Textbox(
                label="Keyboard fallback", placeholder="Type what you said...", scale=4
            )
            submit_text_btn = gr.Button("Send", scale=1)
        with gr.Row():
            auto_check_checkbox = gr.Checkbox(value=True, label="Auto-check")
            auto_check_delay_dropdown = gr.Dropdown(
                choices=[(f"{ms // 1000}s", ms) for ms in AUTO_CHECK_DELAY_OPTIONS],
                value=DEFAULT_AUTO_CHECK_DELAY,
                label="Delay",
            )

    # ====== GAME OVER SCREEN ======
    with gr.Column(visible=False) as game_over_panel:
        gr.Markdown("## Game Over!")
        game_over_html = gr.HTML("")
        with gr.Row():
            replay_btn = gr.Button("Play Again", variant="primary")
            home_btn = gr.Button("Home")

    with gr.Accordion("Debug logs", open=False):
        debug_logs_textbox = gr.Textbox(lines=12, label="Recent logs", interactive=False)
        refresh_logs_btn = gr.Button("Refresh logs")

    refresh_timer = gr.Timer(value=DISPLAY_TICK_MS / 1000, active=False)

    return {
        "session_id": session_id,
        "setup_panel": setup_panel,
        "custom_topic_input": custom_topic_input,
        "preset_topic_radio": preset_topic_radio,
        "length_radio": length_radio,
        "custom_words_number": custom_words_number,
        "rounds_slider": rounds_slider,
        "setup_error_html": setup_error_html,
        "start_game_btn": start_game_btn,
        "play_panel": play_panel,
        "hud_html": hud_html,
        "phrase_html": phrase_html,
        "status_html": status_html,
        "start_btn": start_btn,
        "pause_btn": pause_btn,
        "resume_btn": resume_btn,
        "check_btn": check_btn,
        "skip_btn": skip_btn,
        "restart_mic_btn": restart_mic_btn,
        "voice_input": voice_input,
        "text_input": text_input,
        "submit_text_btn": submit_text_btn,
        "auto_check_checkbox": auto_check_checkbox,
        "auto_check_delay_dropdown": auto_check_delay_dropdown,
        "game_over_panel": game_over_panel,
        "game_over_html": game_over_html,
        "replay_btn": replay_btn,
        "home_btn": home_btn,
        "debug_logs_textbox": debug_logs_textbox,
        "refresh_logs_btn": refresh_logs_btn,
        "refresh_timer": refresh_timer,
    }

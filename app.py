"""Thin entrypoint for the tongue twister app.

The full Gradio app wiring lives in the `app` package. This file exists so
`python app.py` keeps working.
"""

from app import create_app  # type: ignore  # re-exported from app package


if __name__ == "__main__":
    app = create_app()
    # Queue so timer ticks and button clicks are served concurrently
    app.queue().launch(server_name="0.0.0.0", server_port=7860, share=False)

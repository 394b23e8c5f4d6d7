"""HTML formatting and CSS for the Gradio UI."""

"""Application wiring and startup package.

This package hosts the Gradio wiring and startup logic, keeping it separate
from the game domain and the external services.
"""

from .main import create_app  # Re-export for `from app import create_app`

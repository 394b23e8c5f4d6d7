"""Environment-level configuration for the tongue twister app.

This module isolates things that depend on the deployment environment
(API keys, model choices, storage location) from pure game-domain logic.
"""

import os
from dataclasses import dataclass


@dataclass
class EnvironmentSettings:
    """Environment / deployment settings."""

    openai_api_key: str | None = None
    twister_model: str = "gpt-4o"
    transcription_model: str = "whisper-1"
    storage_dir: str | None = None

    @classmethod
    def from_env(cls) -> "EnvironmentSettings":
        """Build settings from environment variables."""
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            twister_model=os.getenv("TWISTER_MODEL", "gpt-4o"),
            transcription_model=os.getenv("TRANSCRIPTION_MODEL", "whisper-1"),
            storage_dir=os.getenv("TWISTER_STORAGE_DIR") or None,
        )


def get_env_settings() -> EnvironmentSettings:
    """Convenience accessor for environment settings."""
    return EnvironmentSettings.from_env()

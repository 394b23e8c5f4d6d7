"""Utility functions for the tongue twister app."""

import logging
import uuid
from collections import deque
from typing import Deque

MAX_UI_LOG_LINES = 300

# Rolling log buffer for the debug accordion
UI_LOG_BUFFER: Deque[str] = deque(maxlen=MAX_UI_LOG_LINES)


class UILogHandler(logging.Handler):
    """Keeps the most recent formatted log lines for the debug panel."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            UI_LOG_BUFFER.append(self.format(record))
        except Exception:  # noqa: BLE001
            UI_LOG_BUFFER.append(record.getMessage())


def setup_ui_logging(level: int = logging.INFO) -> None:
    """Attach the UI handler to the root logger (once)."""
    root = logging.getLogger()
    if any(isinstance(h, UILogHandler) for h in root.handlers):
        return
    handler = UILogHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s", "%H:%M:%S"))
    root.addHandler(handler)


def get_ui_logs() -> str:
    if not UI_LOG_BUFFER:
        return "No logs captured yet. Play a round to generate logs."
    return "\n".join(UI_LOG_BUFFER)


def new_session_id() -> str:
    """Fresh id for a browser session, assigned on page load."""
    return str(uuid.uuid4())

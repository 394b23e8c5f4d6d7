"""Pure transitions over the Session value.

Nothing here mutates a Session in place; every transition returns a copy.
"""

import time
import uuid
from typing import Optional, Sequence

from game.models import Phrase, RoundResult, Session, SessionSettings
from game.scoring import round_half_up


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def create_session(
    phrases: Sequence[Phrase],
    settings: Optional[SessionSettings] = None,
    start_timestamp: Optional[int] = None,
) -> Session:
    """Start a new play-through at the first phrase with no results."""
    return Session(
        id=str(uuid.uuid4()),
        phrases=tuple(phrases),
        current_index=0,
        start_timestamp=now_ms() if start_timestamp is None else start_timestamp,
        round_results=(),
        settings=settings,
    )


def current_phrase(session: Session) -> Optional[Phrase]:
    """Phrase at the progress pointer, or None once the session is complete."""
    if 0 <= session.current_index < len(session.phrases):
        return session.phrases[session.current_index]
    return None


def advance_session(session: Session) -> Session:
    """Move the progress pointer forward by one. Results are untouched."""
    if session.current_index >= len(session.phrases):
        return session
    return session.model_copy(update={"current_index": session.current_index + 1})


def add_round_result(session: Session, result: RoundResult) -> Session:
    """Append a round result. The progress pointer is untouched."""
    return session.model_copy(
        update={"round_results": session.round_results + (result,)}
    )


def is_session_complete(session: Session) -> bool:
    return session.current_index >= len(session.phrases)


def calculate_accuracy(session: Session) -> int:
    """Mean similarity over all round results, 0 when there are none."""
    if not session.round_results:
        return 0
    total = sum(result.similarity for result in session.round_results)
    return round_half_up(total / len(session.round_results))


def elapsed_ms(session: Session, now: Optional[int] = None) -> int:
    """Wall-clock milliseconds since the session was created.

    This clock does not know about pauses; the timeline's own clock is the
    one reported in the final result.
    """
    current = now_ms() if now is None else now
    return max(0, current - session.start_timestamp)

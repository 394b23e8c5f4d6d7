"""UI formatting functions for displaying game information as HTML."""

import html
from typing import List, Optional

from game.models import FinalResult, MatchVerdict, Phrase
from game.timeline import Phase, TimelineSnapshot

DIFFICULTY_LABELS = {1: "Easy", 2: "Medium", 3: "Hard"}


def format_clock(ms: int) -> str:
    """MM:SS for the running timer."""
    total_seconds = max(0, ms) // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_duration(ms: int) -> str:
    """Compact duration for the game-over screen, e.g. ``1m 5s`` or ``42s``."""
    seconds = max(0, ms) // 1000
    minutes, remaining = divmod(seconds, 60)
    if minutes > 0:
        return f"{minutes}m {remaining}s"
    return f"{seconds}s"


def final_message(accuracy: int) -> str:
    if accuracy >= 85:
        return "Amazing! You're a tongue twister master!"
    if accuracy >= 70:
        return "Great job! Keep practicing!"
    return "Good effort! Try again!"


def format_phrase_card_html(phrase: Optional[Phrase], verdict: Optional[MatchVerdict] = None) -> str:
    """Phrase card with per-word match highlighting.

    A word is green when its flag is set and red only once the player has
    said at least that many words.
    """
    if phrase is None:
        return "<div class='phrase-card'><em>Loading...</em></div>"

    flags: List[bool] = verdict.per_word_match if verdict else []
    attempted = verdict.attempted_word_count if verdict else None

    words_html = []
    for index, word in enumerate(phrase.text.split()):
        css = "phrase-word"
        if index < len(flags) and flags[index]:
            css += " matched"
        elif attempted is not None and index < attempted and index < len(flags):
            css += " unmatched"
        words_html.append(f"<span class='{css}'>{html.escape(word)}</span>")

    difficulty = DIFFICULTY_LABELS.get(phrase.difficulty, "Medium")
    return f"""
    <div class="phrase-card">
        <div class="phrase-header">
            <span class="phrase-topic">{html.escape(phrase.topic)}</span>
            <span class="phrase-difficulty">{difficulty}</span>
        </div>
        <div class="phrase-text">{" ".join(words_html)}</div>
    </div>
    """


def format_hud_html(snapshot: TimelineSnapshot) -> str:
    accuracy = snapshot.accuracy if snapshot.session.round_results else 0
    paused = " (paused)" if snapshot.phase == Phase.PAUSED else ""
    return f"""
    <div class="twister-hud">
        <div class="timer">
            <div class="timer-label">Time{paused}</div>
            <div class="timer-value">{format_clock(snapshot.elapsed_ms)}</div>
        </div>
        <div class="round">Round {snapshot.round_number} / {snapshot.round_total}</div>
        <div class="accuracy">Accuracy: {accuracy}%</div>
    </div>
    """


def format_status_html(snapshot: TimelineSnapshot) -> str:
    """Transcript, advisory and result banner under the phrase card."""
    if snapshot.transcript:
        transcript = html.escape(snapshot.transcript)
    elif snapshot.phase == Phase.LISTENING and snapshot.capture_active:
        transcript = "Listening..."
    elif snapshot.phase == Phase.PAUSED:
        transcript = "Paused"
    else:
        transcript = "Press the button and speak"

    parts = [f"<div class='transcript-box'>{transcript}</div>"]
    if snapshot.advisory:
        parts.append(f"<div class='advisory'>{html.escape(snapshot.advisory)}</div>")

    verdict = snapshot.final_verdict
    if verdict is not None:
        if verdict.is_match:
            parts.append("<div class='result-banner success'>Great job!</div>")
        else:
            parts.append(
                f"<div class='result-banner failure'>Try again! ({verdict.similarity}% match)</div>"
            )
    return "\n".join(parts)


def format_game_over_html(result: Optional[FinalResult]) -> str:
    if result is None:
        return "<em>No finished game yet.</em>"
    return f"""
    <div class="game-over">
        <div class="score-card">
            <div class="score-label">Accuracy</div>
            <div class="score-value">{result.accuracy}%</div>
        </div>
        <div class="score-card">
            <div class="score-label">Time</div>
            <div class="score-value">{format_duration(result.elapsed_time_ms)}</div>
        </div>
        <p class="game-over-message">{final_message(result.accuracy)}</p>
    </div>
    """


def format_error_html(message: str) -> str:
    if not message:
        return ""
    return f"<div class='error-box'>{html.escape(message)}</div>"

"""Round timeline: the state machine that drives one play-through.

Every input (player action, speech event, timer firing) is posted to a single
inbound queue and handled to completion before the next one, so the handlers
never race each other. Timers are owned by the timeline and cancelled on
every phase change; each timer event also carries the token that was current
when it was armed, so a timer that fired just before being cancelled is
dropped instead of leaking into the next phrase.

Phases::

    idle --start--> listening <--pause/resume--> paused
    listening/paused --match--> advancing --grace delay--> listening/paused
    listening/paused --skip--> (next phrase immediately)
    last phrase advanced --> complete (terminal)
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from game import events
from game.errors import SpeechCaptureError, speech_error_for_kind
from game.evaluator import evaluate
from game.models import FinalResult, MatchVerdict, Phrase, RoundResult, Session
from game.scheduler import Scheduler, ThreadingScheduler, TimerHandle
from game.session import (
    add_round_result,
    advance_session,
    calculate_accuracy,
    current_phrase,
    is_session_complete,
)
from services.speech_service import SpeechSource
from services.storage import (
    KeyValueStore,
    clear_session,
    save_final_result,
    save_session,
)

logger = logging.getLogger(__name__)

DEFAULT_AUTO_CHECK_DELAY_MS = 2000
SUCCESS_GRACE_MS = 1500
DISPLAY_TICK_MS = 100


class Phase(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    PAUSED = "paused"
    SCORING = "scoring"
    ADVANCING = "advancing"
    COMPLETE = "complete"


@dataclass(frozen=True)
class TimelineSnapshot:
    """Read-only view of the timeline for the UI layer."""

    phase: Phase
    session: Session
    phrase: Optional[Phrase]
    round_number: int
    round_total: int
    transcript: str
    live_verdict: Optional[MatchVerdict]
    final_verdict: Optional[MatchVerdict]
    accuracy: int
    elapsed_ms: int
    advisory: Optional[str]
    capture_active: bool
    auto_check_enabled: bool
    auto_check_delay_ms: int
    final_result: Optional[FinalResult]


class RoundTimeline:
    """Coordinates listening, scoring, advancing and completion for a session.

    Args:
        session: The session to play (usually fresh from ``create_session``)
        speech: Speech capture source; its events are folded into the queue
        speech_supported: Capability flag for the current environment
        store: Key-value store for best-effort persistence
        scheduler: Clock and timer provider
        auto_check_enabled: Whether quiet periods trigger a commit
        auto_check_delay_ms: Length of the quiet period
        on_complete: Called once with the final result
    """

    def __init__(
        self,
        session: Session,
        speech: Optional[SpeechSource] = None,
        speech_supported: Optional[bool] = None,
        store: Optional[KeyValueStore] = None,
        scheduler: Optional[Scheduler] = None,
        auto_check_enabled: bool = True,
        auto_check_delay_ms: int = DEFAULT_AUTO_CHECK_DELAY_MS,
        on_complete: Optional[Callable[[FinalResult], None]] = None,
    ):
        self.session = session
        self.speech = speech
        if speech_supported is None:
            speech_supported = speech is not None and speech.is_supported
        self.speech_supported = speech_supported and speech is not None
        self.store = store
        self.scheduler = scheduler or ThreadingScheduler()
        self.on_complete = on_complete

        self.phase = Phase.IDLE
        self.auto_check_enabled = auto_check_enabled
        self.auto_check_delay_ms = auto_check_delay_ms

        self.transcript = ""
        self.live_verdict: Optional[MatchVerdict] = None
        self.final_verdict: Optional[MatchVerdict] = None
        self.advisory: Optional[SpeechCaptureError] = None
        self.capture_active = False
        self.final_result: Optional[FinalResult] = None

        # Clock accounting
        self._game_start: Optional[int] = None
        self._pause_anchor: Optional[int] = None
        self._total_paused_ms = 0
        self._display_elapsed_ms = 0

        # Timers and the tokens that identify the live ones
        self._auto_check_timer: Optional[TimerHandle] = None
        self._advance_timer: Optional[TimerHandle] = None
        self._tick_timer: Optional[TimerHandle] = None
        self._auto_check_token = 0
        self._advance_token = 0
        self._tick_token = 0
        self._resume_phase = Phase.LISTENING
        self.auto_check_deadline: Optional[int] = None

        self._events: "queue.Queue[object]" = queue.Queue()
        self._drain_lock = threading.Lock()
        self._unsubscribe = speech.subscribe(self.post) if speech else None

    # ------------------------------------------------------------------
    # Inbound queue
    # ------------------------------------------------------------------

    def post(self, event) -> None:
        """Queue an event and process the queue unless another caller is."""
        self._events.put(event)
        self._drain_pending()

    def flush(self, timeout_s: float = 0.05) -> bool:
        """Wait briefly for another thread's drain, then handle what is left.

        ``post`` returns at once when a timer thread is draining, so a caller
        that renders right after posting uses this to see its own event.

        Returns:
            False if the queue could not be drained within ``timeout_s``
        """
        if not self._drain_lock.acquire(timeout=timeout_s):
            return False
        try:
            self._drain()
        finally:
            self._drain_lock.release()
        self._drain_pending()
        return True

    def _drain_pending(self) -> None:
        """Drain events left behind by a concurrent ``post``, if no one else is."""
        # Re-checked after each release: an event queued between the last
        # get and the release has no drainer yet.
        while not self._events.empty():
            if not self._drain_lock.acquire(blocking=False):
                return
            try:
                self._drain()
            finally:
                self._drain_lock.release()

    def _drain(self) -> None:
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return
            try:
                self._dispatch(event)
            except Exception:  # noqa: BLE001
                logger.exception("[TIMELINE] Failed to handle %s", type(event).__name__)

    def _dispatch(self, event) -> None:
        handler = self._HANDLERS.get(type(event))
        if handler is None:
            logger.warning("[TIMELINE] Unknown event %r", event)
            return
        handler(self, event)

    # ------------------------------------------------------------------
    # Public actions
    # ------------------------------------------------------------------

    def start(self) -> None:
        self.post(events.StartRequested())

    def pause(self) -> None:
        self.post(events.PauseRequested())

    def resume(self) -> None:
        self.post(events.ResumeRequested())

    def check(self) -> None:
        self.post(events.CheckRequested())

    def skip(self) -> None:
        self.post(events.SkipRequested())

    def submit_text(self, text: str) -> None:
        """Keyboard fallback: typed text counts as a transcript update."""
        self.post(events.TranscriptUpdate(transcript=text or ""))

    def restart_capture(self) -> None:
        self.post(events.RestartCaptureRequested())

    def set_auto_check(self, enabled: bool, delay_ms: int) -> None:
        self.post(events.AutoCheckChanged(enabled=enabled, delay_ms=int(delay_ms)))

    def close(self) -> None:
        """Cancel every timer and detach from the speech source."""
        self._cancel_all_timers()
        if self.speech:
            self.speech.stop()
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def is_complete(self) -> bool:
        return self.phase == Phase.COMPLETE

    def elapsed_ms(self) -> int:
        """Pause-aware play time: ``now - start - paused``, frozen while paused."""
        if self._game_start is None:
            return 0
        if self.final_result is not None:
            return self.final_result.elapsed_time_ms
        reference = (
            self._pause_anchor if self._pause_anchor is not None else self.scheduler.now()
        )
        return max(0, reference - self._game_start - self._total_paused_ms)

    def snapshot(self) -> TimelineSnapshot:
        total = len(self.session.phrases)
        return TimelineSnapshot(
            phase=self.phase,
            session=self.session,
            phrase=current_phrase(self.session),
            round_number=min(self.session.current_index + 1, total),
            round_total=total,
            transcript=self.transcript,
            live_verdict=self.live_verdict,
            final_verdict=self.final_verdict,
            accuracy=calculate_accuracy(self.session),
            elapsed_ms=self._display_elapsed_ms,
            advisory=self.advisory.message if self.advisory else None,
            capture_active=self.capture_active,
            auto_check_enabled=self.auto_check_enabled,
            auto_check_delay_ms=self.auto_check_delay_ms,
            final_result=self.final_result,
        )

    # ------------------------------------------------------------------
    # Action handlers
    # ------------------------------------------------------------------

    def _on_start(self, _event) -> None:
        if self.phase != Phase.IDLE:
            self._reject("start")
            return
        if is_session_complete(self.session):
            self._complete()
            return
        self._game_start = self.scheduler.now()
        self._set_phase(Phase.LISTENING)
        self._start_capture()
        self._start_tick()

    def _on_pause(self, _event) -> None:
        if self.phase != Phase.LISTENING:
            self._reject("pause")
            return
        self._pause_anchor = self.scheduler.now()
        self._display_elapsed_ms = self.elapsed_ms()
        self._cancel_auto_check()
        self._cancel_tick()
        self._stop_capture()
        self.live_verdict = None
        self._set_phase(Phase.PAUSED)

    def _on_resume(self, _event) -> None:
        if self.phase != Phase.PAUSED:
            self._reject("resume")
            return
        self._total_paused_ms += self.scheduler.now() - self._pause_anchor
        self._pause_anchor = None
        self._set_phase(Phase.LISTENING)
        self._start_capture()
        self._start_tick()

    def _on_check(self, _event) -> None:
        if self.phase not in (Phase.LISTENING, Phase.PAUSED):
            self._reject("check")
            return
        self._commit("check")

    def _on_skip(self, _event) -> None:
        if self.phase not in (Phase.LISTENING, Phase.PAUSED):
            self._reject("skip")
            return
        phrase = current_phrase(self.session)
        if phrase is None:
            self._reject("skip")
            return
        logger.info("[TIMELINE] Skipped phrase %s", phrase.id)
        self._cancel_auto_check()
        self.session = add_round_result(
            self.session, RoundResult(phrase_id=phrase.id, similarity=0)
        )
        save_session(self.store, self.session)
        self._resume_phase = self.phase
        self._advance()

    def _on_restart_capture(self, _event) -> None:
        if self.phase != Phase.LISTENING:
            self._reject("restart capture")
            return
        self._cancel_auto_check()
        self._stop_capture()
        self.transcript = ""
        self.live_verdict = None
        self.advisory = None
        self._start_capture()

    def _on_auto_check_changed(self, event: events.AutoCheckChanged) -> None:
        self.auto_check_enabled = event.enabled
        self.auto_check_delay_ms = max(0, event.delay_ms)
        self._cancel_auto_check()
        logger.info(
            "[TIMELINE] Auto-check %s (%dms)",
            "enabled" if event.enabled else "disabled",
            self.auto_check_delay_ms,
        )

    # ------------------------------------------------------------------
    # Speech handlers
    # ------------------------------------------------------------------

    def _on_transcript(self, event: events.TranscriptUpdate) -> None:
        if self.phase != Phase.LISTENING:
            logger.debug("[TIMELINE] Ignoring transcript in phase %s", self.phase.value)
            return
        phrase = current_phrase(self.session)
        if phrase is None:
            return
        self.transcript = event.transcript.strip()
        if not self.transcript:
            self.live_verdict = None
            self._cancel_auto_check()
            return
        # Live feedback only; nothing is committed here.
        self.live_verdict = evaluate(self.transcript, phrase.text)
        self.final_verdict = None
        if self.auto_check_enabled and self.auto_check_delay_ms > 0:
            self._arm_auto_check()

    def _on_speech_error(self, event: events.SpeechError) -> None:
        self.advisory = speech_error_for_kind(event.kind, event.detail)
        self.capture_active = False
        self._cancel_auto_check()
        logger.warning("[TIMELINE] Speech advisory: %s", self.advisory.message)

    def _on_speech_stopped(self, _event) -> None:
        self.capture_active = False
        self._cancel_auto_check()
        self.live_verdict = None
        logger.info("[TIMELINE] Speech capture ended")

    # ------------------------------------------------------------------
    # Timer handlers
    # ------------------------------------------------------------------

    def _on_auto_check_due(self, event: events.AutoCheckDue) -> None:
        if event.token != self._auto_check_token or self.phase != Phase.LISTENING:
            logger.debug("[TIMELINE] Dropping stale auto-check")
            return
        self._auto_check_timer = None
        self.auto_check_deadline = None
        self._commit("auto-check")

    def _on_advance_due(self, event: events.AdvanceDue) -> None:
        if event.token != self._advance_token or self.phase != Phase.ADVANCING:
            logger.debug("[TIMELINE] Dropping stale advance")
            return
        self._advance_timer = None
        self._advance()

    def _on_tick(self, event: events.Tick) -> None:
        if event.token != self._tick_token or self.phase in (Phase.PAUSED, Phase.COMPLETE):
            return
        self._display_elapsed_ms = self.elapsed_ms()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _commit(self, trigger: str) -> None:
        phrase = current_phrase(self.session)
        if phrase is None or not self.transcript:
            logger.info("[TIMELINE] Nothing to %s yet", trigger)
            return

        previous = self.phase
        self._set_phase(Phase.SCORING)
        self._cancel_auto_check()
        verdict = evaluate(self.transcript, phrase.text)
        self.final_verdict = verdict
        logger.info(
            "[TIMELINE] %s on %s: %d%% (%s)",
            trigger,
            phrase.id,
            verdict.similarity,
            "match" if verdict.is_match else "no match",
        )

        if not verdict.is_match:
            self._set_phase(previous)
            if previous == Phase.LISTENING and self.capture_active:
                # The retry is scored on its own, not appended to this attempt.
                self._stop_capture()
                self._start_capture()
            return

        self.session = add_round_result(
            self.session, RoundResult(phrase_id=phrase.id, similarity=verdict.similarity)
        )
        save_session(self.store, self.session)
        self._resume_phase = previous
        self._advance_token += 1
        token = self._advance_token
        self._advance_timer = self.scheduler.call_later(
            SUCCESS_GRACE_MS, lambda: self.post(events.AdvanceDue(token=token))
        )
        self._set_phase(Phase.ADVANCING)

    def _advance(self) -> None:
        self._cancel_auto_check()
        self._cancel_advance()
        self.session = advance_session(self.session)
        self.transcript = ""
        self.live_verdict = None
        self.final_verdict = None

        if is_session_complete(self.session):
            self._complete()
            return

        save_session(self.store, self.session)
        self._set_phase(self._resume_phase)
        if self.phase == Phase.LISTENING and self.capture_active:
            # Fresh listening span so the next phrase starts from silence.
            self._stop_capture()
            self._start_capture()

    def _complete(self) -> None:
        self._cancel_all_timers()
        self._stop_capture()
        if self._game_start is None:
            self._game_start = self.scheduler.now()
        result = FinalResult(
            accuracy=calculate_accuracy(self.session),
            elapsed_time_ms=self.elapsed_ms(),
        )
        self.final_result = result
        self._display_elapsed_ms = result.elapsed_time_ms
        self._set_phase(Phase.COMPLETE)
        save_final_result(self.store, result)
        clear_session(self.store)
        logger.info(
            "[TIMELINE] Session %s complete: accuracy=%d%% time=%dms",
            self.session.id[:8],
            result.accuracy,
            result.elapsed_time_ms,
        )
        if self.on_complete:
            self.on_complete(result)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _set_phase(self, phase: Phase) -> None:
        if phase != self.phase:
            logger.info("[TIMELINE] %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def _reject(self, action: str) -> None:
        logger.info("[TIMELINE] Ignoring %s while %s", action, self.phase.value)

    def _start_capture(self) -> None:
        if not self.speech_supported:
            self.advisory = speech_error_for_kind("unsupported")
            self.capture_active = False
            return
        self.advisory = None
        self.capture_active = True
        self.speech.start()

    def _stop_capture(self) -> None:
        self.capture_active = False
        if self.speech:
            self.speech.stop()

    def _arm_auto_check(self) -> None:
        self._cancel_auto_check()
        self._auto_check_token += 1
        token = self._auto_check_token
        self.auto_check_deadline = self.scheduler.now() + self.auto_check_delay_ms
        self._auto_check_timer = self.scheduler.call_later(
            self.auto_check_delay_ms, lambda: self.post(events.AutoCheckDue(token=token))
        )

    def _cancel_auto_check(self) -> None:
        self._auto_check_token += 1
        self.auto_check_deadline = None
        if self._auto_check_timer:
            self._auto_check_timer.cancel()
            self._auto_check_timer = None

    def _cancel_advance(self) -> None:
        self._advance_token += 1
        if self._advance_timer:
            self._advance_timer.cancel()
            self._advance_timer = None

    def _start_tick(self) -> None:
        self._cancel_tick()
        token = self._tick_token
        self._tick_timer = self.scheduler.call_every(
            DISPLAY_TICK_MS, lambda: self.post(events.Tick(token=token))
        )

    def _cancel_tick(self) -> None:
        self._tick_token += 1
        if self._tick_timer:
            self._tick_timer.cancel()
            self._tick_timer = None

    def _cancel_all_timers(self) -> None:
        self._cancel_auto_check()
        self._cancel_advance()
        self._cancel_tick()

    _HANDLERS = {
        events.StartRequested: _on_start,
        events.PauseRequested: _on_pause,
        events.ResumeRequested: _on_resume,
        events.CheckRequested: _on_check,
        events.SkipRequested: _on_skip,
        events.RestartCaptureRequested: _on_restart_capture,
        events.AutoCheckChanged: _on_auto_check_changed,
        events.TranscriptUpdate: _on_transcript,
        events.SpeechError: _on_speech_error,
        events.SpeechStopped: _on_speech_stopped,
        events.AutoCheckDue: _on_auto_check_due,
        events.AdvanceDue: _on_advance_due,
        events.Tick: _on_tick,
    }

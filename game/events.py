"""Events folded into the round timeline.

Speech events come from the speech capture service, action events from the
UI, and timer events from the scheduler. Timer events carry the token that
was current when they were armed so a stale timer is recognised and dropped.
"""

from dataclasses import dataclass


# Speech capture events


@dataclass(frozen=True)
class TranscriptUpdate:
    transcript: str


@dataclass(frozen=True)
class SpeechError:
    kind: str  # unsupported | permission-denied | network | other
    detail: str = ""


@dataclass(frozen=True)
class SpeechStopped:
    """The recognizer ended on its own (not via an explicit ``stop``)."""


# Player actions


@dataclass(frozen=True)
class StartRequested:
    pass


@dataclass(frozen=True)
class PauseRequested:
    pass


@dataclass(frozen=True)
class ResumeRequested:
    pass


@dataclass(frozen=True)
class CheckRequested:
    pass


@dataclass(frozen=True)
class SkipRequested:
    pass


@dataclass(frozen=True)
class RestartCaptureRequested:
    pass


@dataclass(frozen=True)
class AutoCheckChanged:
    enabled: bool
    delay_ms: int


# Timers


@dataclass(frozen=True)
class AutoCheckDue:
    token: int


@dataclass(frozen=True)
class AdvanceDue:
    token: int


@dataclass(frozen=True)
class Tick:
    token: int

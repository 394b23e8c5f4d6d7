"""Error taxonomy for the tongue twister game.

Only the asynchronous boundaries fail: phrase generation raises to its
caller, speech capture failures are turned into advisories by the timeline,
and persistence failures are swallowed by the store helpers.
"""

from typing import Dict, Optional, Type


class TwisterError(Exception):
    """Base class for all game errors."""


class GenerationFailure(TwisterError):
    """Phrase generation service unreachable, misconfigured or empty."""


class PersistenceFailure(TwisterError):
    """A key-value store operation failed."""


class SpeechCaptureError(TwisterError):
    """Base class for speech capture advisories."""

    kind = "other"
    default_message = "Speech recognition error."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class SpeechCaptureUnsupported(SpeechCaptureError):
    kind = "unsupported"
    default_message = "Speech recognition is not supported in this browser."


class SpeechPermissionDenied(SpeechCaptureError):
    kind = "permission-denied"
    default_message = (
        "Microphone permission is blocked. You can keep playing with keyboard fallback."
    )


class SpeechNetworkError(SpeechCaptureError):
    kind = "network"
    default_message = (
        "No internet connection. Speech recognition requires internet to work."
    )


class SpeechCaptureFailed(SpeechCaptureError):
    kind = "other"


SPEECH_ERRORS: Dict[str, Type[SpeechCaptureError]] = {
    SpeechCaptureUnsupported.kind: SpeechCaptureUnsupported,
    SpeechPermissionDenied.kind: SpeechPermissionDenied,
    SpeechNetworkError.kind: SpeechNetworkError,
    SpeechCaptureFailed.kind: SpeechCaptureFailed,
}


def speech_error_for_kind(kind: str, detail: str = "") -> SpeechCaptureError:
    """Build the advisory for a speech source ``errorKind``.

    Unknown kinds fall back to the generic ``other`` error.
    """
    error_cls = SPEECH_ERRORS.get(kind, SpeechCaptureFailed)
    if error_cls is SpeechCaptureFailed:
        return SpeechCaptureFailed(f"Speech recognition error: {detail or kind}.")
    return error_cls()

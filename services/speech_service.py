"""Speech capture service.

A ``SpeechSource`` behaves like a continuous browser recognizer with interim
results: between ``start`` and ``stop`` every recognised chunk extends the
running transcript and is emitted as a ``TranscriptUpdate``. Failures are
emitted as ``SpeechError`` events using the ``unsupported`` /
``permission-denied`` / ``network`` / ``other`` taxonomy; nothing is raised
to the listener.

``WhisperSpeechSource`` produces those chunks by sending recorded
microphone clips to the OpenAI transcription API.
"""

import logging
from typing import Callable, List, Optional

import openai

from game.events import SpeechError, SpeechStopped, TranscriptUpdate

logger = logging.getLogger(__name__)

SpeechListener = Callable[[object], None]


class SpeechSource:
    """Event emitter for transcript updates, errors and stop signals."""

    def __init__(self, supported: bool = True):
        self._supported = supported
        self._listening = False
        self._chunks: List[str] = []
        self._listeners: List[SpeechListener] = []

    @property
    def is_supported(self) -> bool:
        return self._supported

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def transcript(self) -> str:
        return " ".join(self._chunks).strip()

    def subscribe(self, listener: SpeechListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def start(self) -> None:
        """Begin a new listening span with an empty transcript."""
        if not self._supported:
            self._emit(SpeechError(kind="unsupported"))
            return
        if self._listening:
            # Already capturing; a second start is a no-op.
            return
        self._chunks = []
        self._listening = True
        logger.info("[SPEECH] Capture started")

    def stop(self) -> None:
        """End the listening span. Explicit stops emit nothing."""
        if self._listening:
            logger.info("[SPEECH] Capture stopped")
        self._listening = False

    def push_transcript(self, chunk: str) -> None:
        """Append a recognised chunk and emit the running transcript."""
        chunk = (chunk or "").strip()
        if not self._listening or not chunk:
            return
        self._chunks.append(chunk)
        self._emit(TranscriptUpdate(transcript=self.transcript))

    def report_error(self, kind: str, detail: str = "") -> None:
        """Terminal error from the recognizer; capture ends."""
        logger.warning("[SPEECH] Recognition error (%s): %s", kind, detail)
        self._listening = False
        self._emit(SpeechError(kind=kind, detail=detail))

    def report_ended(self) -> None:
        """The recognizer ended on its own."""
        if not self._listening:
            return
        self._listening = False
        self._emit(SpeechStopped())

    def _emit(self, event) -> None:
        for listener in list(self._listeners):
            listener(event)


class WhisperSpeechSource(SpeechSource):
    """Speech source that transcribes recorded clips with OpenAI Whisper."""

    def __init__(self, client: Optional[openai.OpenAI] = None, model: str = "whisper-1"):
        super().__init__(supported=client is not None)
        self.client = client
        self.model = model

    def feed_audio(self, audio_path: Optional[str]) -> str:
        """Transcribe one recorded clip into the current listening span.

        Returns:
            The recognised text for this clip, or "" when nothing was added
        """
        if not audio_path or not self.is_listening:
            return ""

        try:
            with open(audio_path, "rb") as audio_file:
                result = self.client.audio.transcriptions.create(
                    model=self.model, file=audio_file
                )
        except openai.APIConnectionError as e:
            self.report_error("network", str(e))
            return ""
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            self.report_error("permission-denied", str(e))
            return ""
        except openai.OpenAIError as e:
            self.report_error("other", str(e))
            return ""
        except OSError as e:
            self.report_error("other", f"could not read audio ({e})")
            return ""

        text = (getattr(result, "text", "") or "").strip()
        logger.info("[SPEECH] Transcribed %d chars", len(text))
        self.push_transcript(text)
        return text

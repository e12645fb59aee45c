from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal, Protocol

from learning_assistant.errors import CaptureError, CaptureInProgress, UnsupportedCapability

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    ERROR = "error"


@dataclass(frozen=True)
class CaptureConfig:
    locale: str = "en-US"
    interim_results: bool = False
    max_alternatives: int = 1


@dataclass(frozen=True)
class SpeechEvent:
    """Terminal event of one provider session: a transcript, an error, or a silent end."""

    kind: Literal["result", "error", "end"]
    transcript: str = ""
    error: str | None = None


@dataclass(frozen=True)
class CaptureOutcome:
    kind: Literal["result", "error", "end"]
    text: str | None = None
    error: str | None = None


class SpeechProvider(Protocol):
    @property
    def available(self) -> bool: ...

    async def capture(self, config: CaptureConfig) -> SpeechEvent: ...


class NullSpeechProvider:
    """Stands in for platforms without a speech-to-text engine."""

    @property
    def available(self) -> bool:
        return False

    async def capture(self, config: CaptureConfig) -> SpeechEvent:
        raise UnsupportedCapability("Speech recognition is not supported on this platform.")


class SpeechCaptureAdapter:
    """
    Idle -> Listening -> (Error ->) Idle around a single provider session.

    The platform does not support overlapping sessions, so a start request
    while Listening is rejected with CaptureInProgress rather than forwarded.
    Every accepted call produces exactly one outcome and leaves the adapter Idle.
    """

    def __init__(self, provider: SpeechProvider | None = None, *, config: CaptureConfig | None = None) -> None:
        self.provider: SpeechProvider = provider or NullSpeechProvider()
        self.config = config or CaptureConfig()
        self.state = CaptureState.IDLE
        self._error_listeners: list[Callable[[CaptureError], None]] = []

    @property
    def is_listening(self) -> bool:
        return self.state == CaptureState.LISTENING

    def on_error(self, callback: Callable[[CaptureError], None]) -> None:
        self._error_listeners.append(callback)

    async def start_capture(self) -> CaptureOutcome:
        if not self.provider.available:
            raise UnsupportedCapability("Speech recognition is not supported on this platform.")
        if self.state == CaptureState.LISTENING:
            raise CaptureInProgress("A capture session is already listening.")

        self.state = CaptureState.LISTENING
        logger.info("capture_start locale=%s", self.config.locale)
        try:
            try:
                event = await self.provider.capture(self.config)
            except UnsupportedCapability:
                raise
            except Exception as e:
                event = SpeechEvent(kind="error", error=f"{type(e).__name__}: {e}")
            return self._finish(event)
        finally:
            self.state = CaptureState.IDLE

    def _finish(self, event: SpeechEvent) -> CaptureOutcome:
        if event.kind == "result" and (event.transcript or "").strip():
            logger.info("capture_result chars=%d", len(event.transcript))
            return CaptureOutcome(kind="result", text=event.transcript.strip())

        if event.kind == "error":
            self.state = CaptureState.ERROR
            detail = event.error or "unknown capture error"
            logger.warning("capture_error detail=%s", detail)
            err = CaptureError(detail)
            for cb in list(self._error_listeners):
                try:
                    cb(err)
                except Exception:
                    logger.exception("capture_error_listener_failed")
            return CaptureOutcome(kind="error", error=detail)

        logger.info("capture_end_without_result")
        return CaptureOutcome(kind="end")

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Protocol, Sequence

from learning_assistant.career import CareerCatalog, SuggestionPrompt
from learning_assistant.conversation import ConversationStore
from learning_assistant.errors import CaptureInProgress, InferenceFailure, UnsupportedCapability
from learning_assistant.prompts import (
    INFERENCE_FAILED_NOTICE,
    SPEECH_ERROR_NOTICE,
    SPEECH_UNSUPPORTED_NOTICE,
)
from learning_assistant.schemas import Role, Turn
from learning_assistant.session import Navigator, Redirect, RedirectNavigator, SessionContext
from learning_assistant.speech import SpeechCaptureAdapter
from learning_assistant.topics import TopicTracker

logger = logging.getLogger(__name__)


class Completer(Protocol):
    async def complete(self, history: Sequence[Turn]) -> str: ...


@dataclass(frozen=True)
class SubmitResult:
    accepted: bool
    reason: str | None = None  # "empty" | "busy" | "unsupported" | "capture_busy" | "capture_error" | "no_speech"
    reply: str | None = None
    notice: str | None = None
    suggestion: SuggestionPrompt | None = None


class Orchestrator:
    """
    Drives one chat session: the only component that talks to the store,
    the topic tracker, the completion client and the speech adapter.

    `processing` serializes submissions, so at most one completion is in
    flight and replies are appended in submission order.
    """

    def __init__(
        self,
        *,
        context: SessionContext,
        client: Completer,
        store: ConversationStore | None = None,
        tracker: TopicTracker | None = None,
        speech: SpeechCaptureAdapter | None = None,
        catalog: CareerCatalog | None = None,
        navigator: Navigator | None = None,
    ) -> None:
        self.context = context
        self.client = client
        self.store = store or ConversationStore()
        self.tracker = tracker or TopicTracker()
        self.speech = speech or SpeechCaptureAdapter()
        self.catalog = catalog or CareerCatalog()
        self.navigator: Navigator = navigator or RedirectNavigator()
        self.processing = False
        self.pending_suggestion: SuggestionPrompt | None = None
        self._notice_listeners: list[Callable[[str], None]] = []
        self._suggestion_listeners: list[Callable[[SuggestionPrompt], None]] = []
        self.tracker.on_trend(self._on_trend)

    def on_notice(self, callback: Callable[[str], None]) -> None:
        self._notice_listeners.append(callback)

    def on_suggestion(self, callback: Callable[[SuggestionPrompt], None]) -> None:
        self._suggestion_listeners.append(callback)

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self.processing = True
        try:
            yield
        finally:
            self.processing = False

    async def submit(self, text: str) -> SubmitResult:
        if not (text or "").strip():
            return SubmitResult(accepted=False, reason="empty")
        if self.processing:
            logger.debug("submit_rejected_busy session=%s", self.context.session_id)
            return SubmitResult(accepted=False, reason="busy")

        self.store.append(Turn(role=Role.user, content=text))
        with self._busy():
            fired = self.tracker.record(text)
            suggestion = self.pending_suggestion if fired else None
            try:
                reply = await self.client.complete(self.store.snapshot())
            except InferenceFailure as e:
                logger.warning(
                    "inference_failed session=%s status=%s detail=%s",
                    self.context.session_id,
                    e.status_code,
                    e,
                )
                return SubmitResult(accepted=True, notice=self._notify(INFERENCE_FAILED_NOTICE), suggestion=suggestion)
            except Exception:
                logger.exception("inference_crashed session=%s", self.context.session_id)
                return SubmitResult(accepted=True, notice=self._notify(INFERENCE_FAILED_NOTICE), suggestion=suggestion)

            self.store.append(Turn(role=Role.assistant, content=reply))
            return SubmitResult(accepted=True, reply=reply, suggestion=suggestion)

    async def dictate(self) -> SubmitResult:
        """Capture one spoken utterance and feed it through submit()."""
        if self.processing:
            return SubmitResult(accepted=False, reason="busy")
        try:
            outcome = await self.speech.start_capture()
        except UnsupportedCapability:
            return SubmitResult(accepted=False, reason="unsupported", notice=self._notify(SPEECH_UNSUPPORTED_NOTICE))
        except CaptureInProgress:
            logger.debug("dictate_rejected_listening session=%s", self.context.session_id)
            return SubmitResult(accepted=False, reason="capture_busy")

        if outcome.kind == "result" and outcome.text:
            return await self.submit(outcome.text)
        if outcome.kind == "error":
            return SubmitResult(accepted=False, reason="capture_error", notice=self._notify(SPEECH_ERROR_NOTICE))
        return SubmitResult(accepted=False, reason="no_speech")

    def accept_suggestion(self) -> Redirect | None:
        suggestion = self.pending_suggestion
        if suggestion is None:
            return None
        self.pending_suggestion = None
        logger.info("suggestion_accepted session=%s topic=%s", self.context.session_id, suggestion.topic)
        return self.navigator.open_resume_builder(suggestion.topic, self.context)

    def dismiss_suggestion(self) -> None:
        self.pending_suggestion = None

    def _on_trend(self, topic: str) -> None:
        self.pending_suggestion = self.catalog.suggestion_for(topic)
        for cb in list(self._suggestion_listeners):
            cb(self.pending_suggestion)

    def _notify(self, notice: str) -> str:
        for cb in list(self._notice_listeners):
            cb(notice)
        return notice

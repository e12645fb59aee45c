from __future__ import annotations


class AssistantError(Exception):
    """Base class for errors raised by the chat session engine."""


class UnsupportedCapability(AssistantError):
    """No speech-to-text engine is available on this platform."""


class CaptureInProgress(AssistantError):
    """A capture session is already listening."""


class CaptureError(AssistantError):
    """The speech provider reported an error mid-capture."""


class InferenceFailure(AssistantError):
    """
    The completion call failed (network, non-success status, malformed body).
    A timeout is not a failure; it degrades to a canned reply instead.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

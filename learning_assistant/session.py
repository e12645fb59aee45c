from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlencode


@dataclass(frozen=True)
class SessionContext:
    """Per-session flags the UI boundary passes in explicitly."""

    session_id: str
    logged_in: bool = False
    user_name: str | None = None


class Navigator(Protocol):
    def open_resume_builder(self, topic: str, context: SessionContext) -> Redirect: ...


@dataclass(frozen=True)
class Redirect:
    path: str
    topic: str


class RedirectNavigator:
    """Hands the accepted trend to the resume builder page as a client redirect."""

    def __init__(self, path: str = "/resume-builder") -> None:
        self.path = path

    def open_resume_builder(self, topic: str, context: SessionContext) -> Redirect:
        del context
        return Redirect(path=f"{self.path}?{urlencode({'topic': topic})}", topic=topic)

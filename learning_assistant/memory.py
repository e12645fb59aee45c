from __future__ import annotations

from dataclasses import replace
from typing import Callable

from cachetools import TTLCache

from learning_assistant.orchestrator import Orchestrator
from learning_assistant.session import SessionContext

OrchestratorFactory = Callable[[SessionContext], Orchestrator]


class SessionStore:
    def __init__(
        self,
        factory: OrchestratorFactory,
        *,
        maxsize: int = 10_000,
        ttl_seconds: int = 60 * 60,
    ) -> None:
        self._factory = factory
        self._cache: TTLCache[str, Orchestrator] = TTLCache(maxsize=maxsize, ttl=ttl_seconds)

    def get(self, session_id: str) -> Orchestrator | None:
        return self._cache.get(session_id)

    def get_or_create(self, context: SessionContext) -> Orchestrator:
        session = self._cache.get(context.session_id)
        if session is None:
            session = self._factory(context)
            self._cache[context.session_id] = session
        else:
            session.context = replace(session.context, logged_in=context.logged_in, user_name=context.user_name)
        return session

    def __len__(self) -> int:
        return len(self._cache)

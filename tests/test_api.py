from __future__ import annotations

import threading
from typing import Sequence

import pytest
from fastapi.testclient import TestClient

from learning_assistant import main
from learning_assistant.memory import SessionStore
from learning_assistant.orchestrator import Orchestrator, SubmitResult
from learning_assistant.prompts import GREETING
from learning_assistant.schemas import Turn
from learning_assistant.session import Redirect, SessionContext
from learning_assistant.settings import Settings
from learning_assistant.speech import CaptureConfig, CaptureState, SpeechCaptureAdapter, SpeechEvent
from learning_assistant.topics import TopicTracker


class FakeCompleter:
    def __init__(self) -> None:
        self.calls = 0

    async def complete(self, history: Sequence[Turn]) -> str:
        self.calls += 1
        return f"answer {self.calls}"


@pytest.fixture
def api(monkeypatch) -> TestClient:
    def factory(context: SessionContext) -> Orchestrator:
        return Orchestrator(context=context, client=FakeCompleter(), tracker=TopicTracker(threshold=2))

    monkeypatch.setattr(main, "store", SessionStore(factory))
    return TestClient(main.app)


def _start(api: TestClient, session_id: str = "abc") -> dict:
    r = api.post("/chat/session", json={"sessionId": session_id})
    assert r.status_code == 200
    return r.json()


def test_health(api: TestClient) -> None:
    assert api.get("/health").json() == {"ok": True}


def test_session_starts_with_greeting(api: TestClient) -> None:
    data = _start(api)
    assert data["sessionId"] == "abc"
    assert data["turns"] == [{"role": "assistant", "content": GREETING}]
    assert data["processing"] is False
    assert data["listening"] is False
    assert data["suggestion"] is None


def test_session_updates_login_context(api: TestClient) -> None:
    _start(api)
    api.post("/chat/session", json={"sessionId": "abc", "loggedIn": True, "userName": "sam"})
    session = main.store.get("abc")
    assert session is not None
    assert session.context == SessionContext(session_id="abc", logged_in=True, user_name="sam")


def test_submit_returns_reply_and_transcript(api: TestClient) -> None:
    _start(api)
    r = api.post("/chat/submit", json={"sessionId": "abc", "text": "What is an atom?"})
    assert r.status_code == 200
    data = r.json()
    assert data["accepted"] is True
    assert data["reply"] == "answer 1"
    assert [t["content"] for t in data["turns"]] == [GREETING, "What is an atom?", "answer 1"]

    transcript = api.get("/chat/transcript", params={"sessionId": "abc"}).json()
    assert len(transcript["turns"]) == 3


def test_blank_submit_is_ignored(api: TestClient) -> None:
    _start(api)
    data = api.post("/chat/submit", json={"sessionId": "abc", "text": "  "}).json()
    assert data["accepted"] is False
    assert data["reason"] == "empty"
    assert len(data["turns"]) == 1


def test_unknown_session_is_404(api: TestClient) -> None:
    assert api.get("/chat/transcript", params={"sessionId": "nope"}).status_code == 404
    assert api.post("/chat/submit", json={"sessionId": "nope", "text": "hi"}).status_code == 404


def test_voice_without_speech_engine_is_501(api: TestClient) -> None:
    _start(api)
    r = api.post("/chat/voice", json={"sessionId": "abc"})
    assert r.status_code == 501


def test_trend_suggestion_accept_flow(api: TestClient) -> None:
    _start(api)
    first = api.post("/chat/submit", json={"sessionId": "abc", "text": "cloud computing"}).json()
    assert first["suggestion"] is None
    second = api.post("/chat/submit", json={"sessionId": "abc", "text": "cloud computing!"}).json()
    assert second["suggestion"]["topic"] == "cloud computing"
    assert "Cloud Engineer" in second["suggestion"]["careerPaths"]

    r = api.post("/career/accept", json={"sessionId": "abc"})
    assert r.status_code == 200
    assert r.json() == {"redirect": "/resume-builder?topic=cloud+computing", "topic": "cloud computing"}

    assert api.post("/career/accept", json={"sessionId": "abc"}).status_code == 404


def test_dismiss_suggestion(api: TestClient) -> None:
    _start(api)
    for _ in range(2):
        api.post("/chat/submit", json={"sessionId": "abc", "text": "data science"})
    assert api.post("/career/dismiss", json={"sessionId": "abc"}).json() == {"ok": True}
    assert api.get("/chat/transcript", params={"sessionId": "abc"}).json()["suggestion"] is None


def test_missing_api_key_fails_session_setup(monkeypatch) -> None:
    monkeypatch.setattr(main, "settings", Settings(openrouter_api_key=None))
    monkeypatch.setattr(main, "store", SessionStore(main.build_session))
    r = TestClient(main.app).post("/chat/session", json={"sessionId": "abc"})
    assert r.status_code == 500
    assert "OPENROUTER_API_KEY" in r.json()["detail"]


class ThreadRecordingOrchestrator(Orchestrator):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.threads: dict[str, int] = {}

    async def submit(self, text: str) -> SubmitResult:
        self.threads["submit"] = threading.get_ident()
        return await super().submit(text)

    def accept_suggestion(self) -> Redirect | None:
        self.threads["accept"] = threading.get_ident()
        return super().accept_suggestion()

    def dismiss_suggestion(self) -> None:
        self.threads["dismiss"] = threading.get_ident()
        super().dismiss_suggestion()


def test_session_state_is_touched_from_the_event_loop_thread(monkeypatch) -> None:
    def factory(context: SessionContext) -> Orchestrator:
        return ThreadRecordingOrchestrator(context=context, client=FakeCompleter(), tracker=TopicTracker(threshold=1))

    monkeypatch.setattr(main, "store", SessionStore(factory))
    with TestClient(main.app) as api:
        _start(api)
        api.post("/chat/submit", json={"sessionId": "abc", "text": "cloud computing"})
        assert api.post("/career/accept", json={"sessionId": "abc"}).status_code == 200
        api.post("/career/dismiss", json={"sessionId": "abc"})

    session = main.store.get("abc")
    assert isinstance(session, ThreadRecordingOrchestrator)
    assert set(session.threads) == {"submit", "accept", "dismiss"}
    assert len(set(session.threads.values())) == 1


def test_voice_while_listening_is_409(monkeypatch) -> None:
    class ListeningProvider:
        available = True

        async def capture(self, config: CaptureConfig) -> SpeechEvent:
            raise AssertionError("provider must not be called while listening")

    def factory(context: SessionContext) -> Orchestrator:
        return Orchestrator(
            context=context,
            client=FakeCompleter(),
            speech=SpeechCaptureAdapter(ListeningProvider()),
        )

    monkeypatch.setattr(main, "store", SessionStore(factory))
    api = TestClient(main.app)
    _start(api)
    main.store.get("abc").speech.state = CaptureState.LISTENING

    r = api.post("/chat/voice", json={"sessionId": "abc"})
    assert r.status_code == 409

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from learning_assistant.career import CareerCatalog, SuggestionPrompt
from learning_assistant.completion_client import InferenceClient
from learning_assistant.memory import SessionStore
from learning_assistant.orchestrator import Orchestrator, SubmitResult
from learning_assistant.schemas import (
    RedirectResponse,
    SessionRef,
    SessionRequest,
    SubmitRequest,
    SubmitResponse,
    SuggestionOut,
    TranscriptResponse,
)
from learning_assistant.session import RedirectNavigator, SessionContext
from learning_assistant.settings import get_settings
from learning_assistant.speech import CaptureConfig, NullSpeechProvider, SpeechCaptureAdapter, SpeechProvider
from learning_assistant.topics import TopicTracker

settings = get_settings()

logging.basicConfig(level=settings.log_level, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("learning_assistant")

app = FastAPI(title="ThinkSpark Learning Assistant API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Speech runs on the client in the browser build; server-side there is no engine by default.
speech_provider: SpeechProvider = NullSpeechProvider()


def build_session(context: SessionContext) -> Orchestrator:
    return Orchestrator(
        context=context,
        client=InferenceClient.from_settings(settings),
        tracker=TopicTracker(threshold=settings.trend_threshold, window_size=settings.topic_window_size),
        speech=SpeechCaptureAdapter(speech_provider, config=CaptureConfig(locale=settings.speech_locale)),
        catalog=CareerCatalog(),
        navigator=RedirectNavigator(),
    )


store = SessionStore(build_session, maxsize=settings.session_max, ttl_seconds=settings.session_ttl_seconds)


def _suggestion_out(s: SuggestionPrompt | None) -> SuggestionOut | None:
    if s is None:
        return None
    return SuggestionOut(topic=s.topic, careerPaths=list(s.career_paths), question=s.question)


def _transcript(session: Orchestrator) -> TranscriptResponse:
    return TranscriptResponse(
        sessionId=session.context.session_id,
        turns=list(session.store.snapshot()),
        processing=session.processing,
        listening=session.speech.is_listening,
        suggestion=_suggestion_out(session.pending_suggestion),
    )


def _submit_response(session: Orchestrator, result: SubmitResult) -> SubmitResponse:
    return SubmitResponse(
        accepted=result.accepted,
        reason=result.reason,
        reply=result.reply,
        notice=result.notice,
        suggestion=_suggestion_out(result.suggestion),
        turns=list(session.store.snapshot()),
    )


def _require_session(session_id: str) -> Orchestrator:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return session


@app.get("/health")
async def health() -> dict:
    return {"ok": True}


@app.post("/chat/session", response_model=TranscriptResponse)
async def chat_session(req: SessionRequest) -> TranscriptResponse:
    context = SessionContext(session_id=req.sessionId, logged_in=req.loggedIn, user_name=req.userName)
    try:
        session = store.get_or_create(context)
    except RuntimeError as e:
        logger.error("session_setup_failed session=%s detail=%s", req.sessionId, e)
        raise HTTPException(status_code=500, detail=f"Session setup failed: {e}")
    return _transcript(session)


@app.get("/chat/transcript", response_model=TranscriptResponse)
async def chat_transcript(sessionId: str) -> TranscriptResponse:
    return _transcript(_require_session(sessionId))


@app.post("/chat/submit", response_model=SubmitResponse)
async def chat_submit(req: SubmitRequest) -> SubmitResponse:
    session = _require_session(req.sessionId)
    result = await session.submit(req.text)
    return _submit_response(session, result)


@app.post("/chat/voice", response_model=SubmitResponse)
async def chat_voice(req: SessionRef) -> SubmitResponse:
    session = _require_session(req.sessionId)
    result = await session.dictate()
    if result.reason == "unsupported":
        raise HTTPException(status_code=501, detail=result.notice or "Speech recognition is not supported.")
    if result.reason == "capture_busy":
        raise HTTPException(status_code=409, detail="A capture session is already listening.")
    return _submit_response(session, result)


@app.post("/career/accept", response_model=RedirectResponse)
async def career_accept(req: SessionRef) -> RedirectResponse:
    session = _require_session(req.sessionId)
    redirect = session.accept_suggestion()
    if redirect is None:
        raise HTTPException(status_code=404, detail="No career suggestion is pending.")
    return RedirectResponse(redirect=redirect.path, topic=redirect.topic)


@app.post("/career/dismiss")
async def career_dismiss(req: SessionRef) -> dict:
    _require_session(req.sessionId).dismiss_suggestion()
    return {"ok": True}

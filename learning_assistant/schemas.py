from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    user = "user"
    assistant = "assistant"
    system = "system"


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


# --- completion endpoint wire format ---


class ChatMessage(BaseModel):
    role: Role
    content: str


class ChatCompletionRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    max_tokens: int


class _ReplyMessage(BaseModel):
    content: str


class _Choice(BaseModel):
    message: _ReplyMessage


class ChatCompletionResponse(BaseModel):
    choices: list[_Choice] = Field(..., min_length=1)

    @property
    def reply(self) -> str:
        return self.choices[0].message.content


# --- HTTP boundary ---


class SessionRequest(BaseModel):
    sessionId: str = Field(..., min_length=1)
    loggedIn: bool = False
    userName: str | None = None


class SessionRef(BaseModel):
    sessionId: str = Field(..., min_length=1)


class SubmitRequest(BaseModel):
    sessionId: str = Field(..., min_length=1)
    text: str = Field("", description="Raw learner input; blank input is ignored")


class SuggestionOut(BaseModel):
    topic: str
    careerPaths: list[str]
    question: str


class TranscriptResponse(BaseModel):
    sessionId: str
    turns: list[Turn]
    processing: bool
    listening: bool
    suggestion: SuggestionOut | None = None


class SubmitResponse(BaseModel):
    accepted: bool
    reason: str | None = None
    reply: str | None = None
    notice: str | None = None
    suggestion: SuggestionOut | None = None
    turns: list[Turn]


class RedirectResponse(BaseModel):
    redirect: str
    topic: str

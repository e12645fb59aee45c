from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import httpx
from pydantic import ValidationError

from learning_assistant.errors import InferenceFailure
from learning_assistant.prompts import DEGRADED_REPLY, INSTRUCTION
from learning_assistant.schemas import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    Role,
    Turn,
)
from learning_assistant.settings import Settings

logger = logging.getLogger(__name__)


class InferenceClient:
    """
    OpenRouter-style chat completions client.

    One POST per complete() call under a hard deadline. Exceeding the deadline
    cancels the request and returns DEGRADED_REPLY; every other failure raises
    InferenceFailure. No retries: retrying is the caller's decision.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-3.5-turbo",
        max_tokens: int = 1200,
        timeout_seconds: float = 20.0,
        origin: str = "http://localhost:8080",
        app_title: str = "ThinkSpark AI Learning",
        instruction: str = INSTRUCTION,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise RuntimeError("Missing config: set OPENROUTER_API_KEY.")
        self.api_key = api_key
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.model = model
        self.max_tokens = int(max_tokens)
        self.timeout_seconds = float(timeout_seconds)
        self.origin = origin
        self.app_title = app_title
        self.instruction = instruction
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> "InferenceClient":
        return cls(
            api_key=settings.openrouter_api_key or "",
            base_url=settings.openrouter_base_url,
            model=settings.model,
            max_tokens=settings.max_tokens,
            timeout_seconds=settings.inference_timeout_seconds,
            origin=settings.app_origin,
            app_title=settings.app_title,
            transport=transport,
        )

    def build_request(self, history: Sequence[Turn]) -> ChatCompletionRequest:
        messages = [ChatMessage(role=Role.system, content=self.instruction)]
        messages.extend(ChatMessage(role=t.role, content=t.content) for t in history)
        return ChatCompletionRequest(model=self.model, messages=messages, max_tokens=self.max_tokens)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.origin,
            "X-Title": self.app_title,
        }

    async def complete(self, history: Sequence[Turn]) -> str:
        body = self.build_request(history).model_dump(mode="json")
        logger.info("inference_request model=%s messages=%d", self.model, len(body["messages"]))
        try:
            return await asyncio.wait_for(self._post(body), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("inference_timeout after=%.1fs", self.timeout_seconds)
            return DEGRADED_REPLY

    async def _post(self, body: dict) -> str:
        # The deadline is enforced by complete(); httpx only gets it as an upper bound.
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            try:
                r = await client.post(self.url, headers=self._headers(), json=body)
            except httpx.TimeoutException:
                raise asyncio.TimeoutError()
            except httpx.HTTPError as e:
                logger.warning("inference_transport_error detail=%s", e)
                raise InferenceFailure(f"Completion request failed: {type(e).__name__}: {e}") from e

        if r.status_code >= 400:
            logger.warning("inference_http_error status=%d body=%s", r.status_code, r.text[:500])
            raise InferenceFailure(f"API error: {r.status_code}", status_code=r.status_code)

        try:
            parsed = ChatCompletionResponse.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            raise InferenceFailure(
                f"Malformed completion response: {r.text[:500]}", status_code=r.status_code
            ) from e
        return parsed.reply

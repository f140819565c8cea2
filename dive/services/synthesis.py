"""Text-completion clients used for answer synthesis."""
from __future__ import annotations

import time
from typing import Any, Protocol

from dive.config import settings
from dive.models.interfaces import CompletionResult, TokenUsage
from dive.services import logger as log_service
from dive.services.errors import SynthesisError


class SynthesisClient(Protocol):
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult: ...


class OpenRouterCompletionClient:
    """Chat-completion client for OpenRouter via the OpenAI-compatible SDK."""

    def __init__(self, openai_client: Any, *, model: str | None = None):
        self._client = openai_client
        self.model = model or settings.dive_model

    @staticmethod
    def _parse_response(response: Any) -> CompletionResult:
        choices = getattr(response, "choices", None)
        if not choices:
            raise SynthesisError("Completion response contained no choices")
        message = getattr(choices[0], "message", None)
        if message is None:
            raise SynthesisError("Completion response contained no message")
        text = getattr(message, "content", None)
        if text is not None and not isinstance(text, str):
            raise SynthesisError("Completion response content is not text")

        usage = getattr(response, "usage", None)
        return CompletionResult(
            text=text,
            token_usage=TokenUsage(
                input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            ),
        )

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult:
        started = time.monotonic()
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
            result = self._parse_response(response)
        except Exception as exc:
            log_service.log_llm_call(
                model=self.model,
                caller="dive",
                duration_ms=int((time.monotonic() - started) * 1000),
                status="error",
                error=str(exc),
            )
            raise

        log_service.log_llm_call(
            model=self.model,
            caller="dive",
            input_tokens=result.token_usage.input_tokens,
            output_tokens=result.token_usage.output_tokens,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return result


def get_client() -> OpenRouterCompletionClient:
    """Get an OpenRouter completion client via the OpenAI-compatible SDK."""
    from openai import AsyncOpenAI

    base_url = settings.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    openai_client = AsyncOpenAI(
        api_key=settings.openrouter_api_key,
        base_url=base_url,
        default_headers={
            "HTTP-Referer": settings.app_referer,
            "X-Title": settings.app_title,
        },
    )
    return OpenRouterCompletionClient(openai_client, model=settings.dive_model)


_client: OpenRouterCompletionClient | None = None


def client(model: str | None = None) -> OpenRouterCompletionClient:
    """Get or create the completion client.

    A ``model`` other than the configured one gets its own client that shares
    the underlying SDK connection pool.
    """
    global _client
    if _client is None:
        _client = get_client()
    if model and model != _client.model:
        return OpenRouterCompletionClient(_client._client, model=model)
    return _client

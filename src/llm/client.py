"""LLM client seam: request/response types and the Claude-backed implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from anthropic import Anthropic, APIError

from src.config import settings

logger = logging.getLogger(__name__)

JSON_OBJECT = "json_object"

_JSON_ONLY_INSTRUCTION = (
    "\n\nReturn ONLY a single valid JSON object. "
    "No markdown fences, no explanation."
)


class LLMError(Exception):
    """Any failure to obtain a completion (transport, auth, quota, timeout)."""


@dataclass(frozen=True)
class CompletionRequest:
    """Everything needed for a single completion call."""

    model: str
    system_prompt: str
    user_prompt: str
    temperature: float = 0.3
    max_tokens: int = 2000
    response_format: str | None = None  # "json_object" or None
    timeout: float | None = None


@dataclass
class CompletionResponse:
    """Raw text returned by the model plus bookkeeping."""

    text: str
    model: str = ""
    usage: dict[str, Any] = field(default_factory=dict)
    truncated: bool = False  # generation stopped at max_tokens


class LLMClient(Protocol):
    """Anything that can turn a CompletionRequest into text."""

    def complete(self, request: CompletionRequest) -> CompletionResponse: ...


class AnthropicClient:
    """LLMClient backed by the Anthropic Messages API.

    Every SDK error (connection, timeout, 4xx, 5xx) is re-raised as
    :class:`LLMError` so callers handle a single failure type.
    """

    def __init__(self, api_key: str | None = None, max_retries: int | None = None) -> None:
        self._client = Anthropic(
            api_key=api_key if api_key is not None else settings.anthropic_api_key,
            max_retries=max_retries if max_retries is not None else settings.llm_max_retries,
        )

    def complete(self, request: CompletionRequest) -> CompletionResponse:
        system = request.system_prompt
        if request.response_format == JSON_OBJECT:
            system += _JSON_ONLY_INSTRUCTION

        try:
            response = self._client.messages.create(
                model=request.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                system=system,
                messages=[{"role": "user", "content": request.user_prompt}],
                timeout=request.timeout,
            )
        except APIError as exc:
            raise LLMError(f"{type(exc).__name__}: {exc}") from exc

        # Only text blocks carry the answer; anything else is ignored.
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        truncated = response.stop_reason == "max_tokens"
        if truncated:
            logger.warning(
                "Completion from %s hit max_tokens=%d; output may be truncated",
                request.model,
                request.max_tokens,
            )

        return CompletionResponse(
            text=text,
            model=response.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            truncated=truncated,
        )


def get_llm_client() -> LLMClient:
    """Return the default Claude-backed client."""
    return AnthropicClient()

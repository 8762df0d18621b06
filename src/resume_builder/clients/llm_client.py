"""Claude API wrapper for single-shot text completions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic

from resume_builder.exceptions import EmptyCompletion, MisconfiguredService, ProviderError

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client.

    Exactly one HTTP request is made per ``generate`` call: the SDK's
    built-in retry loop is disabled and failures surface to the caller.
    """

    def __init__(self, api_key: str | None, timeout: float | None = None):
        if not api_key:
            raise MisconfiguredService("Text-generation provider API key is not configured")
        kwargs: dict = {"api_key": api_key, "max_retries": 0}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)

    async def _call_api(
        self,
        prompt: str,
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        messages = [{"role": "user", "content": prompt}]
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = "claude-haiku-4-5-20251001",
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage.

        Raises:
            ProviderError: The provider answered with a non-2xx status or the
                request never reached it.
            EmptyCompletion: The provider answered 2xx without usable text.
        """
        logger.debug("LLM call: model=%s", model)
        try:
            message = await self._call_api(
                prompt=prompt,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except anthropic.APIStatusError as e:
            logger.error("LLM call failed with status %s", e.status_code, exc_info=True)
            raise ProviderError(_provider_message(e), status_code=e.status_code) from e
        except anthropic.APIConnectionError as e:
            logger.error("LLM call failed to reach provider", exc_info=True)
            raise ProviderError(str(e) or "Could not reach text-generation provider") from e

        text = _first_text(message)
        if not text.strip():
            raise EmptyCompletion()

        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )


def _first_text(message) -> str:
    """Return the text of the first text block, or an empty string."""
    for block in message.content or []:
        text = getattr(block, "text", None)
        if isinstance(text, str):
            return text
    return ""


def _provider_message(error: anthropic.APIStatusError) -> str:
    """Pull the provider's own message out of an error body if present."""
    body = error.body
    if isinstance(body, dict):
        inner = body.get("error")
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
        if body.get("message"):
            return str(body["message"])
    return error.message or "Failed to generate resume"

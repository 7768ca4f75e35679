"""Schema-constrained completion client backed by the OpenAI Responses API.

The HTTP layer only depends on the one-method ``CompletionClient`` protocol,
so tests can substitute a fake completer without network access.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "AI match failed"


class CompletionClient(Protocol):
    """Anything that can run one schema-constrained completion."""

    async def complete_with_schema(
        self,
        *,
        instructions: str,
        input_text: str,
        schema: Mapping[str, Any],
        schema_name: str,
    ) -> str:
        """Return the completion text, expected to be JSON matching ``schema``."""
        ...


class OpenAICompleter:
    """Structured-output completions via ``client.responses.create``.

    The SDK's automatic retries are disabled: each call makes exactly one
    request and failures propagate to the caller.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        temperature: float,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the completer.

        Args:
            api_key: OpenAI API key
            model: Model name with structured output support
            temperature: Sampling temperature (kept low for consistent scores)
            base_url: Optional API base URL override
            client: Pre-built client, mainly for tests
        """
        self.model = model
        self.temperature = temperature
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
        )

    async def complete_with_schema(
        self,
        *,
        instructions: str,
        input_text: str,
        schema: Mapping[str, Any],
        schema_name: str,
    ) -> str:
        logger.debug(f"Requesting structured completion from {self.model} ({len(input_text)} chars)")

        response = await self._client.responses.create(
            model=self.model,
            instructions=instructions,
            input=input_text,
            temperature=self.temperature,
            text={
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "schema": dict(schema),
                    "strict": True,
                }
            },
        )
        return response.output_text


def extract_error_message(exc: BaseException) -> str:
    """Pick the most specific message available on a completion failure.

    Order: the error body's nested ``error.message`` (or the body's own
    ``message``, which is how the SDK stores the unwrapped error object),
    then the exception's ``message`` attribute, then ``str(exc)``, then a
    generic phrase.
    """
    body = getattr(exc, "body", None)
    if isinstance(body, Mapping):
        nested = body.get("error")
        if isinstance(nested, Mapping) and nested.get("message"):
            return str(nested["message"])
        if body.get("message"):
            return str(body["message"])

    message = getattr(exc, "message", None)
    if message:
        return str(message)

    return str(exc) or GENERIC_FAILURE_MESSAGE

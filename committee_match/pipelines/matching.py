"""Matching pipeline: member profile + committee catalog → top committee matches.

Builds the completion payload, runs one schema-constrained completion and
returns the result as a canonical JSON string.
"""
from __future__ import annotations

import json
import logging

from ai.completion import CompletionClient, extract_error_message
from committee_match.models import MatchRequest
from config.match_prompt import MATCH_INSTRUCTIONS, MATCH_SCHEMA, SCHEMA_NAME

logger = logging.getLogger(__name__)


class MatchingError(Exception):
    """Raised when the completion call fails."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def build_model_input(request: MatchRequest) -> str:
    """Serialize member and committees into the single JSON input document."""
    return json.dumps(request.to_model_input())


def canonicalize_output(text: str) -> str:
    """Re-serialize completion output as compact JSON.

    ASCII escapes keep lone surrogates encodable. Text that does not parse
    is passed through, with unencodable characters replaced.
    """
    try:
        return json.dumps(json.loads(text), separators=(",", ":"))
    except (TypeError, ValueError):
        logger.warning("Completion output is not valid JSON, relaying raw text")
        return text.encode("utf-8", errors="replace").decode("utf-8")


async def match_member_to_committees(
    completer: CompletionClient,
    request: MatchRequest,
) -> str:
    """Ask the completion service for the best committees for one member.

    Args:
        completer: Schema-constrained completion client
        request: Validated member and committee catalog

    Returns:
        JSON text with ``top_matches`` and ``summary_for_member``

    Raises:
        MatchingError: If the completion call fails for any reason
    """
    logger.info(f"Matching member against {len(request.committees)} committees")

    try:
        output_text = await completer.complete_with_schema(
            instructions=MATCH_INSTRUCTIONS,
            input_text=build_model_input(request),
            schema=MATCH_SCHEMA,
            schema_name=SCHEMA_NAME,
        )
    except Exception as e:
        logger.error(f"OpenAI error: {e}", exc_info=True)
        raise MatchingError(extract_error_message(e)) from e

    return canonicalize_output(output_text)

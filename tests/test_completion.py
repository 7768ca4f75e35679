"""Tests for the OpenAI-backed completion client."""

from types import SimpleNamespace

import httpx
import openai
import pytest

from ai.completion import GENERIC_FAILURE_MESSAGE, OpenAICompleter, extract_error_message
from config.match_prompt import MATCH_SCHEMA, SCHEMA_NAME


class FakeResponses:
    def __init__(self, output_text):
        self.output_text = output_text
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(output_text=self.output_text)


@pytest.fixture
def fake_openai():
    return SimpleNamespace(responses=FakeResponses('{"top_matches":[],"summary_for_member":"ok"}'))


class TestOpenAICompleter:
    async def test_sends_strict_json_schema_request(self, fake_openai):
        completer = OpenAICompleter("sk-test", model="gpt-4.1-mini", temperature=0.2, client=fake_openai)

        text = await completer.complete_with_schema(
            instructions="Pick committees",
            input_text='{"member":{},"committees":[]}',
            schema=MATCH_SCHEMA,
            schema_name=SCHEMA_NAME,
        )

        assert text == '{"top_matches":[],"summary_for_member":"ok"}'
        assert fake_openai.responses.kwargs == {
            "model": "gpt-4.1-mini",
            "instructions": "Pick committees",
            "input": '{"member":{},"committees":[]}',
            "temperature": 0.2,
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "CommitteeMatch",
                    "schema": MATCH_SCHEMA,
                    "strict": True,
                }
            },
        }

    def test_default_client_does_not_retry(self):
        completer = OpenAICompleter("sk-test", model="gpt-4.1-mini", temperature=0.2)
        assert isinstance(completer._client, openai.AsyncOpenAI)
        assert completer._client.max_retries == 0
        assert completer._client.api_key == "sk-test"


def _status_error(body):
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    return openai.BadRequestError(
        "Error code: 400",
        response=httpx.Response(400, request=request),
        body=body,
    )


class TestExtractErrorMessage:
    def test_nested_error_message_wins(self):
        exc = _status_error({"error": {"message": "Invalid schema for response_format"}})
        assert extract_error_message(exc) == "Invalid schema for response_format"

    def test_body_message(self):
        exc = _status_error({"message": "Unsupported parameter: temperature"})
        assert extract_error_message(exc) == "Unsupported parameter: temperature"

    def test_falls_back_to_exception_message(self):
        exc = _status_error(None)
        assert extract_error_message(exc) == "Error code: 400"

    def test_plain_exception_text(self):
        assert extract_error_message(ValueError("bad output")) == "bad output"

    def test_generic_fallback(self):
        assert extract_error_message(RuntimeError()) == GENERIC_FAILURE_MESSAGE

    def test_connection_error(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/responses")
        exc = openai.APIConnectionError(request=request)
        assert extract_error_message(exc) == "Connection error."

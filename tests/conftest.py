"""Shared pytest fixtures for committee matching tests."""

import json

import pytest
from fastapi.testclient import TestClient

from committee_match.api import app, get_completion_client
from committee_match.config import OpenAISettings, Settings, get_settings


class FakeCompleter:
    """CompletionClient double that records calls and replays a canned result."""

    def __init__(self, output=None, error=None):
        self.output = output
        self.error = error
        self.calls = []

    async def complete_with_schema(self, *, instructions, input_text, schema, schema_name):
        self.calls.append(
            {
                "instructions": instructions,
                "input_text": input_text,
                "schema": schema,
                "schema_name": schema_name,
            }
        )
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def match_output():
    """A schema-conforming completion result with two matches."""
    return {
        "top_matches": [
            {
                "committee_name": "Youth Service",
                "score": 92,
                "rationale": "Your mentoring background fits the Interact program.",
                "call_to_action": "Reach out to the chair to join the next meeting.",
                "chair_contact_hint": "Ask the club secretary for the chair's email.",
            },
            {
                "committee_name": "Community Service",
                "score": 78.5,
                "rationale": "You want hands-on local projects.",
                "call_to_action": "Visit the committee page to see upcoming projects.",
                "chair_contact_hint": "The chair is listed on the club website.",
            },
        ],
        "summary_for_member": "You'd thrive where you can mentor and build locally.",
    }


@pytest.fixture
def match_body():
    """A valid request body."""
    return {
        "member": {
            "name": "Dana Ortiz",
            "email": "dana@example.org",
            "experiences": "Ten years coaching youth soccer",
            "values": "Service above self",
            "goals": "Give back locally",
            "reasons": "Met members at a food drive",
            "interests": "youth, mentoring , ,environment",
        },
        "committees": [
            {
                "name": "Youth Service",
                "purpose": "Support young leaders",
                "shortTermGoals": ["Charter an Interact club"],
                "longTermGoals": ["Scholarship fund"],
                "work": ["Mentoring"],
                "requirements": ["Background check"],
                "skills": ["Coaching"],
            },
            {
                "name": "Community Service",
                "purpose": "Local projects",
                "shortTermGoals": [],
                "longTermGoals": [],
                "work": ["Food drives"],
                "requirements": [],
                "skills": ["Organizing"],
            },
        ],
    }


@pytest.fixture
def settings():
    """Settings with a fake API key, independent of the environment."""
    return Settings(openai=OpenAISettings(api_key="sk-test", model="gpt-4.1-mini", temperature=0.2))


@pytest.fixture
def fake_completer(match_output):
    return FakeCompleter(output=json.dumps(match_output, indent=2))


@pytest.fixture
def client(settings, fake_completer):
    """TestClient with settings and completion client overridden."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_completion_client] = lambda: fake_completer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

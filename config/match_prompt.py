"""Instructions and strict output schema for committee matching.

Strict structured output requires every property to be listed in
``required`` and ``additionalProperties`` to be false at every object level.
"""

MATCH_INSTRUCTIONS = """
You are a Rotary onboarding assistant.
Given a member profile and a committee catalog, pick the best 3 matches.
Be specific and encouraging, but concise. Use only the provided inputs.
Scoring: 0–100 (fit + availability + interests + skills).
Call-to-action should invite contacting the chair or visiting the committee page.
If information is missing, infer conservatively and stay helpful.
Do not address the member in third person, address them as if you are talking directly to them.
"""

MAX_MATCHES = 3

MATCH_FIELDS = [
    "committee_name",
    "score",
    "rationale",
    "call_to_action",
    "chair_contact_hint",
]

MATCH_SCHEMA = {
    "type": "object",
    "properties": {
        "top_matches": {
            "type": "array",
            "maxItems": MAX_MATCHES,
            "items": {
                "type": "object",
                "properties": {
                    "committee_name": {"type": "string"},
                    "score": {"type": "number"},  # 0–100
                    "rationale": {"type": "string"},
                    "call_to_action": {"type": "string"},
                    "chair_contact_hint": {"type": "string"},
                },
                "required": MATCH_FIELDS,
                "additionalProperties": False,
            },
        },
        "summary_for_member": {"type": "string"},
    },
    "required": ["top_matches", "summary_for_member"],
    "additionalProperties": False,
}

SCHEMA_NAME = "CommitteeMatch"

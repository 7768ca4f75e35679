"""Request and response models for committee matching.

All entities are request-scoped: they are built from the inbound body,
forwarded to the completion service and discarded with the response.
Values are forwarded as sent; the only rewrite is splitting a
comma-separated ``interests`` string. Unknown keys are kept so the model
sees everything the caller sent.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_interests(value: Any) -> Any:
    """Turn a comma-separated interests string into a list of trimmed entries.

    Lists (and anything else) are returned unchanged.

    >>> normalize_interests("a, b ,c")
    ['a', 'b', 'c']
    """
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class MemberProfile(BaseModel):
    """Member profile as submitted by the onboarding form."""
    model_config = ConfigDict(extra="allow")

    name: Any = None
    email: Any = None
    experiences: Any = None
    values: Any = None
    goals: Any = None
    reasons: Any = None
    interests: Any = None

    @field_validator("interests", mode="before")
    @classmethod
    def split_interests(cls, v):
        return normalize_interests(v)


class CommitteeDescriptor(BaseModel):
    """One entry of the committee catalog."""
    model_config = ConfigDict(extra="allow")

    name: Any = None
    purpose: Any = None
    shortTermGoals: Any = None
    longTermGoals: Any = None
    work: Any = None
    requirements: Any = None
    skills: Any = None


class MatchRequest(BaseModel):
    """Body of a match request.

    Object entries of ``committees`` become descriptors; any other entry is
    kept as sent.
    """
    model_config = ConfigDict(extra="ignore")

    member: MemberProfile
    committees: list[Any]

    @field_validator("committees", mode="after")
    @classmethod
    def wrap_committees(cls, v):
        return [CommitteeDescriptor.model_validate(c) if isinstance(c, dict) else c for c in v]

    def to_model_input(self) -> dict[str, Any]:
        """Payload forwarded to the completion service, keeping only supplied keys."""
        return {
            "member": self.member.model_dump(exclude_unset=True),
            "committees": [
                c.model_dump(exclude_unset=True) if isinstance(c, CommitteeDescriptor) else c
                for c in self.committees
            ],
        }


class CommitteeMatch(BaseModel):
    """A single recommended committee."""
    committee_name: str
    score: float = Field(ge=0, le=100)
    rationale: str
    call_to_action: str
    chair_contact_hint: str


class MatchResult(BaseModel):
    """Structured result produced by the completion service."""
    top_matches: list[CommitteeMatch] = Field(default_factory=list, max_length=3)
    summary_for_member: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: str | None = None

"""Data models for a single help-request submission.

Inbound bodies are validated by the pydantic schemas below, one per channel.
``SubmissionRequest`` is the domain object the pipeline works on.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

# Privileged-channel submissions carry this label and contact name
PRIVILEGED_LABEL_NAME = "FTA"
PRIVILEGED_CONTACT_NAME = "FTA"


# ============================================
# Request schemas
# ============================================


class AttachmentIn(BaseModel):
    """A file sent inline as base64 (optionally a data URI)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    data: str


class SubmissionBody(BaseModel):
    """Fields shared by both channels. Used as-is for the privileged channel."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    title: str = Field(min_length=1)
    team_number: str = Field(alias="teamNumber", min_length=1)
    event_name: str = Field(min_length=1, validation_alias=AliasChoices("eventName", "frcEvent"))
    contact_email: str | None = Field(default=None, alias="contactEmail")
    contact_name: str | None = Field(default=None, alias="contactName")
    problem_category: str | None = Field(default=None, alias="problemCategory")
    priority: str | None = None
    description: str | None = None
    attachments: list[AttachmentIn] = Field(default_factory=list)

    @field_validator("team_number")
    @classmethod
    def validate_team_number(cls, v: str) -> str:
        # ASCII digits only
        if not (v.isascii() and v.isdigit()):
            raise ValueError("Team number must be numeric")
        return v

    @field_validator("contact_email", "contact_name", "problem_category", "priority", "description")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return v or None


class PublicSubmission(SubmissionBody):
    """Web form channel: contact email, description and priority are required."""

    contact_email: EmailStr = Field(alias="contactEmail")
    priority: str = Field(min_length=1)
    description: str = Field(min_length=1)


class PrivilegedSubmission(SubmissionBody):
    """Key-protected API channel."""


def field_errors(errors: Iterable[dict[str, Any]]) -> list[FieldError]:
    """Convert pydantic error dicts to FieldErrors named like the JSON body.

    ``("attachments", 1, "data")`` becomes ``attachments[1].data``.
    """
    result: list[FieldError] = []
    for err in errors:
        name = ""
        for part in err.get("loc", ()):
            if isinstance(part, int):
                name += f"[{part}]"
            else:
                name += f".{part}" if name else str(part)
        result.append(FieldError(name or "body", err.get("msg", "Invalid value")))
    return result


# ============================================
# Domain objects
# ============================================


@dataclass
class AttachmentPayload:
    """A file attached to a submission, data still base64-encoded.

    *name* and *data* are typed loosely so validation can report entries that
    are not strings.
    """

    name: Any
    data: Any


@dataclass
class SubmissionRequest:
    """One inbound help request, from the public form or the keyed API."""

    title: str | None
    team_number: str | None
    event_name: str | None
    contact_email: str | None = None
    contact_name: str | None = None
    problem_category: str | None = None
    priority: str | None = None
    description: str | None = None
    attachments: list[AttachmentPayload] = field(default_factory=list)
    is_privileged_channel: bool = False

    @classmethod
    def from_submission(cls, body: SubmissionBody) -> SubmissionRequest:
        """Build the domain request from a validated body."""
        privileged = not isinstance(body, PublicSubmission)
        return cls(
            title=body.title,
            team_number=body.team_number,
            event_name=body.event_name,
            contact_email=body.contact_email,
            contact_name=PRIVILEGED_CONTACT_NAME if privileged else body.contact_name,
            problem_category=body.problem_category,
            priority=body.priority,
            description=body.description,
            attachments=[AttachmentPayload(a.name, a.data) for a in body.attachments],
            is_privileged_channel=privileged,
        )

    @property
    def schema(self) -> type[SubmissionBody]:
        return PrivilegedSubmission if self.is_privileged_channel else PublicSubmission

    def to_payload(self) -> dict[str, Any]:
        """JSON body equivalent of this request. Unset fields are left out."""
        payload: dict[str, Any] = {
            "title": self.title,
            "teamNumber": self.team_number,
            "eventName": self.event_name,
            "contactEmail": self.contact_email,
            "contactName": self.contact_name,
            "problemCategory": self.problem_category,
            "priority": self.priority,
            "description": self.description,
        }
        payload = {key: value for key, value in payload.items() if value is not None}
        payload["attachments"] = [{"name": a.name, "data": a.data} for a in self.attachments]
        return payload


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass
class AttachmentResult:
    """Outcome of uploading one attachment."""

    name: str
    ok: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "ok": self.ok, "error": self.error}


@dataclass
class CardCreationResult:
    """Outcome of a successful submission."""

    card_id: str
    label_ids_applied: list[str] = field(default_factory=list)
    attachment_results: list[AttachmentResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "ok",
            "cardId": self.card_id,
            "labelIdsApplied": list(self.label_ids_applied),
            "attachments": [result.to_dict() for result in self.attachment_results],
        }

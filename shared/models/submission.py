"""
Submission Models
=================

Form submission payloads and outcomes.

Version: 0.1.0
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SubmissionField(BaseModel):
    """One column value to persist."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str | None = None


class SubmissionStatus(str, Enum):
    """Outcome of a successful submission."""

    SUBSCRIBED = "subscribed"
    ALREADY_SUBSCRIBED = "already-subscribed"


class SubmissionRequest(BaseModel):
    """Body of a zk-form verify request."""

    model_config = ConfigDict(populate_by_name=True)

    fields: list[SubmissionField] = Field(default_factory=list)
    response: Any = Field(..., description="Opaque proof response payload")
    space_slug: str = Field(..., alias="spaceSlug")
    app_slug: str = Field(..., alias="appSlug")


class SubmissionResponse(BaseModel):
    """Body of a successful verify response."""

    status: SubmissionStatus

"""
ZK Verification Models
======================

Pydantic models for proof verification results.

Version: 1.0.0
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import ConfigDict, Field, field_validator

from shared.spaces.models import AuthType, CamelModel, ClaimType


class VerifiedAuth(CamelModel):
    """An identity the proof authenticated."""

    auth_type: AuthType
    user_id: str | None = None
    is_anon: bool = False


class VerifiedClaim(CamelModel):
    """A group claim the proof satisfied."""

    group_id: str
    claim_type: ClaimType
    group_timestamp: int | str = "latest"
    is_selectable_by_user: bool = False
    value: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v: object) -> object:
        """Claim values are persisted as text."""
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v


class VerifiedResult(CamelModel):
    """
    Successful verification of a proof response.

    Immutable and scoped to the request that produced it.
    """

    model_config = ConfigDict(frozen=True)

    auths: list[VerifiedAuth] = Field(default_factory=list)
    claims: list[VerifiedClaim] = Field(default_factory=list)
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    async def get_user_id(self, auth_type: AuthType) -> str | None:
        """Identifier of the first verified auth of this type, if any."""
        for auth in self.auths:
            if auth.auth_type == auth_type:
                return auth.user_id
        return None


class FailureReason(str, Enum):
    """Why a proof response could not be verified."""

    MALFORMED_PROOF = "malformed_proof"
    VERIFIER_UNAVAILABLE = "verifier_unavailable"
    REQUIREMENT_MISMATCH = "requirement_mismatch"


class VerificationFailure(CamelModel):
    """Failed verification of a proof response."""

    model_config = ConfigDict(frozen=True)

    reason: FailureReason
    message: str = ""


VerificationOutcome = VerifiedResult | VerificationFailure

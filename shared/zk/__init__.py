"""
ZK Verification Module
======================

Client for the external zero-knowledge proof verification service.

Usage:
    from shared.zk import ProofVerifier, VerifiedResult

    verifier = ProofVerifier()
    outcome = await verifier.verify(app, response)

    if isinstance(outcome, VerifiedResult):
        vault_id = await outcome.get_user_id(AuthType.VAULT)

Version: 1.0.0
"""

from shared.zk.models import (
    FailureReason,
    VerificationFailure,
    VerificationOutcome,
    VerifiedAuth,
    VerifiedClaim,
    VerifiedResult,
)
from shared.zk.verifier import ProofVerifier


__all__ = [
    # Verifier
    "ProofVerifier",
    # Models
    "FailureReason",
    "VerificationFailure",
    "VerificationOutcome",
    "VerifiedAuth",
    "VerifiedClaim",
    "VerifiedResult",
]

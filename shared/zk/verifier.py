"""
ZK Proof Verification
=====================

Adapter over the external proof verification service.

The service checks the proof response against the app's auth and claim
requests and returns the verified identifiers and claims. Every failure is
reported as a ``VerificationFailure`` rather than raised.

Version: 1.0.0
"""

import time
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from shared.config import settings
from shared.logging import get_logger
from shared.spaces.models import BaseApp
from shared.zk.models import (
    FailureReason,
    VerificationFailure,
    VerificationOutcome,
    VerifiedResult,
)

logger = get_logger(__name__)


class ProofVerifier:
    """
    Client for the proof verification service.

    Args:
        base_url: Verification service URL (default from settings)
        timeout: Request timeout in seconds
        dev: Use the fixed development app id (default: development environment)
        demo: Allow impersonated vaults (default from settings)
        client: Preconfigured HTTP client
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        dev: bool | None = None,
        demo: bool | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url or settings.verifier.url
        self._dev = settings.is_development if dev is None else dev
        self._demo = settings.demo if demo is None else demo
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout or settings.verifier.timeout_seconds),
        )

    def build_config(self, app: BaseApp) -> dict[str, Any]:
        """Verification config for an app."""
        config: dict[str, Any] = {
            "appId": settings.verifier.dev_app_id if self._dev else app.app_id,
        }
        if self._demo:
            config["vault"] = {"impersonate": list(app.impersonate_addresses)}
        return config

    async def verify(
        self,
        app: BaseApp,
        response: Any,
    ) -> VerificationOutcome:
        """
        Verify a proof response against the app's requests.

        Args:
            app: App whose auth and claim requests the proof must satisfy
            response: Opaque proof response submitted by the user

        Returns:
            VerifiedResult, or VerificationFailure describing why it failed
        """
        payload = {
            "config": self.build_config(app),
            "response": response,
            "auths": [_dump(r) for r in app.auth_requests],
            "claims": [_dump(r) for r in app.claim_requests],
        }

        start_time = time.perf_counter()
        try:
            http_response = await self._client.post("/verify", json=payload)
            http_response.raise_for_status()
            result = VerifiedResult.model_validate(http_response.json())
        except httpx.HTTPStatusError as e:
            return self._failure(app, _reason_for_status(e.response.status_code), e)
        except httpx.TransportError as e:
            return self._failure(app, FailureReason.VERIFIER_UNAVAILABLE, e)
        except (ValidationError, ValueError) as e:
            return self._failure(app, FailureReason.MALFORMED_PROOF, e)
        except Exception as e:
            return self._failure(app, FailureReason.VERIFIER_UNAVAILABLE, e)

        logger.info(
            "zk_proof_verified",
            app=app.slug,
            auths=len(result.auths),
            claims=len(result.claims),
            verification_time_ms=int((time.perf_counter() - start_time) * 1000),
        )
        return result

    def _failure(
        self,
        app: BaseApp,
        reason: FailureReason,
        error: Exception,
    ) -> VerificationFailure:
        logger.warning(
            "zk_proof_verification_failed",
            app=app.slug,
            reason=reason.value,
            error=str(error),
            error_type=type(error).__name__,
        )
        return VerificationFailure(reason=reason, message=str(error))

    async def health_check(self) -> dict[str, Any]:
        """Check verification service health."""
        try:
            start = time.perf_counter()
            response = await self._client.get("/health")
            latency_ms = (time.perf_counter() - start) * 1000
            return {
                "status": "healthy" if response.is_success else "unhealthy",
                "latency_ms": round(latency_ms, 2),
                "url": self._base_url,
            }
        except httpx.HTTPError as e:
            logger.error("verifier_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _dump(request: BaseModel) -> dict[str, Any]:
    return request.model_dump(mode="json", by_alias=True, exclude_none=True)


def _reason_for_status(status_code: int) -> FailureReason:
    if status_code >= 500:
        return FailureReason.VERIFIER_UNAVAILABLE
    if status_code in (409, 422):
        return FailureReason.REQUIREMENT_MISMATCH
    return FailureReason.MALFORMED_PROOF

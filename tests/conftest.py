"""
Test Configuration
==================

Pytest fixtures for zk-form tests.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["STORE_MODE"] = "mock"
os.environ["IS_DEMO"] = "false"

from shared.spaces import Space, SpaceRegistry  # noqa: E402
from shared.store import MemorySpreadsheetBackend, StoreInitRegistry  # noqa: E402
from shared.zk import VerifiedResult  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def sample_space_data() -> dict[str, Any]:
    """Space with one app per submission path."""
    return {
        "slug": "test-space",
        "name": "Test Space",
        "apps": [
            {
                "type": "zkForm",
                "slug": "vault-form",
                "name": "Vault Form",
                "appId": "0xvaultform",
                "spreadsheetId": "sheet-vault",
                "authRequests": [{"authType": "vault"}],
                "fields": [{"label": "Email"}],
            },
            {
                "type": "zkForm",
                "slug": "multi-auth-form",
                "name": "Multi Auth Form",
                "appId": "0xmultiauth",
                "spreadsheetId": "sheet-multi",
                "saveAuths": True,
                "authRequests": [
                    {"authType": "vault"},
                    {"authType": "github"},
                    {"authType": "twitter", "isOptional": True},
                ],
                "fields": [{"label": "Email"}],
            },
            {
                "type": "zkForm",
                "slug": "claims-form",
                "name": "Claims Form",
                "appId": "0xclaims",
                "spreadsheetId": "sheet-claims",
                "saveClaims": True,
                "claimRequests": [
                    {"groupId": "g1", "claimType": "gte", "groupTimestamp": 0},
                ],
                "fields": [{"label": "Email"}],
            },
            {
                "type": "zkBadge",
                "slug": "badge",
                "name": "Badge",
                "appId": "0xbadge",
            },
        ],
    }


@pytest.fixture
def space_registry(sample_space_data: dict[str, Any]) -> SpaceRegistry:
    """Registry holding the sample space."""
    return SpaceRegistry([Space.model_validate(sample_space_data)])


@pytest.fixture
def store_backend() -> MemorySpreadsheetBackend:
    """Fresh in-memory spreadsheet backend."""
    return MemorySpreadsheetBackend()


@pytest.fixture
def init_registry() -> StoreInitRegistry:
    """Fresh initialization registry."""
    return StoreInitRegistry()


@pytest.fixture
def verified_result() -> VerifiedResult:
    """Verified result with a vault id, a github id and a claim on g1."""
    return VerifiedResult.model_validate({
        "auths": [
            {"authType": "vault", "userId": "0xvault-123"},
            {"authType": "github", "userId": "35774097"},
        ],
        "claims": [
            {
                "groupId": "g1",
                "claimType": "gte",
                "groupTimestamp": 0,
                "isSelectableByUser": False,
                "value": "42",
            },
        ],
    })


@pytest.fixture
def mock_verifier(verified_result: VerifiedResult) -> MagicMock:
    """Verifier returning the sample verified result."""
    verifier = MagicMock()
    verifier.verify = AsyncMock(return_value=verified_result)
    verifier.health_check = AsyncMock(return_value={"status": "healthy"})
    verifier.close = AsyncMock()
    return verifier


@pytest.fixture
def submission_service(
    space_registry: SpaceRegistry,
    store_backend: MemorySpreadsheetBackend,
    init_registry: StoreInitRegistry,
    mock_verifier: MagicMock,
):
    """Submission service over in-memory collaborators, outside demo mode."""
    from services.zk_form.services.submission import SubmissionService

    return SubmissionService(
        spaces=space_registry,
        backend=store_backend,
        init_registry=init_registry,
        verifier=mock_verifier,
        demo=False,
    )


@pytest_asyncio.fixture
async def zk_form_client(
    submission_service,
    store_backend: MemorySpreadsheetBackend,
    mock_verifier: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the zk-form service."""
    from services.zk_form.main import app

    app.state.submission_service = submission_service
    app.state.store_backend = store_backend
    app.state.verifier = mock_verifier

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

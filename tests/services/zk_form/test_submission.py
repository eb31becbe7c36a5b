"""
Submission Service Tests
========================

Tests for verifying and recording zk-form submissions.

Version: 0.1.0
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from services.zk_form.services.submission import (
    SubmissionError,
    SubmissionService,
    build_columns,
    find_claim,
)
from shared.models.submission import SubmissionField, SubmissionRequest, SubmissionStatus
from shared.spaces import ClaimRequest, Space, SpaceRegistry, ZkFormApp
from shared.store import MemorySpreadsheetBackend, MemorySpreadsheetStore, StoreInitRegistry
from shared.zk import FailureReason, VerificationFailure, VerifiedClaim, VerifiedResult


# =============================================================================
# Fixtures
# =============================================================================


def make_request(app_slug: str, email: str = "alice@example.com") -> SubmissionRequest:
    return SubmissionRequest(
        fields=[SubmissionField(name="Email", value=email)],
        response={"appId": "0xapp", "proofs": []},
        spaceSlug="test-space",
        appSlug=app_slug,
    )


def service_for(
    apps: list[dict],
    backend: MemorySpreadsheetBackend,
    verifier,
) -> SubmissionService:
    """Service over a one-space registry holding the given apps."""
    space = Space.model_validate({"slug": "test-space", "name": "Test Space", "apps": apps})
    return SubmissionService(
        spaces=SpaceRegistry([space]),
        backend=backend,
        init_registry=StoreInitRegistry(),
        verifier=verifier,
        demo=False,
    )


@pytest.fixture
def demo_service(submission_service: SubmissionService) -> SubmissionService:
    """Same collaborators, in demo mode."""
    return SubmissionService(
        spaces=submission_service.spaces,
        backend=submission_service.backend,
        init_registry=submission_service.init_registry,
        verifier=submission_service.verifier,
        demo=True,
    )


# =============================================================================
# Column Layout Tests
# =============================================================================


class TestBuildColumns:
    """Tests for sheet column layout."""

    def test_vault_column_when_auths_not_saved(self, space_registry) -> None:
        """Apps requiring a vault get a VaultId column even without saveAuths."""
        app = space_registry.get_space("test-space").find_app("vault-form")

        assert build_columns(app) == ["VaultId", "Email"]

    def test_auth_columns_when_auths_saved(self, space_registry) -> None:
        """Every auth request maps to its own column."""
        app = space_registry.get_space("test-space").find_app("multi-auth-form")

        assert build_columns(app) == ["VaultId", "GithubId", "TwitterId", "Email"]

    def test_claim_columns_when_claims_saved(self, space_registry) -> None:
        """Claim group ids come before user fields."""
        app = space_registry.get_space("test-space").find_app("claims-form")

        assert build_columns(app) == ["g1", "Email"]

    def test_claim_columns_ignored_without_save_claims(self) -> None:
        """Claims are not columns unless the app saves them."""
        app = ZkFormApp(
            slug="f",
            name="F",
            app_id="0x1",
            spreadsheet_id="s",
            claim_requests=[ClaimRequest(group_id="g1")],
        )

        assert build_columns(app) == []


class TestFindClaim:
    """Tests for exact claim matching."""

    def test_missing_selectable_flag_matches_false(self) -> None:
        """A request without a selectable flag matches non-selectable claims."""
        request = ClaimRequest(group_id="g1", claim_type="gte", group_timestamp=0)
        claims = [
            VerifiedClaim(group_id="g1", claim_type="gte", group_timestamp=0, value="3"),
        ]

        assert find_claim(request, claims) is claims[0]

    def test_group_timestamp_must_match(self) -> None:
        """Claims on another snapshot of the group do not match."""
        request = ClaimRequest(group_id="g1", claim_type="gte", group_timestamp="latest")
        claims = [
            VerifiedClaim(group_id="g1", claim_type="gte", group_timestamp=0, value="3"),
        ]

        assert find_claim(request, claims) is None

    def test_selectable_flag_must_match(self) -> None:
        """A selectable claim does not satisfy a non-selectable request."""
        request = ClaimRequest(group_id="g1", group_timestamp=0)
        claims = [
            VerifiedClaim(
                group_id="g1",
                claim_type="gte",
                group_timestamp=0,
                is_selectable_by_user=True,
                value="3",
            ),
        ]

        assert find_claim(request, claims) is None


# =============================================================================
# App Resolution Tests
# =============================================================================


class TestResolveApp:
    """Tests for resolving the target app."""

    def test_non_form_app_rejected(self, submission_service: SubmissionService) -> None:
        """Other app kinds cannot receive submissions."""
        with pytest.raises(SubmissionError) as exc_info:
            submission_service.resolve_app("test-space", "badge")

        assert exc_info.value.status_code == 500
        assert exc_info.value.reason == "Verify not available for other apps than zkForm"

    def test_form_app_preferred_over_same_slug(
        self,
        store_backend: MemorySpreadsheetBackend,
        mock_verifier,
    ) -> None:
        """A zkForm app is found even when another kind shares its slug."""
        service = service_for(
            [
                {"type": "zkBadge", "slug": "newsletter", "name": "Badge", "appId": "0xb"},
                {
                    "type": "zkForm",
                    "slug": "newsletter",
                    "name": "Newsletter",
                    "appId": "0xf",
                    "spreadsheetId": "sheet-news",
                },
            ],
            store_backend,
            mock_verifier,
        )

        app = service.resolve_app("test-space", "newsletter")

        assert isinstance(app, ZkFormApp)
        assert app.spreadsheet_id == "sheet-news"

    def test_unknown_space(self, submission_service: SubmissionService) -> None:
        """Unknown spaces are not found."""
        with pytest.raises(SubmissionError) as exc_info:
            submission_service.resolve_app("nope", "vault-form")

        assert exc_info.value.status_code == 404

    def test_unknown_app(self, submission_service: SubmissionService) -> None:
        """Unknown apps are not found."""
        with pytest.raises(SubmissionError) as exc_info:
            submission_service.resolve_app("test-space", "nope")

        assert exc_info.value.status_code == 404


# =============================================================================
# Vault Path Tests
# =============================================================================


class TestVaultSubmission:
    """Tests for apps that store only the vault id."""

    @pytest.mark.asyncio
    async def test_new_vault_id_subscribed(
        self,
        submission_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """A new vault id is subscribed and stored under VaultId."""
        result = await submission_service.submit(make_request("vault-form"))

        assert result == SubmissionStatus.SUBSCRIBED
        assert store_backend.rows["sheet-vault"] == [
            {"VaultId": "0xvault-123", "Email": "alice@example.com"},
        ]

    @pytest.mark.asyncio
    async def test_duplicate_vault_id_already_subscribed(
        self,
        submission_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """The same vault id twice yields one row."""
        first = await submission_service.submit(make_request("vault-form"))
        second = await submission_service.submit(make_request("vault-form", "other@example.com"))

        assert first == SubmissionStatus.SUBSCRIBED
        assert second == SubmissionStatus.ALREADY_SUBSCRIBED
        assert len(store_backend.rows["sheet-vault"]) == 1

    @pytest.mark.asyncio
    async def test_demo_mode_skips_deduplication(
        self,
        demo_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """In demo mode the same vault id is stored twice."""
        first = await demo_service.submit(make_request("vault-form"))
        second = await demo_service.submit(make_request("vault-form"))

        assert first == second == SubmissionStatus.SUBSCRIBED
        assert len(store_backend.rows["sheet-vault"]) == 2

    @pytest.mark.asyncio
    async def test_missing_vault_id_rejected(
        self,
        submission_service: SubmissionService,
        mock_verifier,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """A verified result without a vault id is rejected."""
        mock_verifier.verify = AsyncMock(return_value=VerifiedResult())

        with pytest.raises(SubmissionError, match="No Vault Id"):
            await submission_service.submit(make_request("vault-form"))

        assert store_backend.rows["sheet-vault"] == []


# =============================================================================
# Multi-Auth Path Tests
# =============================================================================


class TestMultiAuthSubmission:
    """Tests for apps saving every requested identity."""

    @pytest.mark.asyncio
    async def test_identifiers_stored_per_auth_type(
        self,
        submission_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """Each identity lands in its mapped column; optional absent ones are blank."""
        result = await submission_service.submit(make_request("multi-auth-form"))

        assert result == SubmissionStatus.SUBSCRIBED
        assert store_backend.rows["sheet-multi"] == [
            {
                "VaultId": "0xvault-123",
                "GithubId": "35774097",
                "TwitterId": "",
                "Email": "alice@example.com",
            },
        ]

    @pytest.mark.asyncio
    async def test_missing_required_identifier_rejected(
        self,
        submission_service: SubmissionService,
        mock_verifier,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """A required auth without an identifier fails before any write."""
        mock_verifier.verify = AsyncMock(
            return_value=VerifiedResult.model_validate(
                {"auths": [{"authType": "vault", "userId": "0xvault-123"}]}
            )
        )

        with pytest.raises(SubmissionError) as exc_info:
            await submission_service.submit(make_request("multi-auth-form"))

        assert exc_info.value.reason == "No github Id"
        assert store_backend.rows["sheet-multi"] == []

    @pytest.mark.asyncio
    async def test_duplicate_vault_id_already_subscribed(
        self,
        submission_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """Vault ids are deduplicated on the multi-auth path too."""
        await submission_service.submit(make_request("multi-auth-form"))
        second = await submission_service.submit(make_request("multi-auth-form"))

        assert second == SubmissionStatus.ALREADY_SUBSCRIBED
        assert len(store_backend.rows["sheet-multi"]) == 1

    @pytest.mark.asyncio
    async def test_optional_vault_absent_skips_deduplication(
        self,
        store_backend: MemorySpreadsheetBackend,
        mock_verifier,
    ) -> None:
        """Without a vault id the VaultId cell is blank and nothing is deduplicated."""
        mock_verifier.verify = AsyncMock(
            return_value=VerifiedResult.model_validate(
                {"auths": [{"authType": "github", "userId": "35774097"}]}
            )
        )
        service = service_for(
            [
                {
                    "type": "zkForm",
                    "slug": "optional-vault-form",
                    "name": "Optional Vault Form",
                    "appId": "0xoptional",
                    "spreadsheetId": "sheet-optional",
                    "saveAuths": True,
                    "authRequests": [
                        {"authType": "vault", "isOptional": True},
                        {"authType": "github"},
                    ],
                    "fields": [{"label": "Email"}],
                },
            ],
            store_backend,
            mock_verifier,
        )

        first = await service.submit(make_request("optional-vault-form"))
        second = await service.submit(make_request("optional-vault-form"))

        assert first == second == SubmissionStatus.SUBSCRIBED
        assert store_backend.rows["sheet-optional"] == [
            {"VaultId": "", "GithubId": "35774097", "Email": "alice@example.com"},
        ] * 2


# =============================================================================
# Claims Path Tests
# =============================================================================


class TestClaimsSubmission:
    """Tests for apps saving claim values."""

    @pytest.mark.asyncio
    async def test_claim_value_stored_under_group_id(
        self,
        submission_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """A matching claim value is stored in the group's column."""
        result = await submission_service.submit(make_request("claims-form"))

        assert result == SubmissionStatus.SUBSCRIBED
        assert store_backend.rows["sheet-claims"] == [{"g1": "42", "Email": "alice@example.com"}]

    @pytest.mark.asyncio
    async def test_unmatched_claim_rejected(
        self,
        submission_service: SubmissionService,
        mock_verifier,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """A claim request without a verified match fails and writes nothing."""
        mock_verifier.verify = AsyncMock(
            return_value=VerifiedResult.model_validate({
                "claims": [
                    {"groupId": "g2", "claimType": "gte", "groupTimestamp": 0, "value": 1},
                ],
            })
        )

        with pytest.raises(SubmissionError, match="No claim matching g1"):
            await submission_service.submit(make_request("claims-form"))

        assert store_backend.rows["sheet-claims"] == []


# =============================================================================
# Verification & Initialization Tests
# =============================================================================


class TestVerificationFailures:
    """Tests for rejected proofs."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("reason", "status_code", "message"),
        [
            (FailureReason.MALFORMED_PROOF, 500, "Invalid response"),
            (FailureReason.REQUIREMENT_MISMATCH, 500, "Invalid response"),
            (FailureReason.VERIFIER_UNAVAILABLE, 503, "Verifier unavailable"),
        ],
    )
    async def test_failure_rejected(
        self,
        submission_service: SubmissionService,
        mock_verifier,
        store_backend: MemorySpreadsheetBackend,
        reason: FailureReason,
        status_code: int,
        message: str,
    ) -> None:
        """Verification failures reject the submission."""
        mock_verifier.verify = AsyncMock(return_value=VerificationFailure(reason=reason))

        with pytest.raises(SubmissionError) as exc_info:
            await submission_service.submit(make_request("vault-form"))

        assert exc_info.value.status_code == status_code
        assert exc_info.value.reason == message
        assert store_backend.rows["sheet-vault"] == []


class RejectingStore(MemorySpreadsheetStore):
    """Store whose appends fail."""

    async def add(self, fields) -> None:
        raise RuntimeError("sheet quota exceeded")


class RejectingBackend(MemorySpreadsheetBackend):
    """In-memory backend opening stores that cannot append."""

    def open(self, spreadsheet_id, columns) -> RejectingStore:
        return RejectingStore(self, spreadsheet_id, columns)


class TestStoreFailures:
    """Tests for errors raised by the store."""

    @pytest.mark.asyncio
    async def test_append_error_propagates(
        self,
        space_registry,
        init_registry,
        mock_verifier,
    ) -> None:
        """A failed append is raised to the caller and no row is kept."""
        backend = RejectingBackend()
        service = SubmissionService(
            spaces=space_registry,
            backend=backend,
            init_registry=init_registry,
            verifier=mock_verifier,
            demo=False,
        )

        with pytest.raises(RuntimeError, match="sheet quota exceeded"):
            await service.submit(make_request("vault-form"))

        assert backend.rows["sheet-vault"] == []


class TestStoreInitialization:
    """Tests for once-per-spreadsheet initialization."""

    @pytest.mark.asyncio
    async def test_init_once_across_requests(
        self,
        demo_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """Many submissions to one sheet initialize it once."""
        for _ in range(5):
            await demo_service.submit(make_request("vault-form"))

        assert store_backend.init_calls["sheet-vault"] == 1

    @pytest.mark.asyncio
    async def test_init_once_across_concurrent_requests(
        self,
        demo_service: SubmissionService,
        store_backend: MemorySpreadsheetBackend,
    ) -> None:
        """Concurrent first submissions share one initialization."""
        await asyncio.gather(*(demo_service.submit(make_request("vault-form")) for _ in range(5)))

        assert store_backend.init_calls["sheet-vault"] == 1
        assert len(store_backend.rows["sheet-vault"]) == 5

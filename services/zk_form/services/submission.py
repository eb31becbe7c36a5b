"""
Submission Service
==================

Turns a verified zk-form submission into one spreadsheet row.

Flow:
1. Resolve the zkForm app from its space
2. Open its store and make sure the sheet header is initialized
3. Verify the proof response
4. Collect identifier fields (single vault id, or one per auth request)
   and reject vault ids already stored
5. Collect claim fields
6. Append submitted + derived fields as one row

Version: 0.1.0
"""

from shared.config import settings
from shared.logging import get_logger
from shared.models.submission import (
    SubmissionField,
    SubmissionRequest,
    SubmissionStatus,
)
from shared.spaces import (
    AuthType,
    ClaimRequest,
    SpaceNotFoundError,
    SpaceRegistry,
    ZkFormApp,
    auth_type_column,
)
from shared.store import SpreadsheetBackend, SpreadsheetStore, StoreInitRegistry
from shared.zk import (
    FailureReason,
    ProofVerifier,
    VerificationFailure,
    VerifiedClaim,
    VerifiedResult,
)


logger = get_logger(__name__)

VAULT_ID_COLUMN = auth_type_column(AuthType.VAULT)


class SubmissionError(Exception):
    """A submission that cannot be accepted."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(reason)
        self.status_code = status_code
        self.reason = reason


class AlreadySubscribed(Exception):
    """The vault id is already stored."""

    def __init__(self, vault_id: str) -> None:
        super().__init__(vault_id)
        self.vault_id = vault_id


def build_columns(app: ZkFormApp) -> list[str]:
    """
    Column set of an app's sheet.

    Auth columns, then claim columns, then user-field columns.
    """
    auth_columns = [VAULT_ID_COLUMN] if app.needs_vault_auth else []
    if app.save_auths:
        auth_columns = [auth_type_column(r.auth_type) for r in app.auth_requests]

    claim_columns = [r.group_id for r in app.claim_requests] if app.save_claims else []
    user_columns = [f.label for f in app.fields]

    return [*auth_columns, *claim_columns, *user_columns]


def find_claim(
    claim_request: ClaimRequest,
    claims: list[VerifiedClaim],
) -> VerifiedClaim | None:
    """Verified claim matching a request exactly."""
    is_selectable_by_user = claim_request.is_selectable_by_user or False
    for claim in claims:
        if (
            claim.group_id == claim_request.group_id
            and claim.claim_type == claim_request.claim_type
            and claim.group_timestamp == claim_request.group_timestamp
            and claim.is_selectable_by_user == is_selectable_by_user
        ):
            return claim
    return None


class SubmissionService:
    """
    Verifies zk-form submissions and records them.

    Args:
        spaces: Application registry
        backend: Spreadsheet service
        init_registry: Per-spreadsheet initialization state
        verifier: Proof verification client
        demo: Skip vault id deduplication (default from settings)
    """

    def __init__(
        self,
        spaces: SpaceRegistry,
        backend: SpreadsheetBackend,
        init_registry: StoreInitRegistry,
        verifier: ProofVerifier,
        demo: bool | None = None,
    ) -> None:
        self.spaces = spaces
        self.backend = backend
        self.init_registry = init_registry
        self.verifier = verifier
        self.demo = settings.demo if demo is None else demo

    def resolve_app(self, space_slug: str, app_slug: str) -> ZkFormApp:
        """
        Find the zkForm app a submission targets.

        Raises:
            SubmissionError: Unknown space or app (404), or not a zkForm app (500)
        """
        try:
            space = self.spaces.get_space(space_slug)
        except SpaceNotFoundError as e:
            raise SubmissionError(404, "Space not found") from e

        app = space.find_app(app_slug, kind=ZkFormApp)
        if app is not None:
            return app
        if space.find_app(app_slug) is not None:
            raise SubmissionError(500, "Verify not available for other apps than zkForm")
        raise SubmissionError(404, "App not found")

    async def open_store(self, app: ZkFormApp) -> SpreadsheetStore:
        """Open the app's store, initializing its sheet on first use."""
        store = self.backend.open(app.spreadsheet_id, build_columns(app))
        await self.init_registry.ensure_initialized(store)
        return store

    async def submit(self, request: SubmissionRequest) -> SubmissionStatus:
        """
        Verify a submission and append it to the app's sheet.

        Args:
            request: Submitted form fields, proof response and target app

        Returns:
            SUBSCRIBED, or ALREADY_SUBSCRIBED when the vault id is stored

        Raises:
            SubmissionError: When the submission is rejected; nothing is written
        """
        app = self.resolve_app(request.space_slug, request.app_slug)
        store = await self.open_store(app)

        outcome = await self.verifier.verify(app, request.response)
        if isinstance(outcome, VerificationFailure):
            if outcome.reason == FailureReason.VERIFIER_UNAVAILABLE:
                raise SubmissionError(503, "Verifier unavailable")
            raise SubmissionError(500, "Invalid response")

        try:
            auth_fields = await self._collect_auth_fields(app, outcome, store)
        except AlreadySubscribed as e:
            logger.info("submission_already_subscribed", app=app.slug, vault_id=e.vault_id)
            return SubmissionStatus.ALREADY_SUBSCRIBED

        claim_fields = self._collect_claim_fields(app, outcome)

        await store.add([*request.fields, *auth_fields, *claim_fields])

        logger.info(
            "submission_recorded",
            space=request.space_slug,
            app=app.slug,
            fields=len(request.fields) + len(auth_fields) + len(claim_fields),
        )
        return SubmissionStatus.SUBSCRIBED

    async def _collect_auth_fields(
        self,
        app: ZkFormApp,
        result: VerifiedResult,
        store: SpreadsheetStore,
    ) -> list[SubmissionField]:
        fields: list[SubmissionField] = []

        if not app.save_auths and app.needs_vault_auth:
            vault_id = await result.get_user_id(AuthType.VAULT)
            if not vault_id:
                raise SubmissionError(500, "No Vault Id")
            await self._check_not_subscribed(store, vault_id)
            fields.append(SubmissionField(name=VAULT_ID_COLUMN, value=vault_id))

        if app.save_auths and app.auth_requests:
            for auth_request in app.auth_requests:
                user_id = await result.get_user_id(auth_request.auth_type)
                if not user_id and not auth_request.is_optional:
                    raise SubmissionError(500, f"No {auth_request.auth_type.value} Id")

                if auth_request.auth_type == AuthType.VAULT and user_id:
                    await self._check_not_subscribed(store, user_id)

                fields.append(
                    SubmissionField(
                        name=auth_type_column(auth_request.auth_type),
                        value=user_id,
                    )
                )

        return fields

    def _collect_claim_fields(
        self,
        app: ZkFormApp,
        result: VerifiedResult,
    ) -> list[SubmissionField]:
        if not (app.save_claims and app.claim_requests):
            return []

        fields: list[SubmissionField] = []
        for claim_request in app.claim_requests:
            claim = find_claim(claim_request, result.claims)
            if claim is None:
                logger.error(
                    "submission_claim_not_found",
                    app=app.slug,
                    group_id=claim_request.group_id,
                )
                raise SubmissionError(500, f"No claim matching {claim_request.group_id}")
            fields.append(SubmissionField(name=claim.group_id, value=claim.value))
            logger.debug(
                "submission_claim_matched",
                app=app.slug,
                group_id=claim.group_id,
                claim_value=claim.value,
            )
        return fields

    async def _check_not_subscribed(self, store: SpreadsheetStore, vault_id: str) -> None:
        if self.demo:
            return
        if await store.get(VAULT_ID_COLUMN, vault_id) is not None:
            raise AlreadySubscribed(vault_id)

"""
Space & App Models
==================

Pydantic models for spaces and the apps they host.

Apps are a tagged union discriminated by ``type``. Only ``zkForm`` apps
accept form submissions; the other kinds are valid registry entries.

Version: 0.1.0
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuthType(str, Enum):
    """Identity sources a proof can authenticate."""

    VAULT = "vault"
    GITHUB = "github"
    TWITTER = "twitter"
    EVM_ACCOUNT = "evmAccount"
    TELEGRAM = "telegram"


class ClaimType(str, Enum):
    """Comparison a group claim asserts against its value."""

    GTE = "gte"
    GT = "gt"
    EQ = "eq"
    LT = "lt"
    LTE = "lte"


AUTH_TYPE_COLUMNS: dict[AuthType, str] = {
    AuthType.VAULT: "VaultId",
    AuthType.GITHUB: "GithubId",
    AuthType.TWITTER: "TwitterId",
    AuthType.EVM_ACCOUNT: "EvmAccount",
    AuthType.TELEGRAM: "TelegramId",
}


def auth_type_column(auth_type: AuthType) -> str:
    """Spreadsheet column name holding identifiers of an auth type."""
    return AUTH_TYPE_COLUMNS[auth_type]


class CamelModel(BaseModel):
    """Base model reading camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthRequest(CamelModel):
    """An identity the app asks the user to prove."""

    auth_type: AuthType
    is_optional: bool = False
    user_id: str | None = None


class ClaimRequest(CamelModel):
    """A group membership the app asks the user to prove."""

    group_id: str
    claim_type: ClaimType = ClaimType.GTE
    group_timestamp: int | str = "latest"
    value: int = 1
    is_selectable_by_user: bool | None = None


class FormField(CamelModel):
    """A user-supplied form field."""

    label: str
    placeholder: str | None = None
    is_required: bool = False


class BaseApp(CamelModel):
    """Attributes shared by all app kinds."""

    slug: str
    name: str
    app_id: str
    description: str | None = None
    auth_requests: list[AuthRequest] = Field(default_factory=list)
    claim_requests: list[ClaimRequest] = Field(default_factory=list)
    impersonate_addresses: list[str] = Field(default_factory=list)

    @property
    def needs_vault_auth(self) -> bool:
        """Whether a vault authentication is among the auth requests."""
        return any(r.auth_type == AuthType.VAULT for r in self.auth_requests)


class ZkFormApp(BaseApp):
    """Form whose verified submissions are appended to a spreadsheet."""

    type: Literal["zkForm"] = "zkForm"
    spreadsheet_id: str
    save_auths: bool = False
    save_claims: bool = False
    fields: list[FormField] = Field(default_factory=list)


class ZkDropApp(BaseApp):
    """Token drop gated by a proof."""

    type: Literal["zkDrop"] = "zkDrop"
    contract_address: str | None = None


class ZkBadgeApp(BaseApp):
    """Badge minted from a proof."""

    type: Literal["zkBadge"] = "zkBadge"
    badge_id: str | None = None


class ZkTelegramBotApp(BaseApp):
    """Telegram group gated by a proof."""

    type: Literal["zkTelegramBot"] = "zkTelegramBot"
    telegram_group_id: str | None = None


class ZkSubApp(BaseApp):
    """Newsletter subscription gated by a proof."""

    type: Literal["zkSub"] = "zkSub"


App = Annotated[
    ZkFormApp | ZkDropApp | ZkBadgeApp | ZkTelegramBotApp | ZkSubApp,
    Field(discriminator="type"),
]


class Space(CamelModel):
    """A collection of apps under one slug."""

    slug: str
    name: str
    description: str | None = None
    apps: list[App] = Field(default_factory=list)

    def find_app(self, slug: str, kind: type[BaseApp] | None = None) -> App | None:
        """Find an app by slug, optionally only among apps of one kind."""
        for app in self.apps:
            if app.slug == slug and (kind is None or isinstance(app, kind)):
                return app
        return None

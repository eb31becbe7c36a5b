"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreMode(str, Enum):
    """Record store backend."""

    MOCK = "mock"
    GOOGLE = "google"


class VerifierSettings(BaseSettings):
    """Proof verification service configuration."""

    model_config = SettingsConfigDict(env_prefix="VERIFIER_")

    url: str = "http://localhost:8080"
    timeout_seconds: float = 30.0

    # Fixed app id used instead of the app's own in development
    dev_app_id: str = "0x4c40e70b081752680ce258ad321f9e58"


class StoreSettings(BaseSettings):
    """Spreadsheet record store configuration."""

    model_config = SettingsConfigDict(env_prefix="STORE_")

    mode: StoreMode = StoreMode.MOCK

    # Google service account
    google_client_email: str = ""
    google_private_key: SecretStr = SecretStr("")
    google_token_url: str = "https://oauth2.googleapis.com/token"
    google_sheets_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    sheet_name: str = "Sheet1"
    timeout_seconds: float = 30.0

    @property
    def private_key_pem(self) -> str:
        """Private key with escaped newlines restored."""
        return self.google_private_key.get_secret_value().replace("\\n", "\n")


class SpacesSettings(BaseSettings):
    """Application registry configuration."""

    model_config = SettingsConfigDict(env_prefix="SPACES_")

    config_path: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent / "config" / "spaces.json"
    )


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    port: int = Field(default=8010, alias="ZK_FORM_PORT")

    # Demo deployments accept impersonated vaults and skip deduplication
    demo: bool = Field(default=False, alias="IS_DEMO")

    verifier: VerifierSettings = Field(default_factory=VerifierSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    spaces: SpacesSettings = Field(default_factory=SpacesSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()

"""
Google Sheets Record Store
==========================

Spreadsheet backend over the Google Sheets REST API (v4).

Authenticates as a service account: a signed JWT assertion is exchanged
for an OAuth access token, which is cached until shortly before expiry.

Version: 0.1.0
"""

import time
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx
from jose import jwt

from shared.config import StoreMode, settings
from shared.logging import get_logger
from shared.models.submission import SubmissionField
from shared.store.client import Row, SpreadsheetBackend, SpreadsheetStore

logger = get_logger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
TOKEN_LIFETIME_SECONDS = 3600
TOKEN_REFRESH_MARGIN_SECONDS = 60


class ServiceAccountCredentials:
    """
    OAuth access tokens for a Google service account.

    Args:
        client_email: Service account email
        private_key: PEM-encoded RSA private key
        token_url: OAuth token endpoint
        client: HTTP client used for the token exchange
    """

    def __init__(
        self,
        client_email: str,
        private_key: str,
        token_url: str,
        client: httpx.AsyncClient,
    ) -> None:
        self._client_email = client_email
        self._private_key = private_key
        self._token_url = token_url
        self._client = client
        self._token: str | None = None
        self._expires_at = 0.0

    def _assertion(self, now: int) -> str:
        return jwt.encode(
            {
                "iss": self._client_email,
                "scope": SHEETS_SCOPE,
                "aud": self._token_url,
                "iat": now,
                "exp": now + TOKEN_LIFETIME_SECONDS,
            },
            self._private_key,
            algorithm="RS256",
        )

    async def access_token(self) -> str:
        """Get a valid access token, refreshing it when close to expiry."""
        if self._token and time.time() < self._expires_at - TOKEN_REFRESH_MARGIN_SECONDS:
            return self._token

        now = int(time.time())
        response = await self._client.post(
            self._token_url,
            data={"grant_type": JWT_BEARER_GRANT, "assertion": self._assertion(now)},
        )
        response.raise_for_status()
        data = response.json()

        self._token = data["access_token"]
        self._expires_at = now + int(data.get("expires_in", TOKEN_LIFETIME_SECONDS))
        logger.debug("google_access_token_refreshed", client_email=self._client_email)
        return self._token


class GoogleSheetsBackend(SpreadsheetBackend):
    """
    Google Sheets service connection.

    Args:
        client: Preconfigured HTTP client
        credentials: Token source (default: service account from settings)
        sheet_name: Worksheet holding the rows
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        credentials: ServiceAccountCredentials | None = None,
        sheet_name: str | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.store.timeout_seconds),
        )
        self._credentials = credentials or ServiceAccountCredentials(
            client_email=settings.store.google_client_email,
            private_key=settings.store.private_key_pem,
            token_url=settings.store.google_token_url,
            client=self._client,
        )
        self._sheets_url = settings.store.google_sheets_url
        self.sheet_name = sheet_name or settings.store.sheet_name

    @property
    def mode(self) -> StoreMode:
        return StoreMode.GOOGLE

    def open(self, spreadsheet_id: str, columns: Sequence[str]) -> "GoogleSpreadsheetStore":
        return GoogleSpreadsheetStore(self, spreadsheet_id, columns)

    async def request(
        self,
        method: str,
        spreadsheet_id: str,
        path: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Call the Sheets API for one spreadsheet.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
        """
        token = await self._credentials.access_token()
        response = await self._client.request(
            method,
            f"{self._sheets_url}/{spreadsheet_id}{path}",
            headers={"Authorization": f"Bearer {token}"},
            **kwargs,
        )
        response.raise_for_status()
        return response.json()

    async def health_check(self) -> dict[str, Any]:
        """Check that an access token can be obtained."""
        try:
            start = time.perf_counter()
            await self._credentials.access_token()
            latency_ms = (time.perf_counter() - start) * 1000
            return {
                "status": "healthy",
                "mode": self.mode.value,
                "latency_ms": round(latency_ms, 2),
            }
        except Exception as e:
            logger.error("google_sheets_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "mode": self.mode.value,
                "error": str(e),
            }

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("google_sheets_client_closed")


class GoogleSpreadsheetStore(SpreadsheetStore):
    """Store over the first worksheet of a Google spreadsheet."""

    def __init__(
        self,
        backend: GoogleSheetsBackend,
        spreadsheet_id: str,
        columns: Sequence[str],
    ) -> None:
        super().__init__(spreadsheet_id, columns)
        self._backend = backend

    def _values_path(self, a1_range: str | None = None) -> str:
        # Sheet names are single-quoted in A1 notation, inner quotes doubled
        sheet = "'" + self._backend.sheet_name.replace("'", "''") + "'"
        target = sheet if a1_range is None else f"{sheet}!{a1_range}"
        return "/values/" + quote(target, safe="!:")

    async def init(self) -> None:
        data = await self._backend.request("GET", self.spreadsheet_id, self._values_path("1:1"))
        values = data.get("values") or [[]]
        header = values[0]

        if not header:
            await self._backend.request(
                "PUT",
                self.spreadsheet_id,
                self._values_path("1:1"),
                params={"valueInputOption": "RAW"},
                json={"values": [self.columns]},
            )
            logger.info(
                "google_sheet_header_written",
                spreadsheet_id=self.spreadsheet_id,
                columns=len(self.columns),
            )
        elif header != self.columns:
            logger.warning(
                "google_sheet_header_mismatch",
                spreadsheet_id=self.spreadsheet_id,
                expected=self.columns,
                found=header,
            )

    async def get(self, name: str, value: str) -> Row | None:
        data = await self._backend.request(
            "GET",
            self.spreadsheet_id,
            self._values_path(),
        )
        rows: list[list[str]] = data.get("values") or []
        if not rows or name not in rows[0]:
            return None

        header = rows[0]
        index = header.index(name)
        for row in rows[1:]:
            if index < len(row) and row[index] == value:
                return dict(zip(header, row))
        return None

    async def add(self, fields: Sequence[SubmissionField]) -> None:
        await self._backend.request(
            "POST",
            self.spreadsheet_id,
            self._values_path("A1") + ":append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": [self.build_row(fields)]},
        )
        logger.debug("google_sheet_row_added", spreadsheet_id=self.spreadsheet_id)

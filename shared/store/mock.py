"""
Mock Record Store
=================

In-memory spreadsheet backend for development and testing.

Version: 0.1.0
"""

from collections import Counter
from collections.abc import Sequence
from typing import Any

from shared.config import StoreMode
from shared.logging import get_logger
from shared.models.submission import SubmissionField
from shared.store.client import Row, SpreadsheetBackend, SpreadsheetStore

logger = get_logger(__name__)


class MemorySpreadsheetBackend(SpreadsheetBackend):
    """
    In-memory spreadsheet service.

    Sheets are keyed by spreadsheet id and shared by every store opened
    on the same id. Data is lost on restart.
    """

    def __init__(self) -> None:
        self.headers: dict[str, list[str]] = {}
        self.rows: dict[str, list[Row]] = {}
        self.init_calls: Counter[str] = Counter()

        logger.debug("mock_store_initialized")

    @property
    def mode(self) -> StoreMode:
        return StoreMode.MOCK

    def open(self, spreadsheet_id: str, columns: Sequence[str]) -> "MemorySpreadsheetStore":
        return MemorySpreadsheetStore(self, spreadsheet_id, columns)

    async def health_check(self) -> dict[str, Any]:
        """Check mock store health."""
        return {
            "status": "healthy",
            "mode": self.mode.value,
            "spreadsheets": len(self.headers),
            "rows": sum(len(rows) for rows in self.rows.values()),
        }

    def clear_all(self) -> None:
        """Clear all mock data (for testing)."""
        self.headers.clear()
        self.rows.clear()
        self.init_calls.clear()
        logger.debug("mock_store_cleared")


class MemorySpreadsheetStore(SpreadsheetStore):
    """Store over one in-memory sheet."""

    def __init__(
        self,
        backend: MemorySpreadsheetBackend,
        spreadsheet_id: str,
        columns: Sequence[str],
    ) -> None:
        super().__init__(spreadsheet_id, columns)
        self._backend = backend

    async def init(self) -> None:
        self._backend.init_calls[self.spreadsheet_id] += 1
        if not self._backend.headers.get(self.spreadsheet_id):
            self._backend.headers[self.spreadsheet_id] = self.columns
        self._backend.rows.setdefault(self.spreadsheet_id, [])
        logger.info("mock_store_sheet_ready", spreadsheet_id=self.spreadsheet_id)

    async def get(self, name: str, value: str) -> Row | None:
        for row in self._backend.rows.get(self.spreadsheet_id, []):
            if row.get(name) == value:
                return dict(row)
        return None

    async def add(self, fields: Sequence[SubmissionField]) -> None:
        row = dict(zip(self.columns, self.build_row(fields)))
        self._backend.rows.setdefault(self.spreadsheet_id, []).append(row)
        logger.debug("mock_store_row_added", spreadsheet_id=self.spreadsheet_id)

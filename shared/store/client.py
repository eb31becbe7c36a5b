"""
Record Store Interface
======================

Abstract base classes for spreadsheet-backed record stores.

A backend holds the connection to a spreadsheet service and opens stores;
a store is scoped to one spreadsheet and a fixed column set and appends one
row per submission.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from shared.config import StoreMode, settings
from shared.logging import get_logger
from shared.models.submission import SubmissionField

logger = get_logger(__name__)


Row = dict[str, str]


class SpreadsheetStore(ABC):
    """
    One spreadsheet with a fixed column set.

    Args:
        spreadsheet_id: Identifier of the backing spreadsheet
        columns: Column names, in sheet order
    """

    def __init__(self, spreadsheet_id: str, columns: Sequence[str]) -> None:
        self._spreadsheet_id = spreadsheet_id
        self._columns = list(columns)

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    @abstractmethod
    async def init(self) -> None:
        """Set up the header row of the backing sheet."""
        ...

    @abstractmethod
    async def get(self, name: str, value: str) -> Row | None:
        """
        Find the first row whose column matches a value exactly.

        Args:
            name: Column name
            value: Value to match

        Returns:
            Row as a column->value mapping, or None if absent
        """
        ...

    @abstractmethod
    async def add(self, fields: Sequence[SubmissionField]) -> None:
        """
        Append one row.

        Args:
            fields: Values to write, matched onto columns by name
        """
        ...

    def build_row(self, fields: Sequence[SubmissionField]) -> list[str]:
        """Lay out field values in column order."""
        values: dict[str, str] = {}
        for field in fields:
            if field.name not in self._columns:
                logger.warning(
                    "store_unknown_column",
                    spreadsheet_id=self._spreadsheet_id,
                    column=field.name,
                )
                continue
            values[field.name] = "" if field.value is None else field.value
        return [values.get(column, "") for column in self._columns]


class SpreadsheetBackend(ABC):
    """
    Connection to a spreadsheet service.

    Implements the Strategy pattern for different store modes.
    """

    @property
    @abstractmethod
    def mode(self) -> StoreMode:
        """Get the store mode."""
        ...

    @abstractmethod
    def open(self, spreadsheet_id: str, columns: Sequence[str]) -> SpreadsheetStore:
        """Open a store over one spreadsheet."""
        ...

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check spreadsheet service health."""
        ...

    async def close(self) -> None:
        """Release connections."""
        return None


_backend: SpreadsheetBackend | None = None


def get_store_backend() -> SpreadsheetBackend:
    """
    Get the configured spreadsheet backend.

    Returns:
        SpreadsheetBackend for the configured mode
    """
    global _backend

    if _backend is None:
        if settings.store.mode == StoreMode.GOOGLE:
            from shared.store.google import GoogleSheetsBackend

            _backend = GoogleSheetsBackend()
        else:
            from shared.store.mock import MemorySpreadsheetBackend

            _backend = MemorySpreadsheetBackend()

        logger.info("store_backend_created", mode=_backend.mode.value)

    return _backend

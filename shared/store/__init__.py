"""
Record Store Module
===================

Spreadsheet-backed record stores: one row per verified submission.

Supports:
- Mock (development/testing, in memory)
- Google Sheets

Usage:
    from shared.store import StoreInitRegistry, get_store_backend

    store = get_store_backend().open("spreadsheet-id", ["VaultId", "Email"])
    await registry.ensure_initialized(store)

    if await store.get("VaultId", vault_id) is None:
        await store.add(fields)
"""

from shared.store.client import (
    Row,
    SpreadsheetBackend,
    SpreadsheetStore,
    get_store_backend,
)
from shared.store.mock import MemorySpreadsheetBackend, MemorySpreadsheetStore
from shared.store.registry import StoreInitRegistry

__all__ = [
    # Interfaces
    "Row",
    "SpreadsheetBackend",
    "SpreadsheetStore",
    "get_store_backend",
    # Init state
    "StoreInitRegistry",
    # Implementations
    "MemorySpreadsheetBackend",
    "MemorySpreadsheetStore",
]

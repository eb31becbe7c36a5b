"""
Store Initialization Registry
=============================

Tracks which spreadsheets have had their header initialized.

One registry is owned by the application lifespan. Initialization runs at
most once per spreadsheet id; concurrent first callers await the same
task. A failed initialization is forgotten so that the next caller retries.

Version: 0.1.0
"""

import asyncio

from shared.logging import get_logger
from shared.store.client import SpreadsheetStore

logger = get_logger(__name__)


class StoreInitRegistry:
    """Per-spreadsheet initialization state."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[None]] = {}

    async def ensure_initialized(self, store: SpreadsheetStore) -> None:
        """
        Initialize the store's spreadsheet unless it already was.

        Args:
            store: Store whose spreadsheet must be ready
        """
        key = store.spreadsheet_id
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.create_task(self._initialize(store))
            self._tasks[key] = task

        # shield: a cancelled request must not cancel the shared init
        await asyncio.shield(task)

    async def _initialize(self, store: SpreadsheetStore) -> None:
        try:
            await store.init()
        except Exception as e:
            self._tasks.pop(store.spreadsheet_id, None)
            logger.error(
                "store_init_failed",
                spreadsheet_id=store.spreadsheet_id,
                error=str(e),
            )
            raise
        logger.info("store_initialized", spreadsheet_id=store.spreadsheet_id)

    def is_initialized(self, spreadsheet_id: str) -> bool:
        """Whether initialization for a spreadsheet completed successfully."""
        task = self._tasks.get(spreadsheet_id)
        return task is not None and task.done() and not task.cancelled() and task.exception() is None

    def __len__(self) -> int:
        return len(self._tasks)

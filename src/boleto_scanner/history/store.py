"""
Scan history.

Newest-first list of committed scans, capped at a maximum count. Entries past
the cap are dropped silently, oldest first.
"""

from __future__ import annotations

import logging

from ..schemas.boleto import HistoryRecord
from ..state_store import HISTORY_KEY, KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECORDS = 500


class HistoryStore:
    """Append-only (from the workflow's side) scan history."""

    def __init__(self, store: KeyValueStore, max_records: int = DEFAULT_MAX_RECORDS):
        """
        Initialize history.

        Args:
            store: Backing key-value store
            max_records: Maximum retained entries
        """
        if max_records < 1:
            raise ValueError(f"max_records must be positive, got: {max_records}")
        self.store = store
        self.max_records = max_records

    def list(self) -> list[HistoryRecord]:
        """All entries, newest first."""
        data = self.store.get(HISTORY_KEY) or []
        return [HistoryRecord.from_dict(item) for item in data]

    def list_boletos(self) -> list[HistoryRecord]:
        """Entries that decoded as boletos."""
        return [record for record in self.list() if record.is_boleto and record.boleto]

    def prepend(self, record: HistoryRecord) -> None:
        """Add a record at the head, trimming the tail past max_records."""
        data = self.store.get(HISTORY_KEY) or []
        updated = [record.to_dict(), *data]
        if len(updated) > self.max_records:
            logger.debug(f"History over capacity, dropping {len(updated) - self.max_records} entries")
            updated = updated[: self.max_records]
        self.store.set(HISTORY_KEY, updated)

    def clear(self) -> None:
        """Delete the whole history."""
        self.store.remove(HISTORY_KEY)
        logger.info("Scan history cleared")

    def __len__(self) -> int:
        return len(self.store.get(HISTORY_KEY) or [])

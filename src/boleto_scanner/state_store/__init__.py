"""
State Store (key-value).

Persistent string-keyed JSON storage for:
- Known banks
- Known beneficiaries
- Scan history
"""

from .base import (
    ALL_KEYS,
    BANKS_KEY,
    BENEFICIARIES_KEY,
    HISTORY_KEY,
    KeyValueStore,
    StorageError,
)
from .sqlite_store import SqliteKeyValueStore

__all__ = [
    "KeyValueStore",
    "SqliteKeyValueStore",
    "StorageError",
    "ALL_KEYS",
    "BANKS_KEY",
    "BENEFICIARIES_KEY",
    "HISTORY_KEY",
]

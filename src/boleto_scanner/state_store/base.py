"""
Key-value store interface.

The core only needs a string-keyed store of JSON-serializable values.
Everything the registries and the history persist goes through this contract.
"""

from abc import ABC, abstractmethod
from typing import Any

# Storage keys (SSOT)
BANKS_KEY = "known_banks"
BENEFICIARIES_KEY = "known_beneficiarios"
HISTORY_KEY = "scanResults"

ALL_KEYS = (BANKS_KEY, BENEFICIARIES_KEY, HISTORY_KEY)


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""

    pass


class KeyValueStore(ABC):
    """
    Base class for key-value persistence.

    Values are anything ``json.dumps`` accepts. Implementations raise
    StorageError for I/O failures and return None for absent keys.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Removing an absent key is a no-op."""
        pass

    def remove_multiple(self, keys: list[str] | tuple[str, ...]) -> None:
        """Delete several keys."""
        for key in keys:
            self.remove(key)

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""
        pass

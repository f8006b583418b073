"""
Beneficiary memory.

Remembers the name the operator gave to each beneficiary code.
"""

import logging
from dataclasses import dataclass

from ..state_store import BENEFICIARIES_KEY, KeyValueStore
from .banks import RegistrationResult

logger = logging.getLogger(__name__)

MSG_CREATED = "Beneficiary registered successfully"
MSG_UPDATED = "Beneficiary updated successfully"


@dataclass(frozen=True)
class BeneficiaryEntry:
    """A named beneficiary."""

    code: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"codigo": self.code, "nome": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "BeneficiaryEntry":
        return cls(code=str(data["codigo"]), name=str(data["nome"]))


class BeneficiaryMemory:
    """Persistent beneficiary code → name mapping (insertion ordered)."""

    def __init__(self, store: KeyValueStore):
        """Initialize with a key-value store."""
        self.store = store

    def list_known(self) -> list[BeneficiaryEntry]:
        data = self.store.get(BENEFICIARIES_KEY) or []
        return [BeneficiaryEntry.from_dict(item) for item in data]

    def name_of(self, code: str) -> str:
        """Stored name for a code, or "" if unknown."""
        for entry in self.list_known():
            if entry.code == code:
                return entry.name
        return ""

    def upsert(self, code: str, name: str) -> RegistrationResult:
        """
        Create or rename a beneficiary.

        Always succeeds; the full list is persisted after every call.
        """
        entries = self.list_known()
        updated = False
        for i, entry in enumerate(entries):
            if entry.code == code:
                entries[i] = BeneficiaryEntry(code, name)
                updated = True
                break
        if not updated:
            entries.append(BeneficiaryEntry(code, name))

        self.store.set(BENEFICIARIES_KEY, [entry.to_dict() for entry in entries])
        logger.info(f"{'Updated' if updated else 'Registered'} beneficiary {code} ({name})")
        return RegistrationResult(True, MSG_UPDATED if updated else MSG_CREATED)

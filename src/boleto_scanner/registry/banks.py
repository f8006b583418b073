"""
Bank registry.

Maps 3-digit FEBRABAN bank codes to bank names. Seeded once with the major
Brazilian banks; grows only when the operator registers an unknown code.
"""

import logging
import re
from dataclasses import dataclass

from ..state_store import BANKS_KEY, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BankEntry:
    """A known bank."""

    code: str  # 3 digits, unique
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "BankEntry":
        return cls(code=str(data["code"]), name=str(data["name"]))


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a registry write. Failures are results, not exceptions."""

    success: bool
    message: str


INITIAL_BANKS: tuple[BankEntry, ...] = (
    BankEntry("001", "Banco do Brasil"),
    BankEntry("033", "Santander"),
    BankEntry("104", "Caixa Econômica Federal"),
    BankEntry("237", "Bradesco"),
    BankEntry("341", "Itaú"),
    BankEntry("756", "Sicoob"),
    BankEntry("077", "Inter"),
    BankEntry("655", "Votorantim"),
    BankEntry("041", "Banrisul"),
    BankEntry("748", "Sicredi"),
    BankEntry("422", "Safra"),
    BankEntry("085", "Cooperativo do Brasil"),
)

MSG_REGISTERED = "Bank registered successfully"
MSG_DUPLICATE_CODE = "This bank code is already registered"
MSG_INVALID_CODE = "Bank code must have exactly 3 digits"
MSG_EMPTY_NAME = "Bank name must not be empty"

_BANK_CODE = re.compile(r"[0-9]{3}")


class BankRegistry:
    """
    Persistent bank code → name registry.

    Backed by a KeyValueStore under BANKS_KEY as a JSON list of
    {"code", "name"} objects, kept in insertion order. Every write rewrites
    the whole list.
    """

    def __init__(self, store: KeyValueStore):
        """Initialize with a key-value store."""
        self.store = store

    def _save(self, banks: list[BankEntry]) -> None:
        self.store.set(BANKS_KEY, [bank.to_dict() for bank in banks])

    def initialize(self) -> list[BankEntry]:
        """
        Seed the registry if nothing is persisted yet.

        Idempotent: an existing registry is returned untouched.
        """
        existing = self.store.get(BANKS_KEY)
        if existing is None:
            banks = list(INITIAL_BANKS)
            self._save(banks)
            logger.info(f"Bank registry initialized with {len(banks)} banks")
            return banks
        return [BankEntry.from_dict(item) for item in existing]

    def list_known(self) -> list[BankEntry]:
        """All known banks in insertion order."""
        return self.initialize()

    def is_known(self, code: str) -> bool:
        """Exact, case-sensitive code lookup."""
        return any(bank.code == code for bank in self.list_known())

    def name_of(self, code: str) -> str | None:
        """Bank name for a code, or None if unknown."""
        for bank in self.list_known():
            if bank.code == code:
                return bank.name
        return None

    def register(self, code: str, name: str) -> RegistrationResult:
        """
        Add a new bank.

        Args:
            code: 3-digit bank code
            name: Display name

        Returns:
            RegistrationResult; failure if the code is malformed, the name is
            blank or the code already exists
        """
        name = (name or "").strip()
        if not _BANK_CODE.fullmatch(code or ""):
            return RegistrationResult(False, MSG_INVALID_CODE)
        if not name:
            return RegistrationResult(False, MSG_EMPTY_NAME)

        banks = self.list_known()
        if any(bank.code == code for bank in banks):
            logger.info(f"Refused duplicate bank code {code}")
            return RegistrationResult(False, MSG_DUPLICATE_CODE)

        banks.append(BankEntry(code, name))
        self._save(banks)
        logger.info(f"Registered bank {code} ({name})")
        return RegistrationResult(True, MSG_REGISTERED)

    def remove(self, code: str) -> None:
        """Remove a bank by code. Unknown codes are ignored."""
        banks = self.list_known()
        remaining = [bank for bank in banks if bank.code != code]
        if len(remaining) != len(banks):
            logger.info(f"Removed bank {code}")
        self._save(remaining)

    def reset(self) -> list[BankEntry]:
        """Drop every registered bank and restore the built-in list."""
        self.store.remove(BANKS_KEY)
        logger.info("Bank registry reset")
        return self.initialize()

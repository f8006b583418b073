"""
Canonical decoded boleto object (SSOT).

This is THE single source of truth for decoded bank-slip data.
The decoder produces it, the workflow gates it, the history persists it.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

# Bank code used for government slips (leading digit "8")
GOVERNMENT_BANK_CODE = "Governo"

# Due-date sentinel for an unparseable maturity factor
INVALID_DATE = "invalid"

# Human-facing text for INVALID_DATE
INVALID_DATE_TEXT = "Data inválida"

# Display format for due dates (pt-BR locale)
DATE_DISPLAY_FORMAT = "%d/%m/%Y"


class BoletoKind(str, Enum):
    """Classification by normalized digit count."""

    BARCODE = "44"  # Raw barcode (código de barras)
    DIGITABLE_LINE = "47"  # Typed line (linha digitável)


@dataclass(frozen=True)
class RawScan:
    """A single event from the scanner feed."""

    payload: str
    symbology: str = ""


def _due_date_to_json(value: date | str | None) -> str | None:
    if isinstance(value, date):
        return value.isoformat()
    return value


def _due_date_from_json(value: str | None) -> date | str | None:
    if value is None or value == INVALID_DATE:
        return value
    return date.fromisoformat(value)


@dataclass
class BoletoRecord:
    """
    Decoded bank slip.

    Every field other than the digits, kind and read timestamp is best-effort:
    a field the decoder could not extract stays None. An unparseable maturity
    factor yields due_date == INVALID_DATE instead of None.
    """

    # Required: identity
    barcode_digits: str  # Normalized 44 or 47 digit string
    kind: BoletoKind
    read_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Decoded fields
    bank_code: Optional[str] = None  # 3 digits or GOVERNMENT_BANK_CODE
    amount_cents: Optional[int] = None
    due_date: date | str | None = None  # date, INVALID_DATE or None
    maturity_factor: Optional[str] = None  # Raw 4-digit factor (44-digit form only)
    digitable_line: Optional[str] = None
    beneficiary_code: Optional[str] = None

    # Back-filled from Beneficiary Memory before commit
    beneficiary_name: Optional[str] = None

    @property
    def is_government(self) -> bool:
        """Government slips skip bank and beneficiary gating."""
        return self.bank_code == GOVERNMENT_BANK_CODE

    @property
    def amount(self) -> Decimal | None:
        """Amount in reais (cents / 100)."""
        if self.amount_cents is None:
            return None
        return Decimal(self.amount_cents) / 100

    @property
    def has_invalid_due_date(self) -> bool:
        return self.due_date == INVALID_DATE

    def format_amount(self) -> str | None:
        """Amount as a 2-decimal currency string, e.g. '123.45'."""
        amount = self.amount
        if amount is None:
            return None
        return f"{amount:.2f}"

    def format_due_date(self) -> str | None:
        """Due date as dd/mm/yyyy, the invalid-date text, or None."""
        if self.due_date is None:
            return None
        if self.due_date == INVALID_DATE:
            return INVALID_DATE_TEXT
        return self.due_date.strftime(DATE_DISPLAY_FORMAT)

    def summary(self) -> str:
        """One-line text shown in the scanner's result list."""
        if self.is_government:
            if self.amount_cents:
                return f"Tipo: Boleto Governamental | Valor: R$ {self.format_amount()}"
            return "Tipo: Boleto Governamental | Valor não identificado"

        if self.kind == BoletoKind.DIGITABLE_LINE:
            return self.digitable_line or self.barcode_digits

        return (
            f"Banco: {self.bank_code} | "
            f"Vencimento: {self.format_due_date()} | "
            f"Valor: R$ {self.format_amount()} | "
            f"Benef: {self.beneficiary_code}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "barcode_digits": self.barcode_digits,
            "kind": self.kind.value,
            "read_at": self.read_at.isoformat(),
            "bank_code": self.bank_code,
            "amount_cents": self.amount_cents,
            "amount": self.format_amount(),
            "due_date": _due_date_to_json(self.due_date),
            "maturity_factor": self.maturity_factor,
            "digitable_line": self.digitable_line,
            "beneficiary_code": self.beneficiary_code,
            "beneficiary_name": self.beneficiary_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BoletoRecord":
        """Deserialize from dictionary."""
        return cls(
            barcode_digits=data["barcode_digits"],
            kind=BoletoKind(data["kind"]),
            read_at=datetime.fromisoformat(data["read_at"]),
            bank_code=data.get("bank_code"),
            amount_cents=data.get("amount_cents"),
            due_date=_due_date_from_json(data.get("due_date")),
            maturity_factor=data.get("maturity_factor"),
            digitable_line=data.get("digitable_line"),
            beneficiary_code=data.get("beneficiary_code"),
            beneficiary_name=data.get("beneficiary_name"),
        )


@dataclass
class DecodeResult:
    """Decoder output: either a boleto record or not-a-boleto."""

    digits: str  # Payload with non-digits stripped
    record: Optional[BoletoRecord] = None

    @property
    def is_boleto(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class HistoryRecord:
    """
    A committed scan.

    Immutable once written. ``beneficiary`` holds the composed
    "<bank name> - <beneficiary code>" display value; ``bank_name`` and
    ``boleto.beneficiary_code`` keep the two parts separately.
    """

    id: str
    raw_data: str  # Payload as reported by the scanner
    raw_type: str  # Symbology as reported by the scanner
    timestamp: str  # ISO timestamp of the commit
    is_boleto: bool
    boleto: Optional[BoletoRecord] = None
    beneficiary: Optional[str] = None
    bank_name: Optional[str] = None

    @property
    def barcode_digits(self) -> str | None:
        return self.boleto.barcode_digits if self.boleto else None

    @property
    def digitable_line(self) -> str | None:
        return self.boleto.digitable_line if self.boleto else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "raw_data": self.raw_data,
            "raw_type": self.raw_type,
            "timestamp": self.timestamp,
            "is_boleto": self.is_boleto,
            "boleto": self.boleto.to_dict() if self.boleto else None,
            "beneficiary": self.beneficiary,
            "bank_name": self.bank_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryRecord":
        """Deserialize from dictionary."""
        boleto_data = data.get("boleto")
        return cls(
            id=data["id"],
            raw_data=data.get("raw_data", ""),
            raw_type=data.get("raw_type", ""),
            timestamp=data.get("timestamp", ""),
            is_boleto=data.get("is_boleto", boleto_data is not None),
            boleto=BoletoRecord.from_dict(boleto_data) if boleto_data else None,
            beneficiary=data.get("beneficiary"),
            bank_name=data.get("bank_name"),
        )

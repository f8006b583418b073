"""
SSOT (Single Source of Truth) schemas for the scanner.

These canonical schemas are the ONLY models used across all modules.
"""

from .boleto import (
    DATE_DISPLAY_FORMAT,
    GOVERNMENT_BANK_CODE,
    INVALID_DATE,
    INVALID_DATE_TEXT,
    BoletoKind,
    BoletoRecord,
    DecodeResult,
    HistoryRecord,
    RawScan,
)
from .dedupe import (
    BENEFICIARY_SEPARATOR,
    compose_beneficiary,
    find_duplicate,
    is_duplicate,
    split_beneficiary,
)

__all__ = [
    # Boleto (canonical decoded schema)
    "BoletoRecord",
    "BoletoKind",
    "DecodeResult",
    "HistoryRecord",
    "RawScan",
    "GOVERNMENT_BANK_CODE",
    "INVALID_DATE",
    "INVALID_DATE_TEXT",
    "DATE_DISPLAY_FORMAT",
    # Dedupe
    "find_duplicate",
    "is_duplicate",
    "compose_beneficiary",
    "split_beneficiary",
    "BENEFICIARY_SEPARATOR",
]

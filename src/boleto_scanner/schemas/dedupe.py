"""
Duplicate detection and beneficiary composition.

A scan is a duplicate iff the history already holds an entry with the same
normalized barcode digits OR the same digitable line. Either match is enough;
a field missing on one side only rules out matching on that field.

Committed records carry a composed beneficiary value:

    "<bank name> - <beneficiary code>"

Consumers that need the bank name back use split_beneficiary().
"""

from collections.abc import Iterable

from .boleto import BoletoRecord, HistoryRecord

# Separator between bank name and beneficiary code
BENEFICIARY_SEPARATOR = " - "


def _same(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a == b


def find_duplicate(
    candidate: BoletoRecord,
    history: Iterable[HistoryRecord],
) -> HistoryRecord | None:
    """
    Find the first history entry that duplicates a candidate boleto.

    Args:
        candidate: Freshly decoded record
        history: Committed records (any order)

    Returns:
        The matching HistoryRecord, or None
    """
    for entry in history:
        if entry.boleto is None:
            continue
        if _same(entry.boleto.barcode_digits, candidate.barcode_digits):
            return entry
        if _same(entry.boleto.digitable_line, candidate.digitable_line):
            return entry
    return None


def is_duplicate(candidate: BoletoRecord, history: Iterable[HistoryRecord]) -> bool:
    """True if the history already contains this boleto."""
    return find_duplicate(candidate, history) is not None


def compose_beneficiary(bank_name: str | None, beneficiary_code: str | None) -> str | None:
    """
    Build the persisted beneficiary value.

    Examples:
        >>> compose_beneficiary("Itaú", "123456")
        'Itaú - 123456'
        >>> compose_beneficiary(None, "123456")
        '123456'
    """
    if bank_name:
        return f"{bank_name}{BENEFICIARY_SEPARATOR}{beneficiary_code or ''}"
    return beneficiary_code


def split_beneficiary(value: str | None) -> tuple[str, str]:
    """
    Split a composed beneficiary into (bank name, beneficiary code).

    Splits on the first separator only. A value without separator is
    returned as (value, "").
    """
    if not value:
        return "", ""
    head, sep, tail = value.partition(BENEFICIARY_SEPARATOR)
    if not sep:
        return value, ""
    return head, tail

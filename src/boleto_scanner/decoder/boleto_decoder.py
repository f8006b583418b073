"""
Boleto decoder.

Turns a raw scanner payload into a BoletoRecord. Pure functions only; no
storage, no registry lookups.

Layout of the 44-digit barcode (positions are 0-based, end-exclusive):

    [0:3]   bank code
    [3:4]   currency
    [4:5]   check digit
    [5:9]   maturity factor
    [9:19]  amount in cents
    [19:44] free field (bank specific, holds the beneficiary code)

Government slips (leading "8") carry the amount at [4:15].

Decoding never raises for bad input: a window past the end of the digits
leaves its field unset, an unparseable maturity factor yields INVALID_DATE.
"""

import logging
import re
from datetime import date, datetime, timedelta, timezone

from ..schemas.boleto import (
    GOVERNMENT_BANK_CODE,
    INVALID_DATE,
    BoletoKind,
    BoletoRecord,
    DecodeResult,
)

logger = logging.getLogger(__name__)

BARCODE_LENGTH = 44
DIGITABLE_LINE_LENGTH = 47

GOVERNMENT_PREFIX = "8"

# Maturity factor epochs. The factor space was reset on 2025-02-22, restarting
# at 1000; factors above the cutover threshold still count from 1997-10-07.
LEGACY_EPOCH = date(1997, 10, 7)
CURRENT_EPOCH = date(2025, 2, 22)
CURRENT_EPOCH_FACTOR = 1000
FACTOR_CUTOVER = 5000

# Beneficiary code windows inside the 44-digit barcode, by bank code
BENEFICIARY_WINDOWS: dict[str, tuple[int, int]] = {
    "033": (20, 27),  # Santander
    "341": (35, 41),  # Itaú
}
DEFAULT_BENEFICIARY_WINDOW = (36, 43)

# Amount windows
BARCODE_AMOUNT_WINDOW = (9, 19)
GOVERNMENT_AMOUNT_WINDOW = (4, 15)
DIGITABLE_LINE_AMOUNT_START = 37
AMOUNT_WIDTH = 10

MATURITY_FACTOR_WINDOW = (5, 9)

# Digitable line display groups: 5.5 5.6 5.6 1 14
DIGITABLE_LINE_GROUPS = ((0, 5), (5, 10), (10, 15), (15, 21), (21, 26), (26, 32), (32, 33), (33, 47))

SYMBOLOGY_NAMES = {
    "aztec": "Aztec",
    "codabar": "Codabar",
    "code39": "Code 39",
    "code93": "Code 93",
    "code128": "Code 128",
    "code39mod43": "Code 39 mod 43",
    "datamatrix": "Data Matrix",
    "ean13": "EAN-13",
    "ean8": "EAN-8",
    "itf": "Interleaved 2 of 5",
    "interleaved2of5": "Interleaved 2 of 5",
    "pdf417": "PDF417",
    "qr": "QR Code",
    "upc_a": "UPC-A",
    "upc_e": "UPC-E",
}

_NON_DIGITS = re.compile(r"[^0-9]")
_ALL_DIGITS = re.compile(r"[0-9]+")


def normalize_digits(payload: str) -> str:
    """Strip every non-digit character from a scanner payload."""
    return _NON_DIGITS.sub("", payload or "")


def is_boleto_digits(digits: str) -> bool:
    """A normalized payload is a boleto iff it has exactly 44 or 47 digits."""
    return len(digits) in (BARCODE_LENGTH, DIGITABLE_LINE_LENGTH) and digits.isascii() and digits.isdigit()


def _window(digits: str, start: int, end: int) -> str | None:
    """Substring [start:end), or None if it would run past the input."""
    if end > len(digits):
        return None
    return digits[start:end]


def _parse_int(value: str | None) -> int | None:
    if value is None or not _ALL_DIGITS.fullmatch(value):
        return None
    return int(value)


def parse_amount_cents(value: str | None) -> int | None:
    """
    Parse an amount window (whole cents, no separator).

    Returns None when the window is absent or not numeric.

    Examples:
        >>> parse_amount_cents("0000012345")
        12345
        >>> parse_amount_cents("12a45") is None
        True
    """
    return _parse_int(value)


def compute_due_date(factor: str | int | None) -> date | str:
    """
    Convert a maturity factor to a calendar date.

    Factors above 5000 count days from 1997-10-07. Factors up to 5000 belong
    to the restarted space: 1000 is 2025-02-22.

    Args:
        factor: 4-digit factor as string or int

    Returns:
        The due date, or INVALID_DATE if the factor is not numeric
    """
    if isinstance(factor, int):
        value = factor
    else:
        value = _parse_int(factor.strip() if factor else None)
    if value is None:
        return INVALID_DATE

    try:
        if value > FACTOR_CUTOVER:
            return LEGACY_EPOCH + timedelta(days=value)
        return CURRENT_EPOCH + timedelta(days=value - CURRENT_EPOCH_FACTOR)
    except OverflowError:
        return INVALID_DATE


def beneficiary_window(bank_code: str) -> tuple[int, int]:
    """Position of the beneficiary code inside the barcode for a bank."""
    return BENEFICIARY_WINDOWS.get(bank_code, DEFAULT_BENEFICIARY_WINDOW)


def format_digitable_line(digits: str) -> str:
    """
    Group a 47-digit line for display.

    Example:
        34191.79001 01043.510047 91020.150008 1 96610000014500
    """
    g = [digits[start:end] for start, end in DIGITABLE_LINE_GROUPS]
    return f"{g[0]}.{g[1]} {g[2]}.{g[3]} {g[4]}.{g[5]} {g[6]} {g[7]}"


def barcode_to_line(digits: str) -> str:
    """Rebuild the line representation stored for a 44-digit barcode."""
    return digits[0:4] + digits[19:24] + digits[24:34] + digits[34:44]


def describe_symbology(symbology: str | None) -> str:
    """Human-readable name for a scanner symbology identifier."""
    if not symbology:
        return "Unknown"
    key = str(symbology).lower()
    return SYMBOLOGY_NAMES.get(key, key)


def _decode_government(record: BoletoRecord, digits: str) -> None:
    record.bank_code = GOVERNMENT_BANK_CODE
    record.amount_cents = parse_amount_cents(_window(digits, *GOVERNMENT_AMOUNT_WINDOW))


def _decode_digitable_line(record: BoletoRecord, digits: str) -> None:
    record.bank_code = digits[0:3]
    record.digitable_line = format_digitable_line(digits)
    record.amount_cents = parse_amount_cents(
        _window(digits, DIGITABLE_LINE_AMOUNT_START, DIGITABLE_LINE_AMOUNT_START + AMOUNT_WIDTH)
    )


def _decode_barcode(record: BoletoRecord, digits: str) -> None:
    bank_code = digits[0:3]
    record.bank_code = bank_code

    factor = _window(digits, *MATURITY_FACTOR_WINDOW)
    record.maturity_factor = factor
    record.due_date = compute_due_date(factor)
    record.amount_cents = parse_amount_cents(_window(digits, *BARCODE_AMOUNT_WINDOW))
    record.beneficiary_code = _window(digits, *beneficiary_window(bank_code))
    record.digitable_line = barcode_to_line(digits)

    logger.debug(
        f"Barcode fields: bank={bank_code} currency={digits[3:4]} factor={factor} "
        f"amount={digits[9:19]} santander={digits[20:27]} itau={digits[35:41]} "
        f"others={digits[36:43]}"
    )


def decode(raw_payload: str, read_at: datetime | None = None) -> DecodeResult:
    """
    Decode a raw scanner payload.

    Args:
        raw_payload: Text reported by the scanner (dots, spaces allowed)
        read_at: Read timestamp (defaults to now, UTC)

    Returns:
        DecodeResult; ``record`` is None when the payload is not a boleto
    """
    digits = normalize_digits(raw_payload)

    if not is_boleto_digits(digits):
        logger.debug(f"Not a boleto: {len(digits)} digits")
        return DecodeResult(digits=digits)

    record = BoletoRecord(
        barcode_digits=digits,
        kind=BoletoKind(str(len(digits))),
        read_at=read_at or datetime.now(timezone.utc),
    )

    if digits.startswith(GOVERNMENT_PREFIX):
        _decode_government(record, digits)
    elif record.kind == BoletoKind.DIGITABLE_LINE:
        _decode_digitable_line(record, digits)
    else:
        _decode_barcode(record, digits)

    logger.debug(f"Decoded boleto: {record.summary()}")
    return DecodeResult(digits=digits, record=record)

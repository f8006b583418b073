"""
Boleto decoding.

Pure functions turning scanner payloads into BoletoRecord objects.
"""

from .boleto_decoder import (
    compute_due_date,
    decode,
    describe_symbology,
    format_digitable_line,
    normalize_digits,
    parse_amount_cents,
)

__all__ = [
    "decode",
    "compute_due_date",
    "describe_symbology",
    "format_digitable_line",
    "normalize_digits",
    "parse_amount_cents",
]

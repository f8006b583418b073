"""
CSV export of the scan history.
"""

import csv
from collections.abc import Iterable
from typing import TextIO

from ..schemas.boleto import HistoryRecord

CSV_COLUMNS = ["id", "timestamp", "bankCode", "value", "dueDate", "beneficiary", "barcode"]


def history_row(record: HistoryRecord) -> dict[str, str]:
    """Flatten a history record into export columns."""
    boleto = record.boleto
    return {
        "id": record.id,
        "timestamp": record.timestamp,
        "bankCode": (boleto.bank_code if boleto else None) or "",
        "value": (boleto.format_amount() if boleto else None) or "",
        "dueDate": (boleto.format_due_date() if boleto else None) or "",
        "beneficiary": record.beneficiary or "",
        "barcode": boleto.barcode_digits if boleto else "",
    }


def write_csv(records: Iterable[HistoryRecord], stream: TextIO) -> int:
    """
    Write history records as CSV.

    Args:
        records: Records to export (written in the given order)
        stream: Open text stream

    Returns:
        Number of data rows written
    """
    writer = csv.DictWriter(stream, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    count = 0
    for record in records:
        writer.writerow(history_row(record))
        count += 1
    return count

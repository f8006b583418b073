"""
History analytics.

Aggregates committed boletos by bank, beneficiary and month. Only boletos
with a positive amount are counted. A record is dated by its due date, or by
its read timestamp when the due date is missing or invalid.
"""

import calendar
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from ..schemas.boleto import HistoryRecord
from ..schemas.dedupe import split_beneficiary

DEFAULT_TOP_N = 5


class Period(str, Enum):
    """Look-back window for analytics."""

    ALL = "all"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass
class AnalyticsSummary:
    """Aggregated totals over a filtered set of boletos."""

    total_by_bank: dict[str, Decimal] = field(default_factory=dict)
    total_by_beneficiary: dict[str, Decimal] = field(default_factory=dict)
    total_by_month: dict[str, Decimal] = field(default_factory=dict)  # "M/YYYY" keys
    total: Decimal = Decimal("0")
    count: int = 0

    def sorted_months(self) -> list[tuple[str, Decimal]]:
        """Monthly totals in chronological order."""

        def key(label: str) -> tuple[int, int]:
            month, year = label.split("/")
            return int(year), int(month)

        return [(label, self.total_by_month[label]) for label in sorted(self.total_by_month, key=key)]


def top(totals: dict[str, Decimal], n: int = DEFAULT_TOP_N) -> list[tuple[str, Decimal]]:
    """The n largest entries of a totals mapping."""
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)[:n]


def _months_ago(today: date, months: int) -> date:
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def period_start(period: Period, today: date) -> date | None:
    """First date included by a period (None for ALL)."""
    if period == Period.MONTH:
        return _months_ago(today, 1)
    if period == Period.QUARTER:
        return _months_ago(today, 3)
    if period == Period.YEAR:
        return _months_ago(today, 12)
    return None


def record_date(record: HistoryRecord) -> date | None:
    """Due date if valid, else the read date."""
    boleto = record.boleto
    if boleto is None:
        return None
    if isinstance(boleto.due_date, date):
        return boleto.due_date
    return boleto.read_at.date()


def summarize(
    records: Iterable[HistoryRecord],
    period: Period = Period.ALL,
    bank_code: str | None = None,
    today: date | None = None,
) -> AnalyticsSummary:
    """
    Aggregate history records.

    Args:
        records: History entries (non-boletos are ignored)
        period: Look-back window
        bank_code: Only count this bank (None = all banks)
        today: Reference date for the period (defaults to today)

    Returns:
        AnalyticsSummary with totals
    """
    start = period_start(Period(period), today or date.today())
    summary = AnalyticsSummary()

    for record in records:
        boleto = record.boleto
        if not record.is_boleto or boleto is None:
            continue
        amount = boleto.amount
        if not amount or amount <= 0:
            continue
        if bank_code is not None and boleto.bank_code != bank_code:
            continue

        when = record_date(record)
        if start is not None and (when is None or when < start):
            continue

        if boleto.bank_code:
            summary.total_by_bank[boleto.bank_code] = (
                summary.total_by_bank.get(boleto.bank_code, Decimal("0")) + amount
            )

        if record.beneficiary:
            name = split_beneficiary(record.beneficiary)[0] or record.beneficiary
            summary.total_by_beneficiary[name] = (
                summary.total_by_beneficiary.get(name, Decimal("0")) + amount
            )

        if when is not None:
            label = f"{when.month}/{when.year}"
            summary.total_by_month[label] = summary.total_by_month.get(label, Decimal("0")) + amount

        summary.total += amount
        summary.count += 1

    return summary

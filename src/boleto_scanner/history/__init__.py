"""
Scan history module.

Provides:
- HistoryStore: capped newest-first persistence
- CSV export
- Aggregations for reporting
"""

from .analytics import AnalyticsSummary, Period, summarize, top
from .export import CSV_COLUMNS, write_csv
from .store import DEFAULT_MAX_RECORDS, HistoryStore

__all__ = [
    "HistoryStore",
    "DEFAULT_MAX_RECORDS",
    "write_csv",
    "CSV_COLUMNS",
    "AnalyticsSummary",
    "Period",
    "summarize",
    "top",
]

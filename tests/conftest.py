"""Test fixtures and utilities."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from boleto_scanner.history import HistoryStore
from boleto_scanner.registry import BankRegistry, BeneficiaryMemory
from boleto_scanner.review import ScanWorkflow
from boleto_scanner.state_store import SqliteKeyValueStore

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_db(tmp_path) -> Path:
    """Temporary database path for testing."""
    return tmp_path / "test_boletos.db"


@pytest.fixture
def store(temp_db) -> SqliteKeyValueStore:
    """Fresh key-value store."""
    return SqliteKeyValueStore(temp_db)


@pytest.fixture
def banks(store) -> BankRegistry:
    """Seeded bank registry."""
    registry = BankRegistry(store)
    registry.initialize()
    return registry


@pytest.fixture
def beneficiaries(store) -> BeneficiaryMemory:
    return BeneficiaryMemory(store)


@pytest.fixture
def history(store) -> HistoryStore:
    return HistoryStore(store, max_records=500)


@pytest.fixture
def workflow(banks, beneficiaries, history) -> ScanWorkflow:
    """Workflow over a seeded registry with a fixed clock."""
    return ScanWorkflow(banks, beneficiaries, history, clock=lambda: FIXED_NOW)

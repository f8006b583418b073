"""
Configuration management (SSOT).

This module defines ALL configuration for the boleto scanner.
All config keys are defined here; no other module should invent config keys.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .history.store import DEFAULT_MAX_RECORDS
from .review.workflow import DEFAULT_TRANSIENT_LIMIT


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class HistoryConfig:
    """Scan history settings."""

    # Oldest entries are dropped past this count
    max_records: int = DEFAULT_MAX_RECORDS


@dataclass
class ScannerConfig:
    """Scanner session settings."""

    # Size of the on-screen (non-persisted) result list
    transient_limit: int = DEFAULT_TRANSIENT_LIMIT
    # Ask the operator about unknown banks/beneficiaries; when off, unknown
    # banks are discarded and beneficiaries stay unnamed
    interactive: bool = True


@dataclass
class Config:
    """Application configuration (SSOT)."""

    history: HistoryConfig = field(default_factory=HistoryConfig)
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    state_db_path: Path = field(default_factory=lambda: Path("data/boletos.db"))

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if self.history.max_records < 1:
            errors.append("history.max_records must be >= 1")
        if self.scanner.transient_limit < 1:
            errors.append("scanner.transient_limit must be >= 1")
        if not str(self.state_db_path):
            errors.append("state_db_path is required")

        return errors


def _as_int(label: str, value: object) -> int:
    if isinstance(value, bool):
        raise ConfigValidationError(f"{label} must be an integer, got: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"{label} must be an integer, got: {value!r}") from e


def _env_int(name: str, key: str, file_value: object) -> int:
    """Integer setting: env var wins over the file value."""
    value = os.environ.get(name, "")
    if value:
        return _as_int(name, value)
    return _as_int(key, file_value)


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigValidationError(f"{name} must be a mapping, got: {section!r}")
    return section


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    Environment variables can override config values:
    - BOLETO_STATE_DB
    - BOLETO_HISTORY_MAX
    - BOLETO_TRANSIENT_LIMIT
    - BOLETO_INTERACTIVE (true/false)

    Raises:
        ConfigValidationError: If the resulting configuration is invalid
    """
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"Invalid YAML in {config_path}: {e}") from e
    else:
        data = {}

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path} must contain a mapping at the top level")

    history_data = _section(data, "history")
    history = HistoryConfig(
        max_records=_env_int(
            "BOLETO_HISTORY_MAX",
            "history.max_records",
            history_data.get("max_records", DEFAULT_MAX_RECORDS),
        ),
    )

    scanner_data = _section(data, "scanner")
    interactive = scanner_data.get("interactive", True)
    interactive_env = os.environ.get("BOLETO_INTERACTIVE", "").lower()
    if interactive_env == "true":
        interactive = True
    elif interactive_env == "false":
        interactive = False

    scanner = ScannerConfig(
        transient_limit=_env_int(
            "BOLETO_TRANSIENT_LIMIT",
            "scanner.transient_limit",
            scanner_data.get("transient_limit", DEFAULT_TRANSIENT_LIMIT),
        ),
        interactive=bool(interactive),
    )

    state_db = os.environ.get("BOLETO_STATE_DB", data.get("state_db_path", "data/boletos.db"))

    config = Config(history=history, scanner=scanner, state_db_path=Path(state_db))

    errors = config.validate()
    if errors:
        raise ConfigValidationError("; ".join(errors))

    return config


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Boleto Scanner Configuration

# State database path (banks, beneficiaries, scan history)
state_db_path: "data/boletos.db"

# Scan history
history:
  max_records: 500        # Oldest scans are dropped past this count

# Scanner session
scanner:
  transient_limit: 10     # Results kept in the on-screen list
  interactive: true       # Ask for names of unknown banks / beneficiaries
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(default_config)

"""Tests for configuration loading."""

from pathlib import Path

import pytest

from boleto_scanner.config import (
    Config,
    ConfigValidationError,
    create_default_config,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment out of config tests."""
    for name in (
        "BOLETO_STATE_DB",
        "BOLETO_HISTORY_MAX",
        "BOLETO_TRANSIENT_LIMIT",
        "BOLETO_INTERACTIVE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")

        assert config.history.max_records == 500
        assert config.scanner.transient_limit == 10
        assert config.scanner.interactive is True
        assert config.state_db_path == Path("data/boletos.db")

    def test_default_config_is_valid(self):
        assert Config().validate() == []

    def test_created_file_loads_to_defaults(self, tmp_path):
        path = tmp_path / "conf" / "config.yaml"
        create_default_config(path)

        assert path.exists()
        config = load_config(path)
        assert config.history.max_records == 500
        assert config.scanner.transient_limit == 10


class TestYamlLoading:
    def test_values_from_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "state_db_path: /tmp/x.db\n"
            "history:\n"
            "  max_records: 50\n"
            "scanner:\n"
            "  transient_limit: 3\n"
            "  interactive: false\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.state_db_path == Path("/tmp/x.db")
        assert config.history.max_records == 50
        assert config.scanner.transient_limit == 3
        assert config.scanner.interactive is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path).history.max_records == 500

    def test_empty_sections(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("history:\nscanner:\n", encoding="utf-8")

        config = load_config(path)
        assert config.scanner.transient_limit == 10

    def test_invalid_values_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("history:\n  max_records: 0\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="max_records"):
            load_config(path)


class TestEnvironmentOverrides:
    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("history:\n  max_records: 50\n", encoding="utf-8")
        monkeypatch.setenv("BOLETO_HISTORY_MAX", "7")
        monkeypatch.setenv("BOLETO_TRANSIENT_LIMIT", "2")
        monkeypatch.setenv("BOLETO_STATE_DB", str(tmp_path / "env.db"))

        config = load_config(path)

        assert config.history.max_records == 7
        assert config.scanner.transient_limit == 2
        assert config.state_db_path == tmp_path / "env.db"

    def test_interactive_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BOLETO_INTERACTIVE", "FALSE")
        assert load_config(tmp_path / "absent.yaml").scanner.interactive is False

    def test_non_integer_env_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BOLETO_HISTORY_MAX", "lots")

        with pytest.raises(ConfigValidationError, match="BOLETO_HISTORY_MAX"):
            load_config(tmp_path / "absent.yaml")

    def test_negative_env_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BOLETO_TRANSIENT_LIMIT", "-1")

        with pytest.raises(ConfigValidationError, match="transient_limit"):
            load_config(tmp_path / "absent.yaml")


class TestMalformedFiles:
    """Broken config files surface as ConfigValidationError."""

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("history: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="Invalid YAML"):
            load_config(path)

    def test_non_integer_file_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("history:\n  max_records: lots\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="history.max_records"):
            load_config(path)

    def test_boolean_is_not_an_integer(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("scanner:\n  transient_limit: true\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="scanner.transient_limit"):
            load_config(path)

    def test_numeric_string_accepted(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text('history:\n  max_records: "25"\n', encoding="utf-8")

        assert load_config(path).history.max_records == 25

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("scanner: fast\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="scanner must be a mapping"):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(path)

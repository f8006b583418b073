"""Tests for CLI commands.

These tests verify that all CLI commands are properly registered and callable.
"""

import csv
from pathlib import Path

import pytest
from fixtures import GOVERNMENT_BARCODE, ITAU_BARCODE, ITAU_BENEFICIARY, UNKNOWN_BANK_BARCODE

from boleto_scanner.config import Config
from boleto_scanner.history import HistoryStore
from boleto_scanner.registry import BankRegistry, BeneficiaryMemory
from boleto_scanner.runner.main import cmd_scan, create_cli, main
from boleto_scanner.state_store import SqliteKeyValueStore


@pytest.fixture
def config(temp_db) -> Config:
    return Config(state_db_path=temp_db)


@pytest.fixture
def cli_env(tmp_path, monkeypatch) -> list[str]:
    """Common CLI arguments pointing at a temporary config and database."""
    monkeypatch.setenv("BOLETO_STATE_DB", str(tmp_path / "cli.db"))
    for name in ("BOLETO_HISTORY_MAX", "BOLETO_TRANSIENT_LIMIT", "BOLETO_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)
    return ["-c", str(tmp_path / "config.yaml")]


def _history(db_path: Path) -> HistoryStore:
    return HistoryStore(SqliteKeyValueStore(db_path))


class TestCLICommandRegistry:
    """Tests for CLI command registration."""

    @pytest.mark.parametrize(
        "command",
        ["init", "scan", "banks", "beneficiaries", "history", "stats", "reset"],
    )
    def test_command_registered(self, command):
        args = create_cli().parse_args([command])
        assert args.command == command

    def test_scan_no_input_flag(self):
        """--no-input overrides config, absent leaves it to config."""
        parser = create_cli()

        assert parser.parse_args(["scan"]).interactive is None
        assert parser.parse_args(["scan", "--no-input"]).interactive is False

    def test_scan_symbology_default(self):
        args = create_cli().parse_args(["scan", "123"])
        assert args.symbology == "itf"
        assert args.payloads == ["123"]

    def test_stats_period_choices(self):
        parser = create_cli()
        assert parser.parse_args(["stats", "--period", "quarter"]).period == "quarter"
        with pytest.raises(SystemExit):
            parser.parse_args(["stats", "--period", "week"])

    def test_no_command_prints_help(self):
        assert main([]) == 1


class TestScanCommand:
    def test_commits_known_boleto(self, config, capsys):
        exit_code = cmd_scan(config, [GOVERNMENT_BARCODE], "itf", interactive=False)

        assert exit_code == 0
        assert len(_history(config.state_db_path)) == 1
        assert "COMMITTED" in capsys.readouterr().out

    def test_non_boleto_not_stored(self, config):
        cmd_scan(config, ["https://example.com"], "qr", interactive=False)
        assert len(_history(config.state_db_path)) == 0

    def test_blank_lines_skipped(self, config, capsys):
        cmd_scan(config, ["", "  \n"], "itf", interactive=False)
        assert "Processed 0 scan(s)" in capsys.readouterr().out

    def test_unknown_bank_discarded_without_input(self, config):
        def fail_prompt(_):
            raise AssertionError("should not prompt")

        cmd_scan(config, [UNKNOWN_BANK_BARCODE], "itf", interactive=False, prompt=fail_prompt)

        assert len(_history(config.state_db_path)) == 0

    def test_prompted_bank_name_registers(self, config):
        answers = iter(["Banco Novo"])

        cmd_scan(config, [UNKNOWN_BANK_BARCODE], "itf", interactive=True, prompt=lambda _: next(answers))

        store = SqliteKeyValueStore(config.state_db_path)
        assert BankRegistry(store).name_of("999") == "Banco Novo"
        assert _history(config.state_db_path).list()[0].beneficiary == "Banco Novo - 5555555"

    def test_prompted_beneficiary_name_saved(self, config):
        cmd_scan(config, [ITAU_BARCODE], "itf", interactive=True, prompt=lambda _: "Condomínio")

        store = SqliteKeyValueStore(config.state_db_path)
        assert BeneficiaryMemory(store).name_of(ITAU_BENEFICIARY) == "Condomínio"

    def test_eof_on_prompt_skips(self, config):
        def eof(_):
            raise EOFError

        cmd_scan(config, [ITAU_BARCODE], "itf", interactive=True, prompt=eof)

        assert len(_history(config.state_db_path)) == 1

    def test_duplicate_reported(self, config, capsys):
        cmd_scan(config, [GOVERNMENT_BARCODE, GOVERNMENT_BARCODE], "itf", interactive=False)

        assert len(_history(config.state_db_path)) == 1
        assert "DUPLICATE" in capsys.readouterr().out


class TestMain:
    def test_init_writes_config_and_seeds_banks(self, tmp_path, cli_env):
        assert main(cli_env + ["init"]) == 0

        assert (tmp_path / "config.yaml").exists()
        banks = BankRegistry(SqliteKeyValueStore(tmp_path / "cli.db")).list_known()
        assert len(banks) == 12

    def test_banks_add_and_list(self, cli_env, capsys):
        assert main(cli_env + ["banks", "add", "999", "Banco Novo"]) == 0
        assert main(cli_env + ["banks", "add", "999", "Again"]) == 1
        assert main(cli_env + ["banks", "add", "99", "Short"]) == 1

        capsys.readouterr()
        assert main(cli_env + ["banks", "list"]) == 0
        assert "999  Banco Novo" in capsys.readouterr().out

    def test_scan_and_export(self, tmp_path, cli_env):
        assert main(cli_env + ["scan", "--no-input", GOVERNMENT_BARCODE]) == 0

        output = tmp_path / "out.csv"
        assert main(cli_env + ["history", "export", "-o", str(output)]) == 0

        with open(output, encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 1
        assert rows[0]["bankCode"] == "Governo"
        assert rows[0]["value"] == "123.45"

    def test_history_clear(self, tmp_path, cli_env):
        main(cli_env + ["scan", "--no-input", GOVERNMENT_BARCODE])

        assert main(cli_env + ["history", "clear"]) == 0
        assert len(_history(tmp_path / "cli.db")) == 0

    def test_stats(self, cli_env, capsys):
        main(cli_env + ["scan", "--no-input", GOVERNMENT_BARCODE])
        capsys.readouterr()

        assert main(cli_env + ["stats"]) == 0

        out = capsys.readouterr().out
        assert "Boletos counted:        1" in out
        assert "R$ 123.45" in out

    def test_reset_removes_everything(self, tmp_path, cli_env):
        main(cli_env + ["init"])
        main(cli_env + ["scan", "--no-input", GOVERNMENT_BARCODE])

        assert main(cli_env + ["reset"]) == 0
        assert SqliteKeyValueStore(tmp_path / "cli.db").keys() == []

    def test_invalid_config_fails(self, tmp_path, cli_env):
        (tmp_path / "config.yaml").write_text("history:\n  max_records: 0\n", encoding="utf-8")
        assert main(cli_env + ["history", "list"]) == 1

    @pytest.mark.parametrize(
        "content",
        ["history: [unclosed\n", "history:\n  max_records: lots\n"],
    )
    def test_malformed_config_fails(self, tmp_path, cli_env, content, capsys):
        """Unparseable files are reported, not raised."""
        (tmp_path / "config.yaml").write_text(content, encoding="utf-8")

        assert main(cli_env + ["history", "list"]) == 1
        assert "Failed to load config" in capsys.readouterr().out

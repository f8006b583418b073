"""
CLI main entry point.
"""

import argparse
import logging
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

from ..config import Config, ConfigValidationError, create_default_config, load_config
from ..decoder import describe_symbology
from ..history import HistoryStore, Period, summarize, top, write_csv
from ..registry import BankRegistry, BeneficiaryMemory
from ..review import OperatorDecision, ScanOutcome, ScanWorkflow, WorkflowState
from ..schemas.boleto import RawScan
from ..state_store import ALL_KEYS, SqliteKeyValueStore, StorageError

logger = logging.getLogger(__name__)

DEFAULT_SYMBOLOGY = "itf"

OUTCOME_ICONS = {
    ScanOutcome.COMMITTED: "✓",
    ScanOutcome.DUPLICATE: "⏭",
    ScanOutcome.NOT_BOLETO: "·",
    ScanOutcome.DISCARDED: "✗",
    ScanOutcome.IGNORED: "…",
    ScanOutcome.FAILED: "❌",
    ScanOutcome.PENDING: "?",
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="boleto-scanner",
        description="Decode boleto barcodes and keep a deduplicated scan history",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # init command
    subparsers.add_parser("init", help="Create default config and seed the bank registry")

    # scan command
    scan_parser = subparsers.add_parser(
        "scan", help="Feed scanner payloads through the workflow (stdin if none given)"
    )
    scan_parser.add_argument("payloads", nargs="*", help="Raw scanner payloads")
    scan_parser.add_argument(
        "--symbology",
        type=str,
        default=DEFAULT_SYMBOLOGY,
        help=f"Symbology reported for the payloads (default: {DEFAULT_SYMBOLOGY})",
    )
    scan_parser.add_argument(
        "--no-input",
        dest="interactive",
        action="store_false",
        default=None,
        help="Never prompt: discard unknown banks, leave beneficiaries unnamed",
    )

    # banks command
    banks_parser = subparsers.add_parser("banks", help="Manage known banks")
    banks_sub = banks_parser.add_subparsers(dest="banks_command")
    banks_sub.add_parser("list", help="List known banks")
    add_parser = banks_sub.add_parser("add", help="Register a bank")
    add_parser.add_argument("code", help="3-digit bank code")
    add_parser.add_argument("name", help="Bank name")
    remove_parser = banks_sub.add_parser("remove", help="Remove a bank")
    remove_parser.add_argument("code", help="3-digit bank code")
    banks_sub.add_parser("reset", help="Restore the built-in bank list")

    # beneficiaries command
    benef_parser = subparsers.add_parser("beneficiaries", help="Manage beneficiary names")
    benef_sub = benef_parser.add_subparsers(dest="beneficiaries_command")
    benef_sub.add_parser("list", help="List named beneficiaries")
    set_parser = benef_sub.add_parser("set", help="Name a beneficiary code")
    set_parser.add_argument("code", help="Beneficiary code")
    set_parser.add_argument("name", help="Beneficiary name")

    # history command
    history_parser = subparsers.add_parser("history", help="Show, export or clear scan history")
    history_sub = history_parser.add_subparsers(dest="history_command")
    list_parser = history_sub.add_parser("list", help="List stored scans")
    list_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Maximum entries to show (default: 20)",
    )
    export_parser = history_sub.add_parser("export", help="Export history as CSV")
    export_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file (default: stdout)",
    )
    history_sub.add_parser("clear", help="Delete the whole history")

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Totals by bank, beneficiary and month")
    stats_parser.add_argument(
        "--period",
        choices=[p.value for p in Period],
        default=Period.ALL.value,
        help="Look-back window (default: all)",
    )
    stats_parser.add_argument("--bank", type=str, default=None, help="Only this bank code")

    # reset command
    subparsers.add_parser("reset", help="Delete banks, beneficiaries and history")

    return parser


def _open_store(config: Config) -> SqliteKeyValueStore:
    return SqliteKeyValueStore(config.state_db_path)


def build_workflow(config: Config, store: SqliteKeyValueStore) -> ScanWorkflow:
    """Wire the workflow with repositories over one store."""
    banks = BankRegistry(store)
    banks.initialize()
    return ScanWorkflow(
        banks=banks,
        beneficiaries=BeneficiaryMemory(store),
        history=HistoryStore(store, max_records=config.history.max_records),
        transient_limit=config.scanner.transient_limit,
    )


def _ask(prompt: Callable[[str], str], question: str) -> str:
    try:
        return prompt(question)
    except EOFError:
        return ""


def cmd_init(config: Config, config_path: Path) -> int:
    """Create default config and seed the registry."""
    if not config_path.exists():
        create_default_config(config_path)
        print(f"📝 Wrote default config to {config_path}")

    store = _open_store(config)
    banks = BankRegistry(store).initialize()
    print(f"✓ Bank registry ready ({len(banks)} banks) at {config.state_db_path}")
    return 0


def cmd_scan(
    config: Config,
    payloads: Iterable[str],
    symbology: str,
    interactive: bool | None = None,
    prompt: Callable[[str], str] = input,
) -> int:
    """Run payloads through the scan workflow."""
    if interactive is None:
        interactive = config.scanner.interactive

    store = _open_store(config)
    workflow = build_workflow(config, store)
    counts: dict[ScanOutcome, int] = {}

    for payload in payloads:
        payload = payload.strip()
        if not payload:
            continue

        result = workflow.handle_scan(RawScan(payload=payload, symbology=symbology))

        if result.outcome == ScanOutcome.PENDING:
            print(f"  ? {result.boleto.summary()}")
            name = ""
            if interactive and result.state == WorkflowState.AWAITING_BANK_NAME:
                name = _ask(prompt, f"    Unknown bank {result.pending_code}. Name (blank to cancel): ")
            elif interactive:
                name = _ask(
                    prompt, f"    Beneficiary {result.pending_code} has no name. Name (blank to skip): "
                )
            decision = OperatorDecision.confirm(name) if name.strip() else OperatorDecision.dismiss()
            result = workflow.resolve(decision)

        counts[result.outcome] = counts.get(result.outcome, 0) + 1
        icon = OUTCOME_ICONS.get(result.outcome, " ")
        if result.boleto is not None:
            print(f"  {icon} [{result.outcome.value}] {result.boleto.summary()}")
        else:
            print(f"  {icon} [{result.outcome.value}] {payload} ({describe_symbology(symbology)})")
        if result.message and result.outcome in (ScanOutcome.FAILED, ScanOutcome.DISCARDED):
            print(f"     {result.message}")

    summary = ", ".join(f"{outcome.value.lower()}: {n}" for outcome, n in counts.items())
    print(f"\n✓ Processed {sum(counts.values())} scan(s) ({summary or 'none'})")
    return 1 if counts.get(ScanOutcome.FAILED) else 0


def cmd_banks(config: Config, args: argparse.Namespace) -> int:
    """Manage the bank registry."""
    registry = BankRegistry(_open_store(config))

    if args.banks_command == "add":
        result = registry.register(args.code, args.name)
        print(f"{'✓' if result.success else '❌'} {result.message}")
        return 0 if result.success else 1
    if args.banks_command == "remove":
        registry.remove(args.code)
        print(f"✓ Removed bank {args.code}")
        return 0
    if args.banks_command == "reset":
        banks = registry.reset()
        print(f"✓ Bank registry reset ({len(banks)} banks)")
        return 0

    for bank in registry.list_known():
        print(f"  {bank.code}  {bank.name}")
    return 0


def cmd_beneficiaries(config: Config, args: argparse.Namespace) -> int:
    """Manage beneficiary names."""
    memory = BeneficiaryMemory(_open_store(config))

    if args.beneficiaries_command == "set":
        result = memory.upsert(args.code, args.name)
        print(f"✓ {result.message}")
        return 0

    entries = memory.list_known()
    if not entries:
        print("No named beneficiaries")
    for entry in entries:
        print(f"  {entry.code}  {entry.name}")
    return 0


def cmd_history(config: Config, args: argparse.Namespace) -> int:
    """Show, export or clear history."""
    history = HistoryStore(_open_store(config), max_records=config.history.max_records)

    if args.history_command == "clear":
        history.clear()
        print("✓ History cleared")
        return 0

    if args.history_command == "export":
        records = history.list()
        if args.output:
            with open(args.output, "w", encoding="utf-8", newline="") as f:
                count = write_csv(records, f)
            print(f"✓ Exported {count} record(s) to {args.output}")
        else:
            write_csv(records, sys.stdout)
        return 0

    records = history.list()[: args.limit]
    if not records:
        print("No scans in history")
    for record in records:
        boleto = record.boleto
        if boleto is None:
            print(f"  {record.timestamp}  {record.raw_data}")
            continue
        print(f"  {record.timestamp}  {boleto.bank_code or 'N/A'}  R$ {boleto.format_amount() or '-'}")
        if boleto.due_date is not None:
            print(f"     Vencimento: {boleto.format_due_date()}")
        if record.beneficiary:
            print(f"     Beneficiário: {record.beneficiary}")
        if boleto.beneficiary_name:
            print(f"     Nome: {boleto.beneficiary_name}")
    return 0


def cmd_stats(config: Config, period: str, bank_code: str | None) -> int:
    """Print aggregated totals."""
    history = HistoryStore(_open_store(config), max_records=config.history.max_records)
    summary = summarize(history.list_boletos(), period=Period(period), bank_code=bank_code)

    print("\n📊 Boleto Statistics")
    print("=" * 40)
    print(f"  Boletos counted:        {summary.count}")
    print(f"  Total amount:           R$ {summary.total:.2f}")

    print("\n  By bank:")
    for code, total in top(summary.total_by_bank):
        print(f"    {code:<20} R$ {total:.2f}")

    print("\n  By beneficiary:")
    for name, total in top(summary.total_by_beneficiary):
        print(f"    {name:<20} R$ {total:.2f}")

    print("\n  By month:")
    for label, total in summary.sorted_months():
        print(f"    {label:<20} R$ {total:.2f}")
    print()
    return 0


def cmd_reset(config: Config) -> int:
    """Remove every persisted key."""
    store = _open_store(config)
    store.remove_multiple(ALL_KEYS)
    print("✓ All stored data removed")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    # Load config
    try:
        config = load_config(parsed.config)
    except (ConfigValidationError, OSError, ValueError) as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Route to command
    try:
        if parsed.command == "init":
            return cmd_init(config, parsed.config)
        elif parsed.command == "scan":
            payloads = parsed.payloads or sys.stdin
            return cmd_scan(config, payloads, parsed.symbology, parsed.interactive)
        elif parsed.command == "banks":
            return cmd_banks(config, parsed)
        elif parsed.command == "beneficiaries":
            return cmd_beneficiaries(config, parsed)
        elif parsed.command == "history":
            return cmd_history(config, parsed)
        elif parsed.command == "stats":
            return cmd_stats(config, parsed.period, parsed.bank)
        elif parsed.command == "reset":
            return cmd_reset(config)
        else:
            parser.print_help()
            return 1
    except StorageError as e:
        logger.error(f"Storage failure: {e}")
        print(f"❌ Storage error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

# Version: 3.0
import argparse
import os
import sys

import importlib


def check_dependencies() -> list[str]:
    missing = []
    if sys.version_info < (3, 10):
        missing.append("Python 3.10+ is required.")

    for module, package in [
        ("pdfplumber", "pdfplumber"),
        ("pandas", "pandas"),
        ("openpyxl", "openpyxl"),
    ]:
        try:
            importlib.import_module(module)
        except ImportError:
            missing.append(f"Missing dependency: {package}")
    return missing


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="roundup-statements",
        description="List the withdrawals found in a bank statement PDF.",
    )
    p.add_argument("statement", nargs="?", help="Statement PDF (or a text file with --text)")
    p.add_argument("--text", action="store_true", help="Treat the input as already-extracted text")
    p.add_argument("--excel", metavar="OUT.xlsx", help="Also write the withdrawals to an Excel workbook")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING ... (default: ROUNDUP_LOG_LEVEL or INFO)")
    p.add_argument("--selftest", action="store_true", help="Run the built-in self-tests and exit")
    return p


def _print_table(transactions, summary) -> None:
    print("-" * 100)
    print("Date       | Amount       | Description")
    print("-" * 100)
    for t in transactions:
        print(f"{t.date.isoformat()} | {f'{t.amount:,.2f}':>12} | {t.description[:70]}")
    print("-" * 100)
    print()
    print("Summary:")
    print(f"  Total Transactions: {summary['count']}")
    print(f"  Total Amount: {summary['total']:,.2f}")
    print(f"  Average: {summary['average']:,.2f}")
    print(f"  Date Range: {summary['date_min'].isoformat()} to {summary['date_max'].isoformat()}")


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    from logging_setup import configure_logging

    configure_logging(args.log_level)

    import core
    from statement_utils import ParserSettings

    if args.selftest:
        core._run_self_tests()
        return 0

    if not args.statement:
        print("Usage: python main.py <statement.pdf> [--text] [--excel OUT.xlsx]", file=sys.stderr)
        return 2

    if not os.path.exists(args.statement):
        print(f"Error: statement not found at {args.statement}", file=sys.stderr)
        return 2

    try:
        settings = ParserSettings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.text:
        with open(args.statement, "r", encoding="utf-8", errors="replace") as f:
            transactions = core.extract_withdrawals(f.read(), settings=settings)
    else:
        missing = check_dependencies()
        if missing:
            print("\n".join(missing), file=sys.stderr)
            return 2
        try:
            transactions = core.parse_bank_statement(args.statement, settings=settings)
        except core.StatementReadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    if not transactions:
        print("No withdrawal transactions found.")
        print("The statement layout may not be recognised, or it contains no withdrawals.")
        return 1

    print(f"Found {len(transactions)} withdrawal transactions")
    _print_table(transactions, core.summarize_withdrawals(transactions))

    if args.excel:
        out = core.save_transactions_to_excel(transactions, args.excel)
        print(f"\nSaved: {out}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

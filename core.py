# Version: 3.0
import os
import io
import re
import importlib.util
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from logging_setup import get_logger
from statement_utils import DEFAULT_SETTINGS, Transaction

_PDFPLUMBER_CACHE = None
_PARSER_CACHE: dict = {}
_LOG = get_logger("roundup_parser.core")


# ----------------------------
# CONFIG (edit these as needed)
# ----------------------------

PARSERS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "Parsers")

# Tried in this order; the first parser that returns withdrawals wins.
PARSER_ORDER = [
    "sbi",
    "standard_chartered",
    "generic",
    "enhanced",
    "basic",
]

TEXT_PREVIEW_CHARS = 1000

SBI_SIGNATURE_RE = re.compile(
    r"txn date|state bank of india|ifs\s*c?\s*code\s*:?\s*sbin|\bsbin0[0-9a-z]{6}\b",
    re.IGNORECASE,
)
SBI_TOKEN_RE = re.compile(r"\bSBI\b")


class StatementReadError(RuntimeError):
    """The PDF could not be opened or its text could not be extracted."""


# ----------------------------
# Utilities
# ----------------------------

def ensure_folder(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def _require_pdfplumber():
    global _PDFPLUMBER_CACHE
    if _PDFPLUMBER_CACHE is not None:
        return _PDFPLUMBER_CACHE
    try:
        import pdfplumber
    except ImportError as e:
        raise StatementReadError(
            "pdfplumber is required for PDF text extraction.\n\n"
            "Install it with:\n"
            "  python -m pip install pdfplumber\n\n"
            f"Original error: {e}"
        ) from e
    _PDFPLUMBER_CACHE = pdfplumber
    return pdfplumber


def load_parser_module(name: str):
    if name in _PARSER_CACHE:
        return _PARSER_CACHE[name]

    parser_path = os.path.join(PARSERS_DIR, f"{name}.py")
    if not os.path.exists(parser_path):
        raise FileNotFoundError(
            f"No parser found for statement format '{name}'. Expected:\n"
            f"  - {parser_path}"
        )

    spec = importlib.util.spec_from_file_location(f"parsers.{name}", parser_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Unable to load parser module from {parser_path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    if not hasattr(module, "extract_transactions"):
        raise AttributeError(
            f"Parser '{parser_path}' does not define extract_transactions(text, log=None, settings=None)."
        )

    _PARSER_CACHE[name] = module
    return module


# ----------------------------
# Format detection + dispatch
# ----------------------------

def detect_statement_format(text: str) -> str:
    """Best-effort, advisory format tag: 'sbi' or 'unknown'.

    SBI needs the "Account Statement" title together with one of its column
    headings, its IFSC prefix, or the bank's name. Standard Chartered has no
    tag: its parser validates its own two-date rows and runs regardless.
    """
    t = text or ""
    if "account statement" not in t.lower():
        return "unknown"
    if SBI_SIGNATURE_RE.search(t) or SBI_TOKEN_RE.search(t):
        return "sbi"
    return "unknown"


@dataclass
class StatementParseReport:
    statement_format: str
    parser: str | None = None
    attempts: list = field(default_factory=list)
    transactions: list = field(default_factory=list)


def parse_statement_text(text: str, log=None, settings=None) -> StatementParseReport:
    if not isinstance(text, str):
        raise TypeError(f"statement text must be str, got {type(text).__name__}")

    log = log or _LOG
    settings = settings or DEFAULT_SETTINGS

    fmt = detect_statement_format(text)
    log.info(
        "Detected statement format: %s", fmt,
        extra={"event": "format_detected", "statement_format": fmt},
    )
    report = StatementParseReport(statement_format=fmt)

    for name in PARSER_ORDER:
        parser = load_parser_module(name)
        transactions = parser.extract_transactions(text, log=log, settings=settings)
        report.attempts.append((name, len(transactions)))
        log.info(
            "%s extraction found: %d transactions", name, len(transactions),
            extra={"event": "parser_attempted", "parser": name, "found": len(transactions)},
        )
        if transactions:
            report.parser = name
            report.transactions = transactions
            break

    log.info(
        "Total transactions found: %d", len(report.transactions),
        extra={"event": "statement_parsed", "parser": report.parser, "found": len(report.transactions)},
    )
    return report


def extract_withdrawals(text: str, log=None, settings=None) -> list[Transaction]:
    """Withdrawals found by the first parser (in PARSER_ORDER) that finds any."""
    return parse_statement_text(text, log=log, settings=settings).transactions


# ----------------------------
# PDF text
# ----------------------------

def extract_text_from_pdf(source) -> str:
    """Return the text of every page joined by newlines.

    ``source`` may be a path, raw ``bytes`` or a binary file object. Anything
    that stops the PDF from being read raises ``StatementReadError``.
    """
    pdfplumber = _require_pdfplumber()
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))

    try:
        with pdfplumber.open(source) as pdf:
            pages = [(page.extract_text() or "") for page in pdf.pages]
    except Exception as e:
        raise StatementReadError(f"Failed to parse PDF: {e}") from e

    return "\n".join(pages)


def parse_bank_statement(source, log=None, settings=None) -> list[Transaction]:
    log = log or _LOG
    text = extract_text_from_pdf(source)
    log.debug(
        "Extracted PDF text (first %d chars): %s", TEXT_PREVIEW_CHARS, text[:TEXT_PREVIEW_CHARS],
        extra={"event": "text_extracted", "chars": len(text)},
    )
    return extract_withdrawals(text, log=log, settings=settings)


# ----------------------------
# Summary + Excel output
# ----------------------------

def summarize_withdrawals(transactions: list[Transaction]) -> dict:
    count = len(transactions)
    total = sum((t.amount for t in transactions), Decimal("0"))
    dates = [t.date for t in transactions]
    return {
        "count": count,
        "total": total,
        "average": (total / count).quantize(Decimal("0.01")) if count else Decimal("0"),
        "date_min": min(dates) if dates else None,
        "date_max": max(dates) if dates else None,
    }


def build_output_filename(source_name: str, date_min, date_max) -> str:
    base = os.path.splitext(os.path.basename(source_name or ""))[0].strip() or "Withdrawals"
    base = re.sub(r'[<>:"/\\|?*]+', "_", base)
    if date_min and date_max:
        return f"{base} {date_min.strftime('%d.%m.%y')} - {date_max.strftime('%d.%m.%y')}.xlsx"
    return f"{base}.xlsx"


def save_transactions_to_excel(transactions: list[Transaction], output_path: str) -> str:
    if not transactions:
        raise ValueError("No transactions found!")

    import pandas as pd
    from openpyxl.utils import get_column_letter
    from openpyxl.worksheet.table import Table, TableStyleInfo

    df = pd.DataFrame(
        [
            {"Date": t.date, "Description": t.description, "Amount": float(t.amount), "Type": t.type}
            for t in transactions
        ]
    )
    df.insert(0, "T/N", range(1, len(df) + 1))
    df["Date"] = pd.to_datetime(df["Date"], errors="coerce")

    ensure_folder(os.path.dirname(output_path))
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Withdrawals")
        ws = writer.sheets["Withdrawals"]

        last_row = ws.max_row
        last_col = ws.max_column
        table = Table(displayName="WithdrawalTable", ref=f"A1:{get_column_letter(last_col)}{last_row}")
        table.tableStyleInfo = TableStyleInfo(
            name="TableStyleLight1",
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=False,
            showColumnStripes=False,
        )
        ws.add_table(table)
        ws.freeze_panes = "A2"

        header_to_col = {ws.cell(row=1, column=c).value: c for c in range(1, last_col + 1)}
        date_col = header_to_col.get("Date")
        amt_col = header_to_col.get("Amount")
        for r in range(2, last_row + 1):
            if date_col:
                ws.cell(row=r, column=date_col).number_format = "dd/mm/yyyy"
            if amt_col:
                ws.cell(row=r, column=amt_col).number_format = "#,##,##0.00"

        for col_idx in range(1, last_col + 1):
            max_len = 0
            for row_idx in range(1, last_row + 1):
                val = ws.cell(row=row_idx, column=col_idx).value
                if val is None:
                    continue
                s = val.strftime("%d/%m/%Y") if hasattr(val, "strftime") else str(val)
                max_len = max(max_len, len(s))
            ws.column_dimensions[get_column_letter(col_idx)].width = min(max(max_len + 2, 10), 60)

    _LOG.info(
        "Saved %d withdrawal(s) to %s", len(transactions), output_path,
        extra={"event": "excel_saved", "rows": len(transactions)},
    )
    return output_path


# ----------------------------
# Self-tests
# ----------------------------

def _run_self_tests() -> None:
    line = "4 Apr 2024 4 Apr 2024 TO TRANSFER- JOHN DOE A/C XXXX1234 1,180.00 62,780.51"
    got = extract_withdrawals(line)
    assert len(got) == 1, got
    assert got[0].date == date(2024, 4, 4), got
    assert got[0].description == "Transfer to  JOHN DOE A/C XXXX1234", got
    assert got[0].amount == Decimal("1180.00"), got

    assert extract_withdrawals("15 Apr 2024\nBY TRANSFER- SALARY\n50,000.00") == []

    split = extract_withdrawals("15 Apr\n2024\nTO TRANSFER- RENT\n12,000.00 40,000.00")
    assert split and split[0].date == date(2024, 4, 15), split

    assert detect_statement_format("ACCOUNT STATEMENT\nIFS Code :SBIN0001234") == "sbi"
    assert detect_statement_format("Statement of account") == "unknown"

    s = summarize_withdrawals(got)
    assert s["count"] == 1 and s["total"] == Decimal("1180.00"), s

    assert build_output_filename("a/b/stmt.pdf", date(2024, 4, 1), date(2024, 4, 30)) == "stmt 01.04.24 - 30.04.24.xlsx"

    print(f"Self-tests passed ({datetime.now().strftime('%Y-%m-%d %H:%M:%S')}).")

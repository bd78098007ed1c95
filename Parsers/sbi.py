# Version: sbi-1.2.py
# State Bank of India account statement parser (extracted text, no OCR)
# Defines:
#   extract_transactions(text, log=None, settings=None) -> list[Transaction]
#
# Layout: Txn Date | Value Date | Description | Ref No./Cheque No. | Debit | Credit | Balance
# pdf text extraction breaks rows unpredictably:
#   - date, description and amounts may sit on separate lines
#   - "15 Apr" may be followed by a bare "2024" line
#   - the whole row may sit on one line

from __future__ import annotations

import re

from classifier import Classification, classify, is_fee_line
from logging_setup import get_logger
from statement_utils import (
    DEFAULT_SETTINGS,
    MIN_SBI_AMOUNT,
    MONTH_ALT,
    Skip,
    SkipReason,
    build_withdrawal,
    collect_transactions,
    finalize_description,
    find_amounts,
    parse_day_month_year,
    split_lines,
    squash_whitespace,
    strip_amounts,
)

_LOG = get_logger("roundup_parser.sbi")

PARSER_NAME = "sbi"


# --- Regex / constants ---

FULL_DATE_RE = re.compile(rf"^(?P<date>\d{{1,2}}\s+(?:{MONTH_ALT})\s+\d{{4}})(?!\d)", re.IGNORECASE)
PARTIAL_DATE_RE = re.compile(rf"^(?P<date>\d{{1,2}}\s+(?:{MONTH_ALT}))$", re.IGNORECASE)
YEAR_RE = re.compile(r"^(\d{4})\s*$")
VALUE_DATE_RE = re.compile(rf"^\s*\d{{1,2}}\s+(?:{MONTH_ALT})(?:\s+\d{{4}})?(?!\d)", re.IGNORECASE)

DESCRIPTION_REWRITES = (
    (re.compile(r"^TO TRANSFER-?", re.IGNORECASE), "Transfer to "),
    (re.compile(r"^Forex Txn-", re.IGNORECASE), "Forex Transaction - "),
)


# --- Helpers ---

def _is_table_header(line: str) -> bool:
    return "Debit" in line and "Credit" in line and "Balance" in line


def _starts_record(line: str) -> bool:
    if FULL_DATE_RE.match(line) and "txn date" not in line.lower():
        return True
    return bool(PARTIAL_DATE_RE.match(line))


def _valid_amounts(line: str) -> list:
    # Sub-rupee tokens are reference fragments, not money columns
    return [a for a in find_amounts(line) if a >= MIN_SBI_AMOUNT]


def _debit_amount(amounts: list, description: str):
    """Pick the debit column out of the amounts found on the amount line.

    Three or more tokens: the last three are debit / credit / balance.
    Two tokens: transaction amount then balance.
    One token: only a fee or charge line is trusted to carry its own amount;
    otherwise the lone token is usually the balance.
    """
    if len(amounts) >= 3:
        return amounts[-3]
    if len(amounts) == 2:
        return amounts[0]
    if amounts and is_fee_line(description):
        return amounts[0]
    return None


def _read_record_date(lines: list[str], i: int):
    """Return (date_text, rest_of_line, last_consumed_index) or (None, '', i)."""
    line = lines[i].strip()
    m = FULL_DATE_RE.match(line)
    if m:
        return m.group("date"), line[m.end():], i

    pm = PARTIAL_DATE_RE.match(line)
    if pm and i + 1 < len(lines):
        ym = YEAR_RE.match(lines[i + 1].strip())
        if ym:
            return f"{pm.group('date')} {ym.group(1)}", "", i + 1

    return None, "", i


def _scan(lines: list[str], settings):
    n = len(lines)
    i = 0
    while i < n:
        start = i
        date_text, rest, i = _read_record_date(lines, i)
        if date_text is None:
            i += 1
            continue

        if _is_table_header(lines[start]):
            i += 1
            continue

        rest = VALUE_DATE_RE.sub("", rest, count=1).strip()
        desc_parts: list[str] = []
        amounts: list = []
        amount_line_no = None

        if rest:
            desc_parts.append(rest)
            amounts = _valid_amounts(rest)
            if amounts:
                amount_line_no = i

        if not amounts:
            for j in range(i + 1, min(i + settings.sbi_lookahead_lines, n)):
                nxt = lines[j].strip()
                if _starts_record(nxt):
                    break

                found = _valid_amounts(nxt)
                if found:
                    amounts = found
                    amount_line_no = j
                    desc_parts.append(nxt)
                    break

                if nxt and "txn date" not in nxt.lower() and not YEAR_RE.match(nxt):
                    desc_parts.append(nxt)

        if amount_line_no is None:
            yield Skip(SkipReason.NO_AMOUNT, start + 1, date_text)
            i += 1
            continue

        next_i = amount_line_no + 1
        raw_description = " ".join(desc_parts)
        cleaned = squash_whitespace(strip_amounts(raw_description))
        kind = classify(cleaned, settings.known_payers)

        if kind is Classification.CREDIT:
            yield Skip(SkipReason.CREDIT, start + 1, cleaned[:60])
            i = next_i
            continue
        if kind is Classification.UNKNOWN:
            yield Skip(SkipReason.UNCLASSIFIED, start + 1, cleaned[:60])
            i = next_i
            continue

        debit = _debit_amount(amounts, cleaned)
        if debit is None:
            yield Skip(SkipReason.NO_AMOUNT, start + 1, "single amount is the running balance")
            i = next_i
            continue

        description = finalize_description(raw_description, DESCRIPTION_REWRITES, settings.max_description_len)
        yield build_withdrawal(start + 1, date_text, parse_day_month_year, description, debit, settings)
        i = next_i


# --- Required public functions ---

def extract_transactions(text: str, log=None, settings=None) -> list:
    settings = settings or DEFAULT_SETTINGS
    lines = split_lines(text)
    (log or _LOG).debug(
        "sbi: scanning %d line(s)", len(lines),
        extra={"event": "parser_started", "parser": PARSER_NAME},
    )
    return collect_transactions(_scan(lines, settings), PARSER_NAME, log or _LOG)

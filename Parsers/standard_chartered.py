# Version: standard_chartered-1.1.py
# Standard Chartered account statement parser (extracted text, no OCR)
# Defines:
#   extract_transactions(text, log=None, settings=None) -> list[Transaction]
#
# Rows open with two short dates, "17 Jun 19  16 Jun 19" (transaction, value).
# Further transactions booked on the same day omit the date line and start
# directly with the transaction type (PURCHASE, UPI/, IMPS/ ...).
# The amount line ends with: withdrawal-or-deposit  balance

from __future__ import annotations

import re

from classifier import Classification, classify
from logging_setup import get_logger
from statement_utils import (
    AMOUNT_RE,
    DEFAULT_SETTINGS,
    MONTH_ALT,
    Skip,
    SkipReason,
    build_withdrawal,
    collect_transactions,
    finalize_description,
    find_amounts,
    parse_day_month_yy,
    split_lines,
    squash_whitespace,
    strip_amounts,
)

_LOG = get_logger("roundup_parser.standard_chartered")

PARSER_NAME = "standard_chartered"


# --- Regex / constants ---

_SHORT_DATE = rf"\d{{1,2}}\s+(?:{MONTH_ALT})\s+\d{{2}}(?!\d)"
DATE_LINE_RE = re.compile(rf"^(?P<txn>{_SHORT_DATE})\s+(?P<value>{_SHORT_DATE})", re.IGNORECASE)
CONTINUATION_RE = re.compile(r"^(PURCHASE|UPI/|IMPS/|ATM|CRADJ|CREDIT)", re.IGNORECASE)

DESCRIPTION_REWRITES = (
    (re.compile(r"^PURCHASE\s+", re.IGNORECASE), "Purchase at "),
    (re.compile(r"^ATM WITHDRAWAL\s+", re.IGNORECASE), "ATM Withdrawal - "),
    (re.compile(r"^UPI/", re.IGNORECASE), "UPI Payment - "),
    (re.compile(r"^IMPS/", re.IGNORECASE), "IMPS - "),
)


def _has_amount(line: str) -> bool:
    return bool(AMOUNT_RE.search(line))


def _scan(lines: list[str], settings):
    n = len(lines)
    last_date = None
    i = 0
    while i < n:
        line = lines[i].strip()
        if not line:
            i += 1
            continue

        m = DATE_LINE_RE.match(line)
        if m:
            date_text = m.group("txn")
            last_date = date_text
            if "BALANCE FORWARD" in line.upper():
                yield Skip(SkipReason.BALANCE_FORWARD, i + 1, line[:60])
                i += 1
                continue
            rest = line[m.end():].strip()
            first = i + 1
        elif last_date and CONTINUATION_RE.match(line):
            date_text = last_date
            rest = ""
            first = i
        else:
            i += 1
            continue

        desc_parts: list[str] = []
        amount_line = None
        amount_line_no = None

        if rest:
            if _has_amount(rest):
                amount_line, amount_line_no = rest, i
            else:
                desc_parts.append(rest)

        if amount_line is None:
            for j in range(first, min(first + settings.sc_lookahead_lines, n)):
                nxt = lines[j].strip()
                if DATE_LINE_RE.match(nxt):
                    break
                if not nxt:
                    continue
                # another same-day transaction begins before this one found its amount
                if j > first and CONTINUATION_RE.match(nxt):
                    break
                if _has_amount(nxt):
                    amount_line, amount_line_no = nxt, j
                    break
                desc_parts.append(nxt)

        if amount_line is None:
            yield Skip(SkipReason.NO_AMOUNT, i + 1, date_text)
            i += 1
            continue

        next_i = amount_line_no + 1
        amounts = [a for a in find_amounts(amount_line) if 0 < a < settings.amount_ceiling]
        if len(amounts) < 2:
            yield Skip(SkipReason.NO_AMOUNT, i + 1, "amount line without a balance column")
            i = next_i
            continue

        withdrawal = amounts[-2]
        raw_description = " ".join(desc_parts + [amount_line])
        cleaned = squash_whitespace(strip_amounts(raw_description))
        kind = classify(cleaned, settings.known_payers)

        if kind is Classification.CREDIT:
            yield Skip(SkipReason.CREDIT, i + 1, cleaned[:60])
        elif kind is Classification.UNKNOWN:
            yield Skip(SkipReason.UNCLASSIFIED, i + 1, cleaned[:60])
        else:
            description = finalize_description(raw_description, DESCRIPTION_REWRITES, settings.max_description_len)
            yield build_withdrawal(i + 1, date_text, parse_day_month_yy, description, withdrawal, settings)

        i = next_i


def extract_transactions(text: str, log=None, settings=None) -> list:
    settings = settings or DEFAULT_SETTINGS
    lines = split_lines(text)
    (log or _LOG).debug(
        "standard_chartered: scanning %d line(s)", len(lines),
        extra={"event": "parser_started", "parser": PARSER_NAME},
    )
    return collect_transactions(_scan(lines, settings), PARSER_NAME, log or _LOG)

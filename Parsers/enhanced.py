# enhanced.py
# Fallback for already-tabular text: one row regex per line picks up
# "date  description  debit  [credit]" rows directly. The first money column
# after the description is read as the debit.

from __future__ import annotations

import re

from classifier import Classification, classify
from logging_setup import get_logger
from statement_utils import (
    DEFAULT_SETTINGS,
    Skip,
    SkipReason,
    build_withdrawal,
    collect_transactions,
    finalize_description,
    parse_amount,
    parse_numeric_date,
    split_lines,
)

_LOG = get_logger("roundup_parser.enhanced")

PARSER_NAME = "enhanced"

_MONEY = r"₹?(?:\d{1,3}(?:,\d{2,3})+|\d+)\.\d{2}(?![\d,])"

# The description starts and ends on a non-space character, so the gap before
# the debit column belongs to [ \t]+ alone.
ROW_RE = re.compile(
    r"[ \t]*(?P<date>\d{1,2}[/\-.]\d{1,2}[/\-.](?:\d{4}|\d{2}))(?!\d)[ \t]+"
    r"(?P<description>\S(?:[^\n]*?\S)?)[ \t]+"
    rf"(?P<debit>{_MONEY})"
    rf"(?:[ \t]+(?P<credit>{_MONEY}))?"
)


def _scan(lines: list[str], settings):
    for idx, line in enumerate(lines):
        m = ROW_RE.match(line)
        if not m:
            continue

        line_no = idx + 1
        description = m.group("description")

        if classify(description, settings.known_payers) is Classification.CREDIT:
            yield Skip(SkipReason.CREDIT, line_no, description[:60])
            continue

        debit = parse_amount(m.group("debit"))
        credit = parse_amount(m.group("credit") or "")
        if not debit and credit:
            yield Skip(SkipReason.CREDIT, line_no, f"credit column {credit}")
            continue

        yield build_withdrawal(
            line_no,
            m.group("date"),
            parse_numeric_date,
            finalize_description(description, max_len=settings.max_description_len),
            debit,
            settings,
        )


def extract_transactions(text: str, log=None, settings=None) -> list:
    settings = settings or DEFAULT_SETTINGS
    return collect_transactions(_scan(split_lines(text), settings), PARSER_NAME, log or _LOG)

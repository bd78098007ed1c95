# generic.py
# Fallback for statements whose rows sit on one line:
#   <DD/MM/YYYY> <description> <amount> [<amount> ...]
# A row is a withdrawal when the line carries a debit keyword and no credit keyword.

from __future__ import annotations

import re

from classifier import Classification, classify_line
from logging_setup import get_logger
from statement_utils import (
    DEFAULT_SETTINGS,
    Skip,
    SkipReason,
    build_withdrawal,
    collect_transactions,
    finalize_description,
    find_amounts,
    parse_numeric_date,
    split_lines,
)

_LOG = get_logger("roundup_parser.generic")

PARSER_NAME = "generic"

DATE_RE = re.compile(r"(?<!\d)(\d{1,2}[/\-.]\d{1,2}[/\-.](?:\d{4}|\d{2}))(?!\d)")
MIN_LINE_LEN = 15


def _scan(lines: list[str], settings):
    for idx, raw in enumerate(lines):
        line = raw.strip()
        if len(line) < MIN_LINE_LEN:
            continue

        m = DATE_RE.search(line)
        if not m:
            continue

        kind = classify_line(line)
        if kind is Classification.CREDIT:
            yield Skip(SkipReason.CREDIT, idx + 1, line[:60])
            continue
        if kind is not Classification.DEBIT:
            yield Skip(SkipReason.UNCLASSIFIED, idx + 1, line[:60])
            continue

        body = f"{line[:m.start()]} {line[m.end():]}"
        amounts = [a for a in find_amounts(body) if 0 < a < settings.amount_ceiling]
        if not amounts:
            yield Skip(SkipReason.NO_AMOUNT, idx + 1, line[:60])
            continue

        description = finalize_description(body, max_len=settings.max_description_len)
        yield build_withdrawal(idx + 1, m.group(1), parse_numeric_date, description, amounts[0], settings)


def extract_transactions(text: str, log=None, settings=None) -> list:
    settings = settings or DEFAULT_SETTINGS
    return collect_transactions(_scan(split_lines(text), settings), PARSER_NAME, log or _LOG)

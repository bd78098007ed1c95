# basic.py
# Last-resort sequential parser. Assumes the statement already prints debits
# as negative numbers ("-450.00"). A record runs from one date line to the
# next; the last negative amount seen inside it becomes the withdrawal.

from __future__ import annotations

import re

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
    squash_whitespace,
    strip_amounts,
)

_LOG = get_logger("roundup_parser.basic")

PARSER_NAME = "basic"

DATE_RE = re.compile(r"(?<!\d)(\d{1,2}[/\-]\d{1,2}[/\-](?:\d{4}|\d{2}))(?!\d)")
NEGATIVE_AMOUNT_RE = re.compile(r"(?<![\w.,/-])-₹?(?P<value>\d[\d,]*(?:\.\d+)?)")


def _close_record(date_text, line_no, desc_parts, amount, settings):
    if amount is None:
        return Skip(SkipReason.NO_AMOUNT, line_no, "no negative amount before the next date")
    description = finalize_description(" ".join(desc_parts), max_len=settings.max_description_len)
    return build_withdrawal(line_no, date_text, parse_numeric_date, description, amount, settings)


def _scan(lines: list[str], settings):
    current_date = None
    start_no = 0
    desc_parts: list[str] = []
    amount = None

    for idx, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue

        dm = DATE_RE.search(line)
        if dm:
            if current_date is not None:
                yield _close_record(current_date, start_no, desc_parts, amount, settings)
            current_date = dm.group(1)
            start_no = idx + 1
            desc_parts = []
            amount = None
            body = f"{line[:dm.start()]} {line[dm.end():]}"
        else:
            body = line

        if current_date is None:
            continue

        negatives = list(NEGATIVE_AMOUNT_RE.finditer(body))
        if negatives:
            amount = parse_amount(negatives[-1].group("value"))

        text = squash_whitespace(strip_amounts(NEGATIVE_AMOUNT_RE.sub(" ", body)))
        if text:
            desc_parts.append(text)

    if current_date is not None:
        yield _close_record(current_date, start_no, desc_parts, amount, settings)


def extract_transactions(text: str, log=None, settings=None) -> list:
    settings = settings or DEFAULT_SETTINGS
    return collect_transactions(_scan(split_lines(text), settings), PARSER_NAME, log or _LOG)

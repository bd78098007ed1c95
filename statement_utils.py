# Version: 1.0
"""Shared helpers for the statement parsers.

Amount tokens, date normalizers, description clean-up and the per-record fold
live here once so that each parser in ``Parsers/`` only carries the line
patterns of its own layout.
"""

from __future__ import annotations

import datetime as _dt
import os
import re
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Iterable, Union

from logging_setup import get_logger


# ----------------------------
# CONFIG (edit these as needed)
# ----------------------------

AMOUNT_CEILING = Decimal("10000000")
MAX_DESCRIPTION_LEN = 200
SBI_LOOKAHEAD_LINES = 15
SC_LOOKAHEAD_LINES = 10
MIN_SBI_AMOUNT = Decimal("1.00")

DEFAULT_DESCRIPTION = "Withdrawal"
WITHDRAWAL = "withdrawal"


# --- Regex / constants ---

MONTHS_3 = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
MONTH_ALT = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"

# Indian grouping (1,96,760.96) as well as western grouping and bare digits.
# A dot-separated date such as 15.04.2024 must not read as 15.04.
AMOUNT_RE = re.compile(r"(?<![\d,])(?<!\d\.)(?:\d{1,3}(?:,\d{2,3})+|\d+)\.\d{2}(?!\d)(?!\.\d)")

NUMERIC_DATE_RE = re.compile(r"^(?P<d>\d{1,2})[/\-.](?P<m>\d{1,2})[/\-.](?P<y>\d{4}|\d{2})$")
ISO_DATE_RE = re.compile(r"^(?P<y>\d{4})-(?P<m>\d{1,2})-(?P<d>\d{1,2})$")


class DateParseError(ValueError):
    """A single candidate record carries a date that cannot be read."""


@dataclass(frozen=True)
class ParserSettings:
    amount_ceiling: Decimal = AMOUNT_CEILING
    max_description_len: int = MAX_DESCRIPTION_LEN
    sbi_lookahead_lines: int = SBI_LOOKAHEAD_LINES
    sc_lookahead_lines: int = SC_LOOKAHEAD_LINES
    known_payers: tuple[str, ...] = ()

    @classmethod
    def from_env(cls) -> "ParserSettings":
        """Build settings, honouring ``ROUNDUP_AMOUNT_CEILING`` and ``ROUNDUP_DESCRIPTION_MAX_LEN``."""
        kwargs = {}
        ceiling = os.getenv("ROUNDUP_AMOUNT_CEILING")
        if ceiling:
            try:
                kwargs["amount_ceiling"] = Decimal(ceiling.replace(",", "").strip())
            except InvalidOperation as e:
                raise ValueError(f"ROUNDUP_AMOUNT_CEILING is not a number: {ceiling!r}") from e
        max_len = os.getenv("ROUNDUP_DESCRIPTION_MAX_LEN")
        if max_len:
            kwargs["max_description_len"] = int(max_len)
        return cls(**kwargs)


DEFAULT_SETTINGS = ParserSettings()


@dataclass(frozen=True)
class Transaction:
    date: _dt.date
    description: str
    amount: Decimal
    type: str = WITHDRAWAL

    def as_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": float(self.amount),
            "type": self.type,
        }


class SkipReason(str, Enum):
    NO_AMOUNT = "no_amount"
    CREDIT = "credit"
    UNCLASSIFIED = "unclassified"
    BAD_DATE = "bad_date"
    AMOUNT_OUT_OF_RANGE = "amount_out_of_range"
    BALANCE_FORWARD = "balance_forward"


@dataclass(frozen=True)
class Skip:
    reason: SkipReason
    line_no: int
    detail: str = ""


Outcome = Union[Transaction, Skip]


# ----------------------------
# Amounts
# ----------------------------

def parse_amount(token: str) -> Decimal | None:
    s = (token or "").replace("₹", "").replace(",", "").strip()
    if not s:
        return None
    try:
        return Decimal(s)
    except InvalidOperation:
        return None


def find_amounts(text: str) -> list[Decimal]:
    values = []
    for m in AMOUNT_RE.finditer(text or ""):
        v = parse_amount(m.group(0))
        if v is not None:
            values.append(v)
    return values


def strip_amounts(text: str) -> str:
    return AMOUNT_RE.sub(" ", text or "")


# ----------------------------
# Descriptions
# ----------------------------

def squash_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def finalize_description(text: str, rewrites=(), max_len: int = MAX_DESCRIPTION_LEN) -> str:
    """Collapse whitespace, rewrite the leading keyword, cap the length.

    Rewrites run after the collapse, so a replacement that ends in a space
    keeps the space that followed the keyword in the statement.
    """
    desc = squash_whitespace(strip_amounts(text))
    for pattern, replacement in rewrites:
        desc = pattern.sub(replacement, desc, count=1)
    desc = desc.strip()
    if not desc:
        return DEFAULT_DESCRIPTION
    return desc[:max_len]


# ----------------------------
# Dates
# ----------------------------

def _build_date(year: int, month: int, day: int, raw: str) -> _dt.date:
    try:
        return _dt.date(year, month, day)
    except ValueError as e:
        raise DateParseError(f"Invalid date components: {raw!r}") from e


def _parse_day_month(text: str, year_digits: int) -> _dt.date:
    parts = (text or "").strip().split()
    if len(parts) != 3:
        raise DateParseError(f"Invalid date format: {text!r}")
    day, mon, year = parts
    month = MONTHS_3.get(mon.lower())
    if month is None or not day.isdigit() or not year.isdigit() or len(year) != year_digits:
        raise DateParseError(f"Invalid date components: {text!r}")
    y = int(year) if year_digits == 4 else 2000 + int(year)
    return _build_date(y, month, int(day), text)


def parse_day_month_year(text: str) -> _dt.date:
    """'4 Apr 2024' -> date(2024, 4, 4)"""
    return _parse_day_month(text, 4)


def parse_day_month_yy(text: str) -> _dt.date:
    """'17 Jun 19' -> date(2019, 6, 17); two-digit years are 20xx."""
    return _parse_day_month(text, 2)


def parse_numeric_date(text: str) -> _dt.date:
    """Day-first D/M/Y, D-M-Y or D.M.Y (2 or 4 digit year), or ISO Y-M-D."""
    s = (text or "").strip()
    m = ISO_DATE_RE.match(s)
    if m:
        return _build_date(int(m.group("y")), int(m.group("m")), int(m.group("d")), s)
    m = NUMERIC_DATE_RE.match(s)
    if not m:
        raise DateParseError(f"Invalid date format: {text!r}")
    year = int(m.group("y"))
    if len(m.group("y")) == 2:
        year += 2000
    return _build_date(year, int(m.group("m")), int(m.group("d")), s)


# ----------------------------
# Per-record outcomes
# ----------------------------

def split_lines(text: str) -> list[str]:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")


def build_withdrawal(
    line_no: int,
    date_text: str,
    parse_date: Callable[[str], _dt.date],
    description: str,
    amount: Decimal | None,
    settings: ParserSettings = DEFAULT_SETTINGS,
) -> Outcome:
    if amount is None or amount <= 0 or amount >= settings.amount_ceiling:
        return Skip(SkipReason.AMOUNT_OUT_OF_RANGE, line_no, f"amount={amount}")
    try:
        when = parse_date(date_text)
    except DateParseError as e:
        return Skip(SkipReason.BAD_DATE, line_no, str(e))
    return Transaction(date=when, description=description, amount=amount)


def collect_transactions(outcomes: Iterable[Outcome], parser_name: str, log=None) -> list[Transaction]:
    """Fold per-record outcomes into the withdrawal list, logging every skip."""
    log = log or get_logger(f"roundup_parser.{parser_name}")
    transactions: list[Transaction] = []
    skipped: Counter = Counter()

    for outcome in outcomes:
        if isinstance(outcome, Skip):
            skipped[outcome.reason.value] += 1
            log.debug(
                "%s: skipped record at line %d (%s) %s",
                parser_name, outcome.line_no, outcome.reason.value, outcome.detail,
                extra={
                    "event": "record_skipped",
                    "parser": parser_name,
                    "reason": outcome.reason.value,
                    "line_no": outcome.line_no,
                },
            )
            continue
        transactions.append(outcome)
        log.debug(
            "%s: withdrawal %s %s %s",
            parser_name, outcome.date.isoformat(), outcome.amount, outcome.description[:50],
            extra={"event": "record_parsed", "parser": parser_name},
        )

    log.info(
        "%s: %d withdrawal(s), %d record(s) skipped",
        parser_name, len(transactions), sum(skipped.values()),
        extra={
            "event": "parser_finished",
            "parser": parser_name,
            "found": len(transactions),
            "skipped": dict(skipped),
        },
    )
    return transactions

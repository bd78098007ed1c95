from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

FORMATS = ["sbi", "standard_chartered", "generic"]


@dataclass
class Txn:
    d: date
    desc: str
    amount: Decimal
    is_debit: bool


_BASE = [
    ("TO TRANSFER-UPI/DR/412345/ACME STORES/paytm", "PURCHASE AMAZON SELLER SERVICES", "ATM WITHDRAWAL MG ROAD", True),
    ("BY TRANSFER-NEFT SALARY APRIL", "CREDIT OF INTEREST", "SALARY DEPOSIT", False),
    ("TO TRANSFER- RENT A/C XXXX9876", "UPI/412399/BILLDESK ELECTRICITY", "UPI PAYMENT BILLDESK", True),
    ("ATM CHARGES", "IMPS/P2A/412377/SELF", "DEBIT CARD PURCHASE GROCER", True),
    ("BY TRANSFER-UPI/CR/412311/MR R KUMAR", "CRADJ/UPI/REVERSAL", "CASH DEPOSIT BRANCH", False),
    ("TO TRANSFER-UPI/DR/412388/CAFE/okaxis", "PURCHASE FUEL STATION", "ATM WITHDRAWAL STATION RD", True),
]


def _mk_txns(fmt: str, start: date, seed: int) -> list[Txn]:
    rng = random.Random(seed)
    amounts = [Decimal("1180.00"), Decimal("250.50"), Decimal("12000.00"), Decimal("23.60"), Decimal("50000.00"), Decimal("642.75")]
    rng.shuffle(amounts)
    col = FORMATS.index(fmt)
    return [
        Txn(start + timedelta(days=i), row[col], amounts[i], row[3])
        for i, row in enumerate(_BASE)
    ]


def _money(v: Decimal) -> str:
    return f"{v:,.2f}"


def _lines_for(fmt: str, txns: list[Txn], opening: Decimal) -> list[str]:
    bal = opening
    if fmt == "sbi":
        lines = [
            "STATE BANK OF INDIA",
            "Account Statement from 1 Apr 2024 to 30 Apr 2024",
            "IFS Code :SBIN0001234",
            "Txn Date Value Date Description Ref No./Cheque No. Debit Credit Balance",
        ]
        for t in txns:
            bal = bal - t.amount if t.is_debit else bal + t.amount
            # day+month and year split over two lines, description on its own line
            lines.append(f"{t.d.day} {t.d:%b}")
            lines.append(f"{t.d:%Y}")
            lines.append(t.desc)
            lines.append(f"{_money(t.amount)} {_money(bal)}")
    elif fmt == "standard_chartered":
        lines = [
            "Standard Chartered Bank",
            "STATEMENT OF ACCOUNT",
            "Date Value Description Cheque Deposit Withdrawal Balance",
            f"{txns[0].d - timedelta(days=1):%d %b %y} {txns[0].d - timedelta(days=1):%d %b %y} BALANCE FORWARD {_money(opening)}",
        ]
        for i, t in enumerate(txns):
            bal = bal - t.amount if t.is_debit else bal + t.amount
            if i % 2 == 0:
                lines.append(f"{t.d:%d %b %y} {t.d:%d %b %y}")
            lines.append(t.desc)
            lines.append(f"{_money(t.amount)} {_money(bal)}")
    else:
        lines = [
            "CITY CO-OPERATIVE BANK",
            "Date Particulars Withdrawal Deposit Balance",
        ]
        for t in txns:
            bal = bal - t.amount if t.is_debit else bal + t.amount
            lines.append(f"{t.d:%d/%m/%Y} {t.desc} {_money(t.amount)} {_money(bal)}")
    lines.append("Computer generated statement")
    return lines


def expected_withdrawals(fmt: str, txns: list[Txn]) -> list[tuple[date, Decimal]]:
    rows = [(t.d, t.amount) for t in txns if t.is_debit]
    if fmt == "standard_chartered":
        # same-day rows reuse the date of the last date line
        rows = [(txns[i - (i % 2)].d, t.amount) for i, t in enumerate(txns) if t.is_debit]
    return rows


def _write_pdf(path: Path, lines: Iterable[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(path), pagesize=A4)
    c.setFont("Courier", 10)
    y = 810
    for line in lines:
        c.drawString(36, y, line)
        y -= 14
        if y < 70:
            c.showPage()
            c.setFont("Courier", 10)
            y = 810
    c.save()


def generate_all(out_dir: str = "tests/fixtures_synthetic", seed: int = 1) -> dict:
    """Write one synthetic statement per format; return the withdrawals each should yield."""
    root = Path(out_dir)
    expected = {}
    for i, fmt in enumerate(FORMATS):
        start = date(2024, 4, 1 + i)
        txns = _mk_txns(fmt, start, seed + i)
        _write_pdf(root / fmt / "statement_a.pdf", _lines_for(fmt, txns, Decimal("100000.00")))
        expected[fmt] = expected_withdrawals(fmt, txns)
    return expected


if __name__ == "__main__":
    generate_all()

"""Debit/credit classification for statement descriptions.

Keyword rules only, evaluated in order (first hit wins):

1. credit phrases (money received) exclude the record outright
2. outgoing-transfer markers make it a debit
3. UPI lines: payment handles -> debit, receipt patterns -> credit,
   anything else on UPI -> debit
4. remaining debit phrases (ATM, purchase, charges, taxes, forex)
5. otherwise unknown, which callers discard
"""

from __future__ import annotations

import re
from enum import Enum


class Classification(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"
    UNKNOWN = "unknown"


CREDIT_PHRASES = (
    "by transfer",
    "deposit",
    "credit of interest",
    "cradj/upi",
    "discount on fuel",
)

# Incoming NEFT names the remitting bank
INCOMING_NEFT_BANKS = (
    "state bank of india",
)

TRANSFER_OUT_PHRASES = (
    "to transfer",
    "transfer to",
    "transferto",
    "transfered",
    "upi/dr/",
)

UPI_PAYMENT_HINTS = (
    "paytm",
    "amazon",
    "google",
    "add-money",
    "ixigo",
    "airtel",
    "billdesk",
    "indiaideas",
    "payment",
    "@",
)

UPI_RECEIPT_HINTS = (
    "lic premium",
    "season ticket",
)
_UPI_RECEIPT_RE = re.compile(r"\bmr\s+[a-z]|\bcr\b")

DEBIT_PHRASES = (
    "atm withdrawal",
    "purchase",
    "imps/p2a",
    "charges",
    "cgst",
    "sgst",
    "transaction comm",
    "forex txn-commission",
    "forex txn-service",
)

FEE_HINTS = ("commission", "service", "charge", "fee")

# Broader line-level keywords used when a layout has no description column
LINE_CREDIT_HINTS = ("credit", "deposit", "balance forward")
LINE_DEBIT_HINTS = ("withdrawal", "atm", "purchase", "payment", "debit", "upi")


def _is_outgoing(low: str) -> bool:
    return any(p in low for p in TRANSFER_OUT_PHRASES)


def _is_credit(low: str) -> bool:
    if low.startswith("by ") or any(p in low for p in CREDIT_PHRASES):
        return True
    # a bank name on an outgoing NEFT is the beneficiary's bank, not the remitter
    if "neft" not in low or _is_outgoing(low):
        return False
    return any(b in low for b in INCOMING_NEFT_BANKS)


def is_upi_receipt(low: str, known_payers=()) -> bool:
    if any(name.lower() in low for name in known_payers if name):
        return True
    if any(h in low for h in UPI_RECEIPT_HINTS):
        return True
    return bool(_UPI_RECEIPT_RE.search(low))


def classify(description: str, known_payers=()) -> Classification:
    """Classify an amount-stripped description."""
    low = (description or "").strip().lower()
    if not low:
        return Classification.UNKNOWN

    if _is_credit(low):
        return Classification.CREDIT

    if _is_outgoing(low):
        return Classification.DEBIT

    if "upi/" in low:
        if any(h in low for h in UPI_PAYMENT_HINTS):
            return Classification.DEBIT
        if is_upi_receipt(low, known_payers):
            return Classification.CREDIT
        return Classification.DEBIT

    if any(p in low for p in DEBIT_PHRASES):
        return Classification.DEBIT

    return Classification.UNKNOWN


def is_fee_line(description: str) -> bool:
    low = (description or "").lower()
    return any(h in low for h in FEE_HINTS)


def classify_line(line: str) -> Classification:
    """Whole-line keywords for layouts where date, text and amounts share one line."""
    low = (line or "").lower()
    if any(h in low for h in LINE_CREDIT_HINTS):
        return Classification.CREDIT
    if any(h in low for h in LINE_DEBIT_HINTS):
        return Classification.DEBIT
    return Classification.UNKNOWN

import unittest
from datetime import date
from decimal import Decimal

import core

standard_chartered = core.load_parser_module("standard_chartered")

STATEMENT = """Standard Chartered Bank
STATEMENT OF ACCOUNT
Date Value Description Cheque Deposit Withdrawal Balance
16 Jun 19 16 Jun 19 BALANCE FORWARD 20,000.00
17 Jun 19 16 Jun 19
PURCHASE AMAZON SELLER SERVICES
1,499.00 18,501.00
UPI/917312/SWIGGY@ICICI
350.00 18,151.00
CREDIT OF INTEREST
42.00 18,193.00
18 Jun 19 18 Jun 19 ATM WITHDRAWAL ANDHERI EAST
2,000.00 16,193.00
IMPS/P2A/916911/SELF
5,000.00 11,193.00
"""


class TestStandardCharteredParser(unittest.TestCase):
    def setUp(self):
        self.got = standard_chartered.extract_transactions(STATEMENT)

    def test_withdrawals(self):
        self.assertEqual(
            [(t.date, t.amount) for t in self.got],
            [
                (date(2019, 6, 17), Decimal("1499.00")),
                (date(2019, 6, 17), Decimal("350.00")),
                (date(2019, 6, 18), Decimal("2000.00")),
                (date(2019, 6, 18), Decimal("5000.00")),
            ],
        )

    def test_descriptions_rewritten(self):
        self.assertEqual(
            [t.description for t in self.got],
            [
                "Purchase at AMAZON SELLER SERVICES",
                "UPI Payment - 917312/SWIGGY@ICICI",
                "ATM Withdrawal - ANDHERI EAST",
                "IMPS - P2A/916911/SELF",
            ],
        )

    def test_balance_forward_only(self):
        self.assertEqual(
            standard_chartered.extract_transactions("16 Jun 19 16 Jun 19 BALANCE FORWARD 20,000.00"),
            [],
        )

    def test_continuation_without_prior_date_ignored(self):
        self.assertEqual(standard_chartered.extract_transactions("PURCHASE SHOP\n100.00 900.00"), [])

    def test_amount_line_needs_balance(self):
        text = "17 Jun 19 17 Jun 19\nPURCHASE SHOP\n100.00"
        self.assertEqual(standard_chartered.extract_transactions(text), [])

    def test_sbi_dates_do_not_match(self):
        self.assertEqual(
            standard_chartered.extract_transactions("4 Apr 2024 4 Apr 2024 TO TRANSFER- JOHN 1,180.00 62,780.51"),
            [],
        )


if __name__ == "__main__":
    unittest.main()

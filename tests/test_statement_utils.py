import unittest
from datetime import date
from decimal import Decimal

from statement_utils import (
    DateParseError,
    ParserSettings,
    Skip,
    SkipReason,
    Transaction,
    build_withdrawal,
    collect_transactions,
    finalize_description,
    find_amounts,
    parse_amount,
    parse_day_month_year,
    parse_day_month_yy,
    parse_numeric_date,
    strip_amounts,
)


class TestAmounts(unittest.TestCase):
    def test_indian_grouping(self):
        self.assertEqual(find_amounts("BAL 1,96,760.96 CR"), [Decimal("196760.96")])

    def test_several_tokens_in_order(self):
        self.assertEqual(
            find_amounts("TO TRANSFER- JOHN 1,180.00 62,780.51"),
            [Decimal("1180.00"), Decimal("62780.51")],
        )

    def test_plain_digits_and_currency_prefix(self):
        self.assertEqual(find_amounts("Rs.1180.00"), [Decimal("1180.00")])

    def test_dotted_date_is_not_an_amount(self):
        self.assertEqual(find_amounts("15.04.2024 ATM"), [])

    def test_reference_numbers_without_decimals_ignored(self):
        self.assertEqual(find_amounts("IMPS/P2A/412345678901/SELF"), [])

    def test_parse_amount(self):
        self.assertEqual(parse_amount("₹1,180.00"), Decimal("1180.00"))
        self.assertIsNone(parse_amount(""))
        self.assertIsNone(parse_amount("abc"))

    def test_strip_amounts(self):
        self.assertNotIn("1,180.00", strip_amounts("PAID 1,180.00 BAL 62,780.51"))


class TestDescriptions(unittest.TestCase):
    def test_empty_becomes_default(self):
        self.assertEqual(finalize_description("  1,180.00  "), "Withdrawal")

    def test_truncated(self):
        self.assertEqual(len(finalize_description("X" * 10_000)), 200)

    def test_custom_length(self):
        self.assertEqual(finalize_description("abcdef", max_len=3), "abc")


class TestDates(unittest.TestCase):
    def test_day_month_year(self):
        self.assertEqual(parse_day_month_year("4 Apr 2024"), date(2024, 4, 4))
        self.assertEqual(parse_day_month_year("30 APR 2024"), date(2024, 4, 30))

    def test_day_month_yy_is_2000s(self):
        self.assertEqual(parse_day_month_yy("17 Jun 19"), date(2019, 6, 17))

    def test_bad_dates_raise_local_error(self):
        for bad in ("4 Foo 2024", "31 Feb 2024", "x Apr 2024", "4 Apr", "4 Apr 24"):
            with self.subTest(bad=bad):
                with self.assertRaises(DateParseError):
                    parse_day_month_year(bad)

    def test_numeric_dates(self):
        self.assertEqual(parse_numeric_date("15/04/2024"), date(2024, 4, 15))
        self.assertEqual(parse_numeric_date("15-04-24"), date(2024, 4, 15))
        self.assertEqual(parse_numeric_date("15.04.2024"), date(2024, 4, 15))
        self.assertEqual(parse_numeric_date("2024-04-15"), date(2024, 4, 15))
        with self.assertRaises(DateParseError):
            parse_numeric_date("13/13/2024")

    def test_date_parse_error_is_value_error(self):
        self.assertTrue(issubclass(DateParseError, ValueError))


class TestOutcomes(unittest.TestCase):
    def test_build_withdrawal(self):
        out = build_withdrawal(3, "4 Apr 2024", parse_day_month_year, "Rent", Decimal("10.00"))
        self.assertEqual(out, Transaction(date(2024, 4, 4), "Rent", Decimal("10.00")))
        self.assertEqual(out.type, "withdrawal")

    def test_bad_date_is_a_skip(self):
        out = build_withdrawal(3, "31 Feb 2024", parse_day_month_year, "Rent", Decimal("10.00"))
        self.assertIsInstance(out, Skip)
        self.assertEqual(out.reason, SkipReason.BAD_DATE)
        self.assertEqual(out.line_no, 3)

    def test_amount_ceiling(self):
        settings = ParserSettings(amount_ceiling=Decimal("100"))
        out = build_withdrawal(1, "4 Apr 2024", parse_day_month_year, "Big", Decimal("100.00"), settings)
        self.assertEqual(out.reason, SkipReason.AMOUNT_OUT_OF_RANGE)
        out = build_withdrawal(1, "4 Apr 2024", parse_day_month_year, "Zero", Decimal("0.00"))
        self.assertEqual(out.reason, SkipReason.AMOUNT_OUT_OF_RANGE)

    def test_collect_logs_skips(self):
        txn = Transaction(date(2024, 4, 4), "Rent", Decimal("10.00"))
        with self.assertLogs("roundup_parser.test", level="DEBUG") as cm:
            got = collect_transactions(
                [txn, Skip(SkipReason.CREDIT, 7, "BY TRANSFER")],
                "test",
            )
        self.assertEqual(got, [txn])
        skipped = [r for r in cm.records if getattr(r, "event", None) == "record_skipped"]
        self.assertEqual(len(skipped), 1)
        self.assertEqual(skipped[0].reason, "credit")
        self.assertEqual(skipped[0].line_no, 7)
        finished = [r for r in cm.records if getattr(r, "event", None) == "parser_finished"]
        self.assertEqual(finished[0].skipped, {"credit": 1})

    def test_as_dict(self):
        txn = Transaction(date(2024, 4, 4), "Rent", Decimal("1180.00"))
        self.assertEqual(
            txn.as_dict(),
            {"date": "2024-04-04", "description": "Rent", "amount": 1180.0, "type": "withdrawal"},
        )


class TestSettings(unittest.TestCase):
    def test_from_env(self):
        from unittest import mock

        env = {"ROUNDUP_AMOUNT_CEILING": "5,00,000", "ROUNDUP_DESCRIPTION_MAX_LEN": "80"}
        with mock.patch.dict("os.environ", env):
            s = ParserSettings.from_env()
        self.assertEqual(s.amount_ceiling, Decimal("500000"))
        self.assertEqual(s.max_description_len, 80)

    def test_from_env_rejects_garbage(self):
        from unittest import mock

        with mock.patch.dict("os.environ", {"ROUNDUP_AMOUNT_CEILING": "lots"}):
            with self.assertRaises(ValueError):
                ParserSettings.from_env()


if __name__ == "__main__":
    unittest.main()

import unittest

from scripts.ci_summarize_unittest import summarize


LOG = """
PASS sbi (Parsers/sbi.py) withdrawals=4
=== FAIL: standard_chartered ===
pdf: /tmp/x/standard_chartered/statement_a.pdf
withdrawals: 2
message: expected 4 rows | got 2
=== FIXTURE TEXT (first 40 lines) ===
Standard Chartered Bank
"""


class TestCiSummary(unittest.TestCase):
    def test_table(self):
        md = summarize(LOG)
        self.assertIn("**Totals:** passed=1 failed=1 total=3", md)
        self.assertIn("| sbi | PASS | 4 |  |  | Parsers/sbi.py |", md)
        self.assertIn("| standard_chartered | FAIL | 2 | expected 4 rows \\| got 2 |", md)
        self.assertIn("| generic | UNKNOWN |", md)


if __name__ == "__main__":
    unittest.main()

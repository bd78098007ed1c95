import unittest

from classifier import Classification, classify, classify_line, is_fee_line


class TestClassify(unittest.TestCase):
    def test_credit_phrases(self):
        for desc in (
            "BY TRANSFER-NEFT SALARY",
            "by cash",
            "CASH DEPOSIT SELF",
            "CREDIT OF INTEREST",
            "CRADJ/UPI/REVERSAL",
            "DISCOUNT ON FUEL SURCHARGE",
            "NEFT STATE BANK OF INDIA ACME LTD",
        ):
            with self.subTest(desc=desc):
                self.assertIs(classify(desc), Classification.CREDIT)

    def test_transfer_out_is_debit(self):
        for desc in ("TO TRANSFER- JOHN DOE", "Transfer to savings", "UPI/DR/4123/SHOP", "AMOUNT TRANSFERED"):
            with self.subTest(desc=desc):
                self.assertIs(classify(desc), Classification.DEBIT)

    def test_transfer_out_wins_over_upi_receipt_pattern(self):
        self.assertIs(classify("TO TRANSFER-UPI/DR/4123/MR A KUMAR"), Classification.DEBIT)

    def test_outgoing_neft_naming_a_bank_is_debit(self):
        self.assertIs(classify("TO TRANSFER-NEFT*SBIN0001234*N123*STATE BANK OF INDIA*RAVI"), Classification.DEBIT)
        self.assertIs(classify("NEFT TRANSFER TO STATE BANK OF INDIA RAVI"), Classification.DEBIT)

    def test_upi_payment_hints(self):
        self.assertIs(classify("UPI/412399/BILLDESK ELECTRICITY"), Classification.DEBIT)
        self.assertIs(classify("UPI/4123/someone@okaxis"), Classification.DEBIT)

    def test_upi_receipts(self):
        self.assertIs(classify("UPI/4123/MR R KUMAR"), Classification.CREDIT)
        self.assertIs(classify("UPI/4123/LIC PREMIUM REFUND"), Classification.CREDIT)
        self.assertIs(classify("UPI/4123/XYZ CR"), Classification.CREDIT)

    def test_known_payers_are_receipts(self):
        self.assertIs(classify("UPI/4123/ANITA", known_payers=("Anita",)), Classification.CREDIT)
        self.assertIs(classify("UPI/4123/ANITA"), Classification.DEBIT)

    def test_debit_phrases(self):
        for desc in ("ATM WITHDRAWAL MG ROAD", "PURCHASE FUEL", "IMPS/P2A/4123/SELF", "SMS CHARGES", "CGST @9%", "Forex Txn-Commission"):
            with self.subTest(desc=desc):
                self.assertIs(classify(desc), Classification.DEBIT)

    def test_unknown(self):
        self.assertIs(classify(""), Classification.UNKNOWN)
        self.assertIs(classify("OPENING BALANCE"), Classification.UNKNOWN)


class TestLineHelpers(unittest.TestCase):
    def test_is_fee_line(self):
        self.assertTrue(is_fee_line("ATM SERVICE FEE"))
        self.assertFalse(is_fee_line("RENT"))

    def test_classify_line_credit_first(self):
        self.assertIs(classify_line("01/04/2024 DEBIT CARD REFUND CREDIT 10.00"), Classification.CREDIT)
        self.assertIs(classify_line("01/04/2024 UPI PAYMENT 10.00"), Classification.DEBIT)
        self.assertIs(classify_line("01/04/2024 GROCERY 10.00"), Classification.UNKNOWN)


if __name__ == "__main__":
    unittest.main()

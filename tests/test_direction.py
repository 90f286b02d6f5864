"""
Unit tests for debit/credit classification.
"""
import pytest

from core.direction import (
    CREDIT,
    CREDIT_KEYWORDS,
    DEBIT,
    DEBIT_KEYWORDS,
    classify_direction,
)


@pytest.mark.parametrize("description", ["ATM CASH WDL", "NEFT TO LANDLORD", "CHEQUE 000123"])
def test_withdrawal_without_keywords_is_debit(description):
    assert classify_direction(description, 750.0, 0.0) == (750.0, DEBIT)


def test_deposit_without_keywords_is_credit():
    assert classify_direction("NEFT FROM EMPLOYER", 0.0, 1000.0) == (1000.0, CREDIT)


def test_withdrawal_wins_over_deposit_for_amount():
    assert classify_direction("TRANSFER", 300.0, 900.0) == (300.0, DEBIT)


def test_no_amount_returns_zero():
    amount, _ = classify_direction("TRANSFER", 0.0, 0.0)
    assert amount == 0.0


@pytest.mark.parametrize("keyword", sorted(DEBIT_KEYWORDS - {"upi"}))
def test_debit_keyword_forces_debit_on_deposit(keyword):
    amount, direction = classify_direction(f"TXN {keyword.upper()} 123", 0.0, 200.0)
    assert (amount, direction) == (200.0, DEBIT)


@pytest.mark.parametrize("keyword", sorted(CREDIT_KEYWORDS))
def test_credit_keyword_forces_credit_on_withdrawal(keyword):
    amount, direction = classify_direction(f"TXN {keyword.upper()} 123", 80.0, 0.0)
    assert (amount, direction) == (80.0, CREDIT)


def test_credit_keyword_beats_debit_keyword():
    assert classify_direction("POS REFUND AMAZON", 0.0, 499.0) == (499.0, CREDIT)
    assert classify_direction("PAYTM CASHBACK CREDITED", 120.0, 0.0) == (120.0, CREDIT)


def test_upi_in_deposit_column_is_debit_even_with_credit_keyword():
    assert classify_direction("UPI-REFUND-FLIPKART", 0.0, 650.0) == (650.0, DEBIT)
    assert classify_direction("UPI-AMAZON-PAY", 0.0, 500.0) == (500.0, DEBIT)


def test_upi_with_withdrawal_and_credit_keyword_is_credit():
    # Deposit override only applies when the withdrawal column is empty
    assert classify_direction("UPI REVERSAL", 100.0, 0.0) == (100.0, CREDIT)


def test_substring_matching_is_case_insensitive():
    # "int" is matched as a substring of "PRINT"
    assert classify_direction("PRINT SHOP", 40.0, 0.0) == (40.0, CREDIT)
    assert classify_direction("Salary Credit", 0.0, 50000.0) == (50000.0, CREDIT)


def test_keyword_sets_are_immutable():
    assert isinstance(DEBIT_KEYWORDS, frozenset)
    assert isinstance(CREDIT_KEYWORDS, frozenset)

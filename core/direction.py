"""
Debit/credit classification for statement rows.

The baseline comes from the withdrawal/deposit columns. Keyword rules then
override it in a fixed order: debit keywords, credit keywords, and finally
the UPI-in-deposit correction for statements that list UPI payments under
the deposit column.
"""
from typing import Callable, FrozenSet, Tuple

DEBIT = "debit"
CREDIT = "credit"

# Payment-rail and point-of-sale terms
DEBIT_KEYWORDS: FrozenSet[str] = frozenset({
    "upi",
    "gpay",
    "googlepay",
    "phonepe",
    "paytm",
    "pos",
    "merchant",
    "qr",
    "scan",
    "payu",
    "bill",
    "fastag",
})

CREDIT_KEYWORDS: FrozenSet[str] = frozenset({
    "refund",
    "reversal",
    "credited",
    "salary",
    "interest",
    "int",
    "reimb",
})

# (lowered description, withdrawal, deposit, current direction) -> direction
OverrideRule = Callable[[str, float, float, str], str]


def contains_any(text: str, keywords: FrozenSet[str]) -> bool:
    """Substring match of any keyword in already lower-cased text."""
    return any(keyword in text for keyword in keywords)


def _debit_keyword_rule(text: str, withdrawal: float, deposit: float, direction: str) -> str:
    return DEBIT if contains_any(text, DEBIT_KEYWORDS) else direction


def _credit_keyword_rule(text: str, withdrawal: float, deposit: float, direction: str) -> str:
    return CREDIT if contains_any(text, CREDIT_KEYWORDS) else direction


def _upi_deposit_rule(text: str, withdrawal: float, deposit: float, direction: str) -> str:
    if deposit > 0 and withdrawal == 0 and "upi" in text:
        return DEBIT
    return direction


# Order matters: each rule may overwrite the previous result.
OVERRIDE_RULES: Tuple[OverrideRule, ...] = (
    _debit_keyword_rule,
    _credit_keyword_rule,
    _upi_deposit_rule,
)


def baseline_direction(withdrawal: float, deposit: float) -> Tuple[float, str]:
    """
    Pick amount and direction from the withdrawal/deposit columns.

    Returns:
        (amount, direction); amount is 0.0 when neither column has a value
    """
    if withdrawal > 0:
        return withdrawal, DEBIT
    if deposit > 0:
        return deposit, CREDIT
    return 0.0, DEBIT


def classify_direction(description: str, withdrawal: float, deposit: float) -> Tuple[float, str]:
    """
    Classify a row as debit or credit.

    Args:
        description: Row narration
        withdrawal: Normalized withdrawal amount
        deposit: Normalized deposit amount

    Returns:
        (amount, direction); the amount always comes from the baseline step
    """
    amount, direction = baseline_direction(withdrawal, deposit)

    text = (description or "").lower()
    for rule in OVERRIDE_RULES:
        direction = rule(text, withdrawal, deposit, direction)

    return amount, direction

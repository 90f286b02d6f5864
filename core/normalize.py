"""
Cell value normalization for bank statement rows.
Turns raw spreadsheet cells into amounts, dates and text.
"""
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

import pandas as pd

from core.logger import setup_logger

logger = setup_logger(__name__)

# Spreadsheet serial day 0
SERIAL_EPOCH = date(1899, 12, 30)
# Numeric cells above this are read as serial dates (40000 is 2009-07-06)
SERIAL_DATE_THRESHOLD = 40000

_CURRENCY_PATTERN = re.compile(r"(₹|\$|€|£|¥|\bINR\b|\bRs\.?)", re.IGNORECASE)
_SEPARATOR_PATTERN = re.compile(r"[,\s\xa0]")


def is_missing(value: Any) -> bool:
    """Return True for None, NaN and NaT cells."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_to_text(value: Any) -> str:
    """
    Convert a cell to trimmed text.

    Args:
        value: Raw cell value

    Returns:
        Trimmed string, empty if the cell is missing
    """
    if is_missing(value):
        return ""
    return str(value).strip()


def normalize_amount(value: Any) -> float:
    """
    Clean and normalize a money cell.
    Removes currency glyphs, thousands separators and whitespace.

    Args:
        value: Raw amount value (string or number)

    Returns:
        Non-negative float, 0.0 when empty or unparseable
    """
    if is_missing(value) or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        result = float(value)
    else:
        amount_str = _CURRENCY_PATTERN.sub("", str(value))
        amount_str = _SEPARATOR_PATTERN.sub("", amount_str)
        if not amount_str:
            return 0.0
        try:
            result = float(amount_str)
        except ValueError:
            logger.debug(f"Failed to parse amount: '{value}'")
            return 0.0

    if not math.isfinite(result):
        return 0.0
    if result < 0:
        logger.debug(f"Negative amount detected: {result}, using absolute value")
        return abs(result)
    return result


def _as_number(value: Any) -> Optional[float]:
    """Return the cell as a float if it is numeric (or numeric text)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def serial_to_date(serial: float) -> date:
    """Convert a spreadsheet serial day count to a calendar date."""
    return SERIAL_EPOCH + timedelta(days=int(serial))


def normalize_date(value: Any, dayfirst: bool = False) -> Optional[date]:
    """
    Normalize a date cell.

    Serial numbers above the threshold are converted from the 1899-12-30
    base. Everything else, smaller numbers included, goes through pandas'
    date parser.

    Args:
        value: Raw date value (datetime, serial number or text)
        dayfirst: Read ambiguous text such as 02/01/2023 as day first

    Returns:
        Calendar date, or None when the cell is not a usable date
    """
    if is_missing(value):
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()

    number = _as_number(value)
    if number is not None:
        if not math.isfinite(number):
            return None
        if number > SERIAL_DATE_THRESHOLD:
            try:
                return serial_to_date(number)
            except OverflowError:
                return None
        # Smaller numbers fall through to text parsing, e.g. 2023
        if number.is_integer():
            text = str(int(number))

    if not text:
        return None

    try:
        parsed = pd.to_datetime(text, errors="coerce", dayfirst=dayfirst)
    except (TypeError, ValueError, OverflowError):
        parsed = None
    if is_missing(parsed):
        logger.debug(f"Failed to parse date: '{value}'")
        return None
    return parsed.date()

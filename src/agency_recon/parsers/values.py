"""
Cell value parsing for bank and accounting exports.

Greek exports write amounts as ``1.234,56 €`` and dates as DD/MM/YYYY;
Excel cells may also hold native numbers, datetimes or serial dates.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
import re

import pandas as pd

EXCEL_EPOCH = datetime(1899, 12, 30)

_DAY_FIRST = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$")
_YEAR_FIRST = re.compile(r"^(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})")


def is_missing(value: Any) -> bool:
    """True for None, NaN/NaT and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse an amount cell.

    Strings with a decimal comma are read the European way (dots are
    thousand separators). Strings without a comma are read as plain
    decimals, so ``12.50`` stays twelve and a half.
    """
    if is_missing(value) or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            return None
        return result if result.is_finite() else None

    text = re.sub(r"\s", "", str(value)).replace("€", "").replace("$", "")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")

    try:
        result = Decimal(text)
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def parse_date(value: Any, date_format: Optional[str] = None) -> Optional[date]:
    """
    Parse a date cell.

    Accepts date/datetime/Timestamp objects, Excel serial numbers,
    DD/MM/YYYY and YYYY-MM-DD strings (any of / - . as separator), and an
    optional explicit strptime format tried first.
    """
    if is_missing(value):
        return None

    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return (EXCEL_EPOCH + timedelta(days=float(value))).date()
        except OverflowError:
            return None

    text = str(value).strip()

    if date_format:
        try:
            return datetime.strptime(text, date_format).date()
        except ValueError:
            pass

    try:
        match = _DAY_FIRST.match(text)
        if match:
            day, month, year = (int(g) for g in match.groups())
            return date(year, month, day)

        match = _YEAR_FIRST.match(text)
        if match:
            year, month, day = (int(g) for g in match.groups())
            return date(year, month, day)
    except ValueError:
        return None

    return None


def parse_text(value: Any) -> Optional[str]:
    """Stringify a cell, None for missing values."""
    if is_missing(value):
        return None
    return str(value).strip()

import math
import re
from decimal import Decimal, InvalidOperation

from domain.exceptions.currency import CurrencyError, ErrorKind

_CURRENCY_CODE = re.compile(r"[A-Za-z]{3}")
_NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def _is_number(value) -> bool:
    # bool is an int subclass but never an amount
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_valid_currency_code(code) -> bool:
    if not isinstance(code, str):
        return False
    return _CURRENCY_CODE.fullmatch(code.strip()) is not None


def parse_amount(value) -> Decimal:
    """Convert a number or a strictly numeric string to a Decimal.

    Strings must be numeric as a whole; "100abc" is an error, not 100.
    Floats go through their shortest repr so 123.45 stays Decimal("123.45").
    """
    if _is_number(value):
        if isinstance(value, float):
            return Decimal(repr(value))
        return Decimal(value)

    if isinstance(value, str):
        text = value.strip()
        if not _NUMBER.fullmatch(text):
            raise CurrencyError(ErrorKind.INVALID_FORMAT, "Invalid amount format")
        try:
            return Decimal(text)
        except InvalidOperation as e:
            raise CurrencyError(ErrorKind.INVALID_FORMAT, "Invalid amount format") from e

    raise CurrencyError(ErrorKind.INVALID_TYPE, "Amount must be a number or numeric string")


def is_valid_amount(value) -> bool:
    try:
        amount = parse_amount(value)
    except CurrencyError:
        return False
    # finite as a double too
    return amount.is_finite() and amount > 0 and math.isfinite(float(amount))


def sanitize_currency_code(code) -> str:
    if not isinstance(code, str) or not code:
        raise CurrencyError(ErrorKind.INVALID_TYPE, "Currency code must be a string")
    return code.strip().upper()

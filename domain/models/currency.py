from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ExchangeRate:
    from_currency: str
    to_currency: str
    rate: Decimal
    timestamp: int  # epoch milliseconds of the provider's last update


@dataclass(frozen=True)
class ConversionRequest:
    from_currency: str
    to_currency: str
    amount: Decimal


@dataclass(frozen=True)
class ConversionResponse:
    from_currency: str
    to_currency: str
    amount: Decimal  # as requested
    converted_amount: Decimal
    rate: Decimal
    timestamp: int


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()

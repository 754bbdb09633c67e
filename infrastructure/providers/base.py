import time
from abc import ABC, abstractmethod
from decimal import Decimal

from domain.models.currency import ExchangeRate


def now_ms() -> int:
    return int(time.time() * 1000)


def identity_rate(currency: str, timestamp: int | None = None) -> ExchangeRate:
    """Rate of a currency against itself."""
    return ExchangeRate(
        from_currency=currency,
        to_currency=currency,
        rate=Decimal("1"),
        timestamp=timestamp if timestamp is not None else now_ms(),
    )


class RateSource(ABC):
    """Where exchange rates and the supported-currency list come from."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        """Raises CurrencyError (RATE_UNAVAILABLE or UPSTREAM) when no rate can be given."""

    @abstractmethod
    async def get_supported_currencies(self) -> list[str]:
        ...

    async def close(self) -> None:
        """Release any held resources."""

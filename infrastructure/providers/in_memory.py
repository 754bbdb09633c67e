from collections.abc import Callable, Mapping
from decimal import Decimal

from domain.exceptions.currency import CurrencyError, ErrorKind
from domain.models.currency import ExchangeRate
from infrastructure.providers.base import RateSource, identity_rate, now_ms

DEFAULT_RATES: dict[str, dict[str, Decimal]] = {
    "USD": {
        "BRL": Decimal("5.25"),
        "EUR": Decimal("0.85"),
        "GBP": Decimal("0.73"),
        "JPY": Decimal("110.0"),
    },
    "BRL": {
        "USD": Decimal("0.19"),
        "EUR": Decimal("0.16"),
        "GBP": Decimal("0.14"),
        "JPY": Decimal("20.95"),
    },
    "EUR": {
        "USD": Decimal("1.18"),
        "BRL": Decimal("6.18"),
        "GBP": Decimal("0.86"),
        "JPY": Decimal("129.41"),
    },
}

DEFAULT_CURRENCIES = ("USD", "BRL", "EUR", "GBP", "JPY")


class InMemoryRateSource(RateSource):
    """Fixed rate table for tests and offline operation."""

    def __init__(
        self,
        rates: Mapping[str, Mapping[str, Decimal]] | None = None,
        currencies: tuple[str, ...] | list[str] | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._rates = {
            base.upper(): {target.upper(): Decimal(str(rate)) for target, rate in targets.items()}
            for base, targets in (rates if rates is not None else DEFAULT_RATES).items()
        }
        self._currencies = [c.upper() for c in (currencies if currencies is not None else DEFAULT_CURRENCIES)]
        self._clock = clock

    @property
    def name(self) -> str:
        return "in-memory"

    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()

        if from_currency == to_currency:
            return identity_rate(from_currency, self._clock())

        rate = self._rates.get(from_currency, {}).get(to_currency)
        if rate is None:
            raise CurrencyError(
                ErrorKind.RATE_UNAVAILABLE,
                f"Exchange rate not found for {from_currency} to {to_currency}",
            )

        return ExchangeRate(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            timestamp=self._clock(),
        )

    async def get_supported_currencies(self) -> list[str]:
        return list(self._currencies)

import json
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from redis import asyncio as redis

from domain.exceptions.currency import CurrencyError, ErrorKind
from domain.models.currency import ExchangeRate

SUPPORTED_CURRENCIES_KEY = "currencies:supported"


class RedisCacheService:
    def __init__(
        self,
        redis_client: redis.Redis,
        rate_ttl: timedelta = timedelta(minutes=5),
        currency_ttl: timedelta = timedelta(hours=24),
    ):
        self.redis = redis_client
        self.rate_ttl = rate_ttl
        self.currency_ttl = currency_ttl

    def _make_rate_key(self, from_currency: str, to_currency: str) -> str:
        return f"rate:{from_currency}:{to_currency}"

    async def get_rate(self, from_currency: str, to_currency: str) -> ExchangeRate | None:
        key = self._make_rate_key(from_currency, to_currency)
        data = await self.redis.get(key)

        if not data:
            return None

        try:
            rate_dict = json.loads(data)
            return ExchangeRate(
                from_currency=rate_dict["from_currency"],
                to_currency=rate_dict["to_currency"],
                rate=Decimal(rate_dict["rate"]),
                timestamp=int(rate_dict["timestamp"]),
            )
        except (ValueError, KeyError, TypeError, InvalidOperation) as e:
            raise CurrencyError(ErrorKind.INTERNAL, f"Invalid json data in cache key {key}") from e

    async def set_rate(self, rate: ExchangeRate) -> None:
        key = self._make_rate_key(rate.from_currency, rate.to_currency)

        rate_dict = {
            "from_currency": rate.from_currency,
            "to_currency": rate.to_currency,
            "rate": str(rate.rate),
            "timestamp": rate.timestamp,
        }

        await self.redis.setex(key, self.rate_ttl, json.dumps(rate_dict))

    async def get_supported_currencies(self) -> list[str] | None:
        data = await self.redis.get(SUPPORTED_CURRENCIES_KEY)
        if not data:
            return None
        try:
            currencies = json.loads(data)
        except ValueError as e:
            raise CurrencyError(
                ErrorKind.INTERNAL, f"Invalid json data in cache key {SUPPORTED_CURRENCIES_KEY}"
            ) from e
        if not isinstance(currencies, list):
            raise CurrencyError(
                ErrorKind.INTERNAL, f"Invalid json data in cache key {SUPPORTED_CURRENCIES_KEY}"
            )
        return currencies

    async def set_supported_currencies(self, currencies: list[str]) -> None:
        await self.redis.setex(
            SUPPORTED_CURRENCIES_KEY, self.currency_ttl, json.dumps(currencies)
        )

    async def close(self) -> None:
        await self.redis.aclose()

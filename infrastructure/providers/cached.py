import logging

from redis.exceptions import RedisError

from domain.exceptions.currency import CurrencyError
from domain.models.currency import ExchangeRate
from infrastructure.cache.redis_cache import RedisCacheService
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)


class CachedRateSource(RateSource):
    """Serves rates and the currency list from Redis before asking `inner`.

    A broken cache never fails a lookup; it only costs an upstream call.
    """

    def __init__(self, inner: RateSource, cache: RedisCacheService):
        self.inner = inner
        self.cache = cache

    @property
    def name(self) -> str:
        return f"cached:{self.inner.name}"

    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()

        if from_currency == to_currency:
            return await self.inner.get_exchange_rate(from_currency, to_currency)

        try:
            cached = await self.cache.get_rate(from_currency, to_currency)
        except (RedisError, CurrencyError) as e:
            logger.warning(f"Rate cache read failed for {from_currency}->{to_currency}: {e}")
            cached = None

        if cached is not None:
            logger.debug(f"Cache HIT for {from_currency}->{to_currency}")
            return cached

        rate = await self.inner.get_exchange_rate(from_currency, to_currency)

        try:
            await self.cache.set_rate(rate)
        except RedisError as e:
            logger.warning(f"Rate cache write failed for {from_currency}->{to_currency}: {e}")

        return rate

    async def get_supported_currencies(self) -> list[str]:
        try:
            cached = await self.cache.get_supported_currencies()
        except (RedisError, CurrencyError) as e:
            logger.warning(f"Currency cache read failed: {e}")
            cached = None

        if cached is not None:
            return cached

        currencies = await self.inner.get_supported_currencies()

        try:
            await self.cache.set_supported_currencies(currencies)
        except RedisError as e:
            logger.warning(f"Currency cache write failed: {e}")

        return currencies

    async def close(self) -> None:
        await self.inner.close()
        try:
            await self.cache.close()
        except RedisError as e:
            logger.error(f"Failed to close Redis connection: {e}")

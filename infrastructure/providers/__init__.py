import logging
from datetime import timedelta

from redis.asyncio import Redis

from config.settings import Settings
from infrastructure.cache.redis_cache import RedisCacheService

from .base import RateSource
from .cached import CachedRateSource
from .exchangerate_api import ExchangeRateAPIProvider
from .in_memory import InMemoryRateSource

__all__ = [
    'RateSource',
    'CachedRateSource',
    'ExchangeRateAPIProvider',
    'InMemoryRateSource',
    'build_rate_source',
]

logger = logging.getLogger(__name__)


def build_rate_source(settings: Settings) -> RateSource:
    """Pick the rate source the configuration asks for."""
    source: RateSource
    if settings.USE_MOCK_RATES:
        source = InMemoryRateSource()
    else:
        source = ExchangeRateAPIProvider(
            api_key=settings.EXCHANGE_RATE_API_KEY,
            base_url=settings.EXCHANGE_RATE_API_URL,
            timeout=settings.HTTP_TIMEOUT,
            max_attempts=settings.PROVIDER_MAX_ATTEMPTS,
            retry_backoff=settings.PROVIDER_RETRY_BACKOFF,
        )

    if settings.REDIS_URL:
        cache = RedisCacheService(
            Redis.from_url(settings.REDIS_URL, decode_responses=True),
            rate_ttl=timedelta(seconds=settings.RATE_CACHE_TTL_SECONDS),
            currency_ttl=timedelta(seconds=settings.CURRENCY_CACHE_TTL_SECONDS),
        )
        source = CachedRateSource(source, cache)

    logger.info(f'Using rate source: {source.name}')
    return source

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'Currency Converter API'
	APP_VERSION: str = '1.0.0'
	ENVIRONMENT: str = 'development'
	PORT: int = 3000
	CORS_ORIGIN: str = '*'

	# Rate provider
	EXCHANGE_RATE_API_URL: str = 'https://v6.exchangerate-api.com/v6'
	EXCHANGE_RATE_API_KEY: str = ''
	HTTP_TIMEOUT: float = 10.0
	PROVIDER_MAX_ATTEMPTS: int = 3
	PROVIDER_RETRY_BACKOFF: float = 0.5
	USE_MOCK_RATES: bool = False

	# Cache
	REDIS_URL: str | None = None
	RATE_CACHE_TTL_SECONDS: int = 300
	CURRENCY_CACHE_TTL_SECONDS: int = 86400

	# Logging
	LOG_LEVEL: str = 'INFO'
	LOG_FORMAT: Literal['console', 'json'] = 'console'

	model_config = SettingsConfigDict(
		env_file='.env', case_sensitive=False, extra='ignore', frozen=True
	)

	@property
	def is_development(self) -> bool:
		return self.ENVIRONMENT == 'development'

	@property
	def is_production(self) -> bool:
		return self.ENVIRONMENT == 'production'

	@property
	def is_test(self) -> bool:
		return self.ENVIRONMENT == 'test'


@lru_cache
def get_settings() -> Settings:
	return Settings()

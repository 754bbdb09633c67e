import logging
from typing import Annotated

from fastapi import Depends, Request

from application.services import ConversionService
from config.settings import Settings
from infrastructure.providers import RateSource, build_rate_source

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	rate_source: RateSource | None = None


deps = AppDependencies()


def init_dependencies(settings: Settings) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	deps.rate_source = build_rate_source(settings)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.rate_source:
		await deps.rate_source.close()
		deps.rate_source = None

	logger.info('Cleanup complete')


def get_app_settings(request: Request) -> Settings:
	return request.app.state.settings


def get_rate_source() -> RateSource:
	if deps.rate_source is None:
		raise RuntimeError('Rate source not initialized')
	return deps.rate_source


def get_conversion_service(
	rate_source: Annotated[RateSource, Depends(get_rate_source)],
) -> ConversionService:
	return ConversionService(rate_source=rate_source)

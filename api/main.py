import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import cleanup_dependencies, init_dependencies
from api.error_handlers import register_exception_handlers
from api.routes import currency, health
from config.logging import setup_logging
from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
	settings = settings or get_settings()

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		logger.info(f'Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...')
		init_dependencies(settings)
		logger.info('Application ready')

		yield

		logger.info('Shutting down...')
		await cleanup_dependencies()

	app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
	app.state.settings = settings

	app.add_middleware(
		CORSMiddleware,
		allow_origins=[origin.strip() for origin in settings.CORS_ORIGIN.split(',')],
		allow_methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
		allow_headers=['Content-Type', 'Authorization'],
	)

	@app.middleware('http')
	async def log_requests(request: Request, call_next):
		logger.info(f'{request.method} {request.url.path}')
		return await call_next(request)

	@app.get('/', include_in_schema=False)
	async def root():
		return {
			'message': settings.APP_NAME,
			'version': settings.APP_VERSION,
			'endpoints': {
				'health': '/api/health',
				'currencies': '/api/currencies',
				'convert': '/api/convert?from=USD&to=BRL&amount=100',
			},
		}

	app.include_router(health.router)
	app.include_router(currency.router)
	register_exception_handlers(app, settings)

	return app


settings = get_settings()
setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

app = create_app(settings)


def run() -> None:
	import uvicorn

	logger.info(f'Currency Converter API listening on port {settings.PORT}')
	uvicorn.run(app, host='0.0.0.0', port=settings.PORT)


if __name__ == '__main__':
	run()

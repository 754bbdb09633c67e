import logging
import traceback
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas import ErrorResponse
from config.settings import Settings
from domain.exceptions.currency import CurrencyError, ErrorKind

logger = logging.getLogger(__name__)

NETWORK_ERROR = 'NETWORK_ERROR'
GENERIC_MESSAGE = 'An unexpected error occurred'


def _json(status_code: int, payload: ErrorResponse) -> JSONResponse:
	return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def currency_error_response(exc: CurrencyError, settings: Settings) -> JSONResponse:
	"""Map an error kind to its HTTP status and body."""
	if exc.kind is ErrorKind.VALIDATION:
		return _json(
			400,
			ErrorResponse(error='Validation failed', message=exc.message, details=list(exc.details)),
		)

	if exc.kind is ErrorKind.UNSUPPORTED_CURRENCY:
		return _json(400, ErrorResponse(error='Invalid currency', message=exc.message))

	if exc.kind is ErrorKind.UPSTREAM:
		return _json(
			exc.status_code or 500,
			ErrorResponse(error=exc.code or NETWORK_ERROR, message=exc.message),
		)

	if exc.kind is ErrorKind.INTERNAL:
		message = GENERIC_MESSAGE if settings.is_production else exc.message
		return _json(500, ErrorResponse(error='Internal Server Error', message=message))

	return _json(exc.status_code or 400, ErrorResponse(error='Bad Request', message=exc.message))


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
	@app.exception_handler(CurrencyError)
	async def currency_error_handler(request: Request, exc: CurrencyError):
		response = currency_error_response(exc, settings)
		if response.status_code >= 500:
			logger.error(f'{request.method} {request.url.path} failed: {exc!r}')
		else:
			logger.warning(f'{request.method} {request.url.path} rejected: {exc!r}')
		return response

	@app.exception_handler(RequestValidationError)
	async def request_validation_handler(request: Request, exc: RequestValidationError):
		details = [str(error.get('msg', error)) for error in exc.errors()]
		return _json(
			400,
			ErrorResponse(
				error='Validation failed', message='Invalid request parameters', details=details
			),
		)

	@app.exception_handler(StarletteHTTPException)
	async def http_exception_handler(request: Request, exc: StarletteHTTPException):
		if exc.status_code == 404:
			return _json(
				404, ErrorResponse(error='Not Found', message=f'Route {request.url.path} not found')
			)
		return JSONResponse(
			status_code=exc.status_code,
			content=ErrorResponse(
				error=HTTPStatus(exc.status_code).phrase, message=str(exc.detail)
			).model_dump(exclude_none=True),
			headers=getattr(exc, 'headers', None),
		)

	@app.exception_handler(Exception)
	async def global_exception_handler(request: Request, exc: Exception):
		logger.error(f'Unhandled exception: {exc}', exc_info=exc)
		payload = ErrorResponse(error='Internal Server Error', message=GENERIC_MESSAGE)
		if not settings.is_production:
			payload.stack = ''.join(traceback.format_exception(exc))
		return _json(500, payload)

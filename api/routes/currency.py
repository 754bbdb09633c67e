import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_conversion_service
from api.schemas import (
	ConversionData,
	ConvertResponse,
	CurrenciesData,
	ErrorResponse,
	SupportedCurrenciesResponse,
)
from application.services import ConversionService
from application.validators import validate_conversion_params
from domain.exceptions.currency import CurrencyError, ErrorKind
from domain.models.currency import ConversionRequest
from domain.validation import parse_amount, sanitize_currency_code

router = APIRouter(prefix='/api', tags=['currency'])


@router.get(
	'/convert',
	response_model=ConvertResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
	responses={400: {'model': ErrorResponse}},
)
async def convert_currency(
	service: Annotated[ConversionService, Depends(get_conversion_service)],
	from_currency: Annotated[str | None, Query(alias='from')] = None,
	to_currency: Annotated[str | None, Query(alias='to')] = None,
	amount: Annotated[str | None, Query()] = None,
) -> ConvertResponse:
	validation = validate_conversion_params(from_currency, to_currency, amount)
	if not validation.is_valid:
		raise CurrencyError(
			ErrorKind.VALIDATION, 'Invalid request parameters', details=validation.errors
		)

	from_code = sanitize_currency_code(from_currency)
	to_code = sanitize_currency_code(to_currency)
	parsed_amount = parse_amount(amount)

	is_from_valid, is_to_valid = await asyncio.gather(
		service.validate_currency_code(from_code),
		service.validate_currency_code(to_code),
	)
	for code, is_valid in ((from_code, is_from_valid), (to_code, is_to_valid)):
		if not is_valid:
			raise CurrencyError(ErrorKind.UNSUPPORTED_CURRENCY, f'Unsupported currency code: {code}')

	result = await service.convert_currency(
		ConversionRequest(from_currency=from_code, to_currency=to_code, amount=parsed_amount)
	)
	return ConvertResponse(data=ConversionData.from_domain(result))


@router.get(
	'/currencies',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List supported currencies',
)
async def get_supported_currencies(
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> SupportedCurrenciesResponse:
	currencies = await service.get_supported_currencies()
	return SupportedCurrenciesResponse(
		data=CurrenciesData(currencies=currencies, count=len(currencies))
	)

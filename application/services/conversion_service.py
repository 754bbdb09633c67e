import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from domain.exceptions.currency import CurrencyError, ErrorKind
from domain.models.currency import ConversionRequest, ConversionResponse
from domain.validation import parse_amount
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')
_LETTERS = re.compile(r'[A-Za-z]{3}')


def _invalid(message: str) -> CurrencyError:
	return CurrencyError(ErrorKind.INVALID_REQUEST, message)


def _to_cents(amount: Decimal, rate: Decimal) -> Decimal:
	"""Exact product rounded half away from zero: 104.9325 -> 104.93."""
	with localcontext() as ctx:
		ctx.prec = len(amount.as_tuple().digits) + len(rate.as_tuple().digits)
		product = amount * rate
		ctx.prec = max(ctx.prec, product.adjusted() + 4)
		return product.quantize(CENTS, rounding=ROUND_HALF_UP)


class ConversionService:
	def __init__(self, rate_source: RateSource):
		self.rate_source = rate_source

	async def convert_currency(self, request: ConversionRequest) -> ConversionResponse:
		amount = self._validate_request(request)

		rate = await self.rate_source.get_exchange_rate(request.from_currency, request.to_currency)

		converted_amount = _to_cents(amount, rate.rate)
		if not math.isfinite(float(converted_amount)):
			raise _invalid('Converted amount is out of range')

		logger.info(
			f'Converted {amount} {rate.from_currency} -> '
			f'{converted_amount} {rate.to_currency} at {rate.rate}'
		)

		return ConversionResponse(
			from_currency=rate.from_currency,
			to_currency=rate.to_currency,
			amount=amount,
			converted_amount=converted_amount,
			rate=rate.rate,
			timestamp=rate.timestamp,
		)

	async def validate_currency_code(self, code: str) -> bool:
		try:
			supported = await self.rate_source.get_supported_currencies()
		except Exception as e:
			logger.warning(f'Could not check currency {code}: {e}')
			return False
		return code.strip().upper() in {c.upper() for c in supported}

	async def get_supported_currencies(self) -> list[str]:
		return await self.rate_source.get_supported_currencies()

	@staticmethod
	def _validate_request(request: ConversionRequest) -> Decimal:
		"""Checks that hold whether or not the caller validated already.

		Returns the amount as a Decimal.
		"""
		from_currency, to_currency = request.from_currency, request.to_currency

		if not isinstance(from_currency, str) or not from_currency.strip():
			raise _invalid('From currency is required and must be a valid string')

		if not isinstance(to_currency, str) or not to_currency.strip():
			raise _invalid('To currency is required and must be a valid string')

		# Strings are not accepted here; parsing is the caller's job.
		if isinstance(request.amount, (bool, str)):
			raise _invalid('Amount must be a positive number')
		try:
			amount = parse_amount(request.amount)
		except CurrencyError as e:
			raise _invalid('Amount must be a positive number') from e
		if not amount.is_finite() or amount <= 0 or not math.isfinite(float(amount)):
			raise _invalid('Amount must be a positive number')

		if len(from_currency) != 3 or len(to_currency) != 3:
			raise _invalid('Currency codes must be exactly 3 characters long')

		if not _LETTERS.fullmatch(from_currency) or not _LETTERS.fullmatch(to_currency):
			raise _invalid('Currency codes must contain only letters')

		return amount

from pydantic import BaseModel, ConfigDict, Field

from domain.models.currency import ConversionResponse


class ConversionData(BaseModel):
	model_config = ConfigDict(
		populate_by_name=True,
		json_schema_extra={
			'example': {
				'from': 'USD',
				'to': 'BRL',
				'amount': 100,
				'convertedAmount': 525.0,
				'rate': 5.25,
				'timestamp': 1735689600000,
			}
		},
	)

	from_currency: str = Field(..., alias='from', description='Source currency code')
	to_currency: str = Field(..., alias='to', description='Target currency code')
	amount: float = Field(..., description='Original amount requested')
	converted_amount: float = Field(
		..., alias='convertedAmount', description='Converted amount, rounded to 2 places'
	)
	rate: float = Field(..., description='Exchange rate used for conversion')
	timestamp: int = Field(..., description='Last rate update, epoch milliseconds')

	@classmethod
	def from_domain(cls, result: ConversionResponse) -> 'ConversionData':
		return cls(
			from_currency=result.from_currency,
			to_currency=result.to_currency,
			amount=result.amount,
			converted_amount=result.converted_amount,
			rate=result.rate,
			timestamp=result.timestamp,
		)


class ConvertResponse(BaseModel):
	success: bool = True
	data: ConversionData


class CurrenciesData(BaseModel):
	currencies: list[str] = Field(description='List of currency codes')
	count: int


class SupportedCurrenciesResponse(BaseModel):
	success: bool = True
	data: CurrenciesData

	model_config = ConfigDict(
		json_schema_extra={
			'examples': [
				{'success': True, 'data': {'currencies': ['USD', 'EUR', 'GBP'], 'count': 3}}
			]
		}
	)


class HealthResponse(BaseModel):
	success: bool = True
	message: str
	timestamp: str
	version: str


class ErrorResponse(BaseModel):
	error: str
	message: str
	details: list[str] | None = None
	stack: str | None = None

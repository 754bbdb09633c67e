from .responses import (
	ConversionData,
	ConvertResponse,
	CurrenciesData,
	ErrorResponse,
	HealthResponse,
	SupportedCurrenciesResponse,
)

__all__ = [
	'ConversionData',
	'ConvertResponse',
	'CurrenciesData',
	'ErrorResponse',
	'HealthResponse',
	'SupportedCurrenciesResponse',
]

from domain.models.currency import ValidationResult
from domain.validation import is_valid_amount, is_valid_currency_code


def validate_conversion_params(from_currency, to_currency, amount) -> ValidationResult:
	"""Check raw conversion parameters, reporting every problem at once."""
	errors: list[str] = []

	for label, code in (('From', from_currency), ('To', to_currency)):
		if not code:
			errors.append(f'{label} currency is required')
		elif not is_valid_currency_code(code):
			errors.append(f'{label} currency must be a valid 3-letter currency code')

	if amount is None:
		errors.append('Amount is required')
	elif not is_valid_amount(amount):
		errors.append('Amount must be a positive number')

	return ValidationResult(is_valid=not errors, errors=tuple(errors))

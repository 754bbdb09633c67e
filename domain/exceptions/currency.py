from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    INVALID_FORMAT = "invalid_format"
    INVALID_TYPE = "invalid_type"
    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_CURRENCY = "unsupported_currency"
    RATE_UNAVAILABLE = "rate_unavailable"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


class CurrencyError(Exception):
    """Every failure the conversion pipeline reports.

    The kind decides how the HTTP layer answers; `status_code` and `code`
    only carry what an upstream provider told us.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: tuple[str, ...] | list[str] = (),
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = tuple(details)

    def __repr__(self) -> str:
        return f"CurrencyError(kind={self.kind.value!r}, message={self.message!r})"

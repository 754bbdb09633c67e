import contextlib
import logging
from decimal import Decimal, InvalidOperation

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from domain.exceptions.currency import CurrencyError, ErrorKind
from domain.models.currency import ExchangeRate
from infrastructure.providers.base import RateSource, identity_rate, now_ms

logger = logging.getLogger(__name__)

NETWORK_ERROR = "NETWORK_ERROR"


def _error_body(response: httpx.Response) -> dict:
    body = None
    with contextlib.suppress(Exception):
        body = response.json()
    return body if isinstance(body, dict) else {}


class ExchangeRateAPIProvider(RateSource):
    """Live rates from exchangerate-api.com (v6 API)."""

    BASE_URL = "https://v6.exchangerate-api.com/v6"

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        max_attempts: int = 3,
        retry_backoff: float = 0.5,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max(1, max_attempts)
        self.retry_backoff = retry_backoff
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    @property
    def name(self) -> str:
        return "exchangerate-api"

    async def _get(self, url: str) -> httpx.Response:
        # Only transport failures are retried; HTTP error statuses are final.
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_backoff, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        f"Retrying {self.name} request (attempt {attempt.retry_state.attempt_number})"
                    )
                response = await self._client.get(url)
        return response

    async def _request(self, endpoint: str) -> dict:
        url = f"{self.base_url}/{self.api_key}/{endpoint}"

        try:
            response = await self._get(url)
            response.raise_for_status()
            data = response.json()

        except httpx.HTTPStatusError as e:
            body = _error_body(e.response)
            code = body.get("error-type") or body.get("code") or NETWORK_ERROR
            message = body.get("message") or f"HTTP error {e.response.status_code}: {e.response.text[:200]}"
            raise CurrencyError(
                ErrorKind.UPSTREAM,
                message,
                status_code=e.response.status_code,
                code=str(code),
            ) from e
        except httpx.RequestError as e:
            raise CurrencyError(
                ErrorKind.UPSTREAM,
                f"ExchangeRate-API request failed: {e.__class__.__name__}",
                status_code=500,
                code=NETWORK_ERROR,
            ) from e
        except ValueError as e:
            raise CurrencyError(
                ErrorKind.UPSTREAM,
                f"ExchangeRate-API response parsing error: {str(e)}",
                status_code=502,
                code="INVALID_RESPONSE",
            ) from e

        if not isinstance(data, dict) or data.get("result") != "success":
            error_type = data.get("error-type", "unknown-error") if isinstance(data, dict) else "unknown-error"
            raise CurrencyError(
                ErrorKind.UPSTREAM,
                f"API returned error: {error_type}",
                status_code=502,
                code=str(error_type),
            )

        return data

    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()

        if from_currency == to_currency:
            return identity_rate(from_currency)

        data = await self._request(f"latest/{from_currency}")

        rates = data.get("conversion_rates")
        if not isinstance(rates, dict):
            raise CurrencyError(
                ErrorKind.UPSTREAM,
                "ExchangeRate-API response has no conversion rates",
                status_code=502,
                code="INVALID_RESPONSE",
            )

        try:
            rate = Decimal(str(rates[to_currency]))
        except (KeyError, InvalidOperation) as e:
            raise CurrencyError(
                ErrorKind.RATE_UNAVAILABLE,
                f"Exchange rate not found for currency: {to_currency}",
            ) from e
        if not rate.is_finite() or rate <= 0:
            raise CurrencyError(
                ErrorKind.RATE_UNAVAILABLE,
                f"Exchange rate not found for currency: {to_currency}",
            )

        try:
            timestamp = int(data["time_last_update_unix"]) * 1000
        except (KeyError, TypeError, ValueError):
            timestamp = now_ms()

        return ExchangeRate(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            timestamp=timestamp,
        )

    async def get_supported_currencies(self) -> list[str]:
        data = await self._request("codes")
        try:
            return [str(entry[0]).upper() for entry in data["supported_codes"]]
        except (KeyError, IndexError, TypeError) as e:
            raise CurrencyError(
                ErrorKind.UPSTREAM,
                "ExchangeRate-API response has no supported codes",
                status_code=502,
                code="INVALID_RESPONSE",
            ) from e

    async def close(self) -> None:
        await self._client.aclose()

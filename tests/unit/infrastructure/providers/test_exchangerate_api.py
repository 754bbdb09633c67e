# nosec B101


import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import httpx

from domain.exceptions.currency import CurrencyError, ErrorKind
from infrastructure.providers.exchangerate_api import ExchangeRateAPIProvider

LATEST_USD = {
    'result': 'success',
    'base_code': 'USD',
    'time_last_update_unix': 1735689601,
    'conversion_rates': {'USD': 1, 'EUR': 0.85, 'BRL': 5.25, 'JPY': 110.5},
}

CODES = {
    'result': 'success',
    'supported_codes': [['USD', 'United States Dollar'], ['EUR', 'Euro'], ['BRL', 'Brazilian Real']],
}


def make_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status = Mock()
    return response


def make_status_error(status_code, text='', payload=None):
    error_response = Mock()
    error_response.status_code = status_code
    error_response.text = text
    if payload is None:
        error_response.json.side_effect = ValueError('no json')
    else:
        error_response.json.return_value = payload
    return httpx.HTTPStatusError('error', request=Mock(), response=error_response)


def make_provider(mock_client, max_attempts=1):
    return ExchangeRateAPIProvider(
        api_key='test_key',
        base_url='https://example.test/v6/',
        client=mock_client,
        max_attempts=max_attempts,
        retry_backoff=0,
    )


# ============================================================================
# TEST: get_exchange_rate()
# ============================================================================

@pytest.mark.asyncio
async def test_get_exchange_rate_success():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response(LATEST_USD)
    provider = make_provider(mock_client)

    rate = await provider.get_exchange_rate('usd', 'eur')

    assert rate.from_currency == 'USD'
    assert rate.to_currency == 'EUR'
    assert rate.rate == Decimal('0.85')
    assert isinstance(rate.rate, Decimal)
    assert rate.timestamp == 1735689601000
    mock_client.get.assert_called_once_with('https://example.test/v6/test_key/latest/USD')


@pytest.mark.asyncio
async def test_get_exchange_rate_same_currency_skips_provider():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    provider = make_provider(mock_client)

    rate = await provider.get_exchange_rate('EUR', 'eur')

    assert rate.rate == Decimal('1')
    assert rate.timestamp > 0
    mock_client.get.assert_not_called()


@pytest.mark.asyncio
async def test_get_exchange_rate_missing_target_is_rate_unavailable():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response(LATEST_USD)
    provider = make_provider(mock_client)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_exchange_rate('USD', 'XYZ')

    assert exc_info.value.kind is ErrorKind.RATE_UNAVAILABLE
    assert 'XYZ' in exc_info.value.message


@pytest.mark.asyncio
async def test_get_exchange_rate_api_result_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response({'result': 'error', 'error-type': 'invalid-key'})
    provider = make_provider(mock_client)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_exchange_rate('USD', 'EUR')

    assert exc_info.value.kind is ErrorKind.UPSTREAM
    assert exc_info.value.code == 'invalid-key'
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_get_exchange_rate_http_error_carries_provider_status_and_code():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = make_status_error(
        404, 'Not Found', {'result': 'error', 'error-type': 'unsupported-code'}
    )
    provider = make_provider(mock_client)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_exchange_rate('USD', 'EUR')

    assert exc_info.value.kind is ErrorKind.UPSTREAM
    assert exc_info.value.status_code == 404
    assert exc_info.value.code == 'unsupported-code'


@pytest.mark.asyncio
async def test_get_exchange_rate_http_500_without_body():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = make_status_error(500, 'Internal Server Error')
    provider = make_provider(mock_client)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_exchange_rate('USD', 'EUR')

    assert exc_info.value.status_code == 500
    assert exc_info.value.code == 'NETWORK_ERROR'
    assert 'HTTP error 500' in exc_info.value.message


@pytest.mark.asyncio
async def test_get_exchange_rate_timeout_is_upstream_network_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.TimeoutException('Request timed out')
    provider = make_provider(mock_client)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_exchange_rate('USD', 'EUR')

    assert exc_info.value.kind is ErrorKind.UPSTREAM
    assert exc_info.value.code == 'NETWORK_ERROR'
    assert 'request failed' in exc_info.value.message.lower()


@pytest.mark.asyncio
async def test_transport_errors_are_retried():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = [
        httpx.ConnectError('Connection refused'),
        make_response(LATEST_USD),
    ]
    provider = make_provider(mock_client, max_attempts=3)

    rate = await provider.get_exchange_rate('USD', 'BRL')

    assert rate.rate == Decimal('5.25')
    assert mock_client.get.call_count == 2


@pytest.mark.asyncio
async def test_retries_stop_after_max_attempts():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.ConnectError('Connection refused')
    provider = make_provider(mock_client, max_attempts=3)

    with pytest.raises(CurrencyError):
        await provider.get_exchange_rate('USD', 'BRL')

    assert mock_client.get.call_count == 3


@pytest.mark.asyncio
async def test_http_status_errors_are_not_retried():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = make_status_error(429, 'Too Many Requests')
    provider = make_provider(mock_client, max_attempts=3)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_exchange_rate('USD', 'BRL')

    assert exc_info.value.status_code == 429
    assert mock_client.get.call_count == 1


@pytest.mark.asyncio
async def test_invalid_json_is_upstream_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    response = Mock()
    response.raise_for_status = Mock()
    response.json.side_effect = ValueError('Expecting value')
    mock_client.get.return_value = response
    provider = make_provider(mock_client)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_exchange_rate('USD', 'EUR')

    assert exc_info.value.kind is ErrorKind.UPSTREAM
    assert exc_info.value.code == 'INVALID_RESPONSE'


# ============================================================================
# TEST: get_supported_currencies()
# ============================================================================

@pytest.mark.asyncio
async def test_get_supported_currencies():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response(CODES)
    provider = make_provider(mock_client)

    currencies = await provider.get_supported_currencies()

    assert currencies == ['USD', 'EUR', 'BRL']
    mock_client.get.assert_called_once_with('https://example.test/v6/test_key/codes')


@pytest.mark.asyncio
async def test_get_supported_currencies_failure():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = make_status_error(403, 'Forbidden', {'error-type': 'inactive-account'})
    provider = make_provider(mock_client)

    with pytest.raises(CurrencyError) as exc_info:
        await provider.get_supported_currencies()

    assert exc_info.value.kind is ErrorKind.UPSTREAM
    assert exc_info.value.status_code == 403
    assert exc_info.value.code == 'inactive-account'


@pytest.mark.asyncio
async def test_close_closes_client():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    provider = make_provider(mock_client)

    await provider.close()

    mock_client.aclose.assert_awaited_once()

import pytest
import requests
import responses
from responses import matchers

from ledger.justetf import URL, Asset
from ledger.money import Currency, Money

ISIN = "XX0000000001"
EUR = Currency("EUR")


def _register(rsps, body, currency="EUR"):
    rsps.add(
        responses.GET,
        URL,
        json=body,
        match=[
            matchers.query_param_matcher({"locale": "en", "currency": currency, "isin": ISIN})
        ],
    )


def test_download_reads_name_and_quote():
    with responses.RequestsMock() as rsps:
        _register(rsps, {"etfs": [{"name": "World Fund", "quote": {"raw": 12.34}}]})
        asset = Asset.download(ISIN, EUR)
    assert asset.isin == ISIN
    assert asset.name == "World Fund"
    assert asset.quote == Money.parse("12.34", EUR)


def test_download_uses_requested_currency():
    usd = Currency("USD")
    with responses.RequestsMock() as rsps:
        _register(rsps, {"etfs": [{"name": "Fund", "quote": {"raw": 3}}]}, currency="USD")
        asset = Asset.download(ISIN, usd)
    assert asset.quote == Money.parse("3", usd)


def test_missing_name_is_an_error():
    with responses.RequestsMock() as rsps:
        _register(rsps, {"etfs": [{"quote": {"raw": 1.0}}]})
        with pytest.raises(ValueError, match="Asset name could not be found"):
            Asset.download(ISIN, EUR)


def test_missing_quote_is_an_error():
    with responses.RequestsMock() as rsps:
        _register(rsps, {"etfs": [{"name": "Fund"}]})
        with pytest.raises(ValueError, match="Asset value could not be found"):
            Asset.download(ISIN, EUR)


def test_empty_result_list_is_an_error():
    with responses.RequestsMock() as rsps:
        _register(rsps, {"etfs": []})
        with pytest.raises(ValueError, match="Asset name could not be found"):
            Asset.download(ISIN, EUR)


def test_quote_given_as_text_cannot_be_parsed():
    with responses.RequestsMock() as rsps:
        _register(rsps, {"etfs": [{"name": "Fund", "quote": {"raw": "12.34"}}]})
        with pytest.raises(ValueError, match="invalid float literal"):
            Asset.download(ISIN, EUR)


def test_network_failure_propagates():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=requests.ConnectionError("down"))
        with pytest.raises(requests.ConnectionError):
            Asset.download(ISIN, EUR)
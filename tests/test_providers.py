from __future__ import annotations

import io
import urllib.error

import pytest

from spendbook.models import Currency
from spendbook.models.result import Err, Ok
from spendbook.services import http_client
from spendbook.services.rates import providers
from spendbook.services.rates.providers import (
    FALLBACK_LABEL,
    NbpRateProvider,
    StaticRateProvider,
    make_rate_provider,
    parse_nbp_table,
)

NBP_PAYLOAD = [
    {
        "table": "A",
        "no": "001/A/NBP/2024",
        "effectiveDate": "2024-01-02",
        "rates": [
            {"currency": "dolar amerykański", "code": "USD", "mid": 3.9432},
            {"currency": "euro", "code": "EUR", "mid": 4.3434},
            {"currency": "frank szwajcarski", "code": "CHF", "mid": 4.6823},
        ],
    }
]


def test_static_provider_returns_fallback_table():
    quote = StaticRateProvider().fetch()
    assert quote.ok
    assert quote.value.label == FALLBACK_LABEL
    assert quote.value.rates == {Currency.PLN: 1.0, Currency.EUR: 4.30, Currency.USD: 3.95}


def test_parse_nbp_table():
    quote = parse_nbp_table(NBP_PAYLOAD)
    assert quote.ok
    assert quote.value.rates == {Currency.PLN: 1.0, Currency.EUR: 4.3434, Currency.USD: 3.9432}
    assert quote.value.label == "NBP 2024-01-02"


@pytest.mark.parametrize("payload", [None, [], {}, [{"rates": "x"}], ["junk"]])
def test_parse_nbp_malformed(payload):
    quote = parse_nbp_table(payload)
    assert not quote.ok
    assert quote.error == "invalid NBP response format"


def test_parse_nbp_missing_currency():
    payload = [{"effectiveDate": "2024-01-02", "rates": [{"code": "EUR", "mid": 4.3}]}]
    quote = parse_nbp_table(payload)
    assert not quote.ok
    assert "missing" in quote.error


def test_parse_nbp_rejects_non_positive_mid():
    payload = [
        {
            "effectiveDate": "2024-01-02",
            "rates": [{"code": "EUR", "mid": 0}, {"code": "USD", "mid": 3.9}],
        }
    ]
    assert not parse_nbp_table(payload).ok


def test_nbp_provider_fetch(monkeypatch):
    calls = []

    def fake_get_json(url, *, timeout, retries):
        calls.append((url, timeout, retries))
        return Ok(NBP_PAYLOAD)

    monkeypatch.setattr(providers, "get_json", fake_get_json)
    quote = NbpRateProvider(url="http://nbp.test/a", timeout=1.5).fetch()
    assert quote.ok
    assert calls == [("http://nbp.test/a", 1.5, 2)]


def test_nbp_provider_network_error(monkeypatch):
    def down(url, *, timeout, retries):
        return Err("GET http://nbp.test failed: transport error")

    monkeypatch.setattr(providers, "get_json", down)
    quote = NbpRateProvider().fetch()
    assert not quote.ok
    assert "network" in quote.error


def test_make_rate_provider():
    assert isinstance(make_rate_provider("static"), StaticRateProvider)
    assert isinstance(make_rate_provider("nbp", timeout=2.0), NbpRateProvider)
    with pytest.raises(ValueError):
        make_rate_provider("carrier-pigeon")


class _FakeResponse(io.BytesIO):
    status = 200


def _urlopen_sequence(monkeypatch, outcomes):
    """Patch urlopen to play back responses/exceptions in order."""
    calls = []

    def fake_urlopen(request, timeout):
        calls.append((request.full_url, request.get_header("Accept"), timeout))
        outcome = outcomes[len(calls) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return _FakeResponse(outcome)

    monkeypatch.setattr(http_client.urllib.request, "urlopen", fake_urlopen)
    return calls


def _http_error(code):
    return urllib.error.HTTPError("http://nbp.test/a", code, "error", {}, None)


def test_get_json_returns_decoded_body(monkeypatch):
    calls = _urlopen_sequence(monkeypatch, [b'{"ok": true}'])
    result = http_client.get_json("http://nbp.test/a", timeout=2.0)
    assert result.ok
    assert result.value == {"ok": True}
    assert calls == [("http://nbp.test/a", "application/json", 2.0)]


def test_get_json_retries_transport_errors_then_returns_err(monkeypatch):
    calls = _urlopen_sequence(monkeypatch, [urllib.error.URLError("unreachable")] * 3)
    sleeps = []
    result = http_client.get_json("http://nbp.test/a", retries=2, sleep=sleeps.append)
    assert not result.ok
    assert "transport error" in result.error
    assert len(calls) == 3
    assert sleeps == [0.5, 1.0]


def test_get_json_recovers_after_server_error(monkeypatch):
    calls = _urlopen_sequence(monkeypatch, [_http_error(503), b"[1, 2]"])
    result = http_client.get_json("http://nbp.test/a", sleep=lambda s: None)
    assert result.ok
    assert result.value == [1, 2]
    assert len(calls) == 2


@pytest.mark.parametrize("outcome", [_http_error(404), b"<html>not json</html>"])
def test_get_json_does_not_retry_permanent_failures(monkeypatch, outcome):
    calls = _urlopen_sequence(monkeypatch, [outcome] * 3)
    result = http_client.get_json("http://nbp.test/a", sleep=lambda s: None)
    assert not result.ok
    assert len(calls) == 1

from __future__ import annotations

"""Concrete rate providers and factory.

'static' returns built-in fallback rates so conversions work before (or
without) a network fetch. 'nbp' reads the National Bank of Poland average
rates table A.
"""
import logging
from typing import Any, Dict, Optional

from spendbook.models import Currency
from spendbook.models.result import Err, Ok, Result
from spendbook.services.http_client import get_json
from .base import FxQuote, RateProvider

logger = logging.getLogger("spendbook.rates")

FALLBACK_RATES: Dict[Currency, float] = {
    Currency.PLN: 1.0,
    Currency.EUR: 4.30,
    Currency.USD: 3.95,
}
FALLBACK_LABEL = "fallback"

NBP_TABLE_A_URL = "https://api.nbp.pl/api/exchangerates/tables/A/?format=json"


class StaticRateProvider(RateProvider):
    def fetch(self) -> Result[FxQuote]:  # type: ignore[override]
        return Ok(FxQuote(rates=dict(FALLBACK_RATES), label=FALLBACK_LABEL))


def _mid(table: Dict[str, Any], code: str) -> Optional[float]:
    for row in table.get("rates") or []:
        if isinstance(row, dict) and row.get("code") == code:
            mid = row.get("mid")
            if isinstance(mid, (int, float)) and not isinstance(mid, bool) and mid > 0:
                return float(mid)
            return None
    return None


def parse_nbp_table(payload: Any) -> Result[FxQuote]:
    """Build a quote from an NBP table A response (a list with one table)."""
    table = payload[0] if isinstance(payload, list) and payload else None
    if not isinstance(table, dict) or not isinstance(table.get("rates"), list):
        return Err("invalid NBP response format")

    eur = _mid(table, "EUR")
    usd = _mid(table, "USD")
    if eur is None or usd is None:
        return Err("EUR or USD rate missing from NBP table")

    return Ok(
        FxQuote(
            rates={Currency.PLN: 1.0, Currency.EUR: eur, Currency.USD: usd},
            label=f"NBP {table.get('effectiveDate', '')}".strip(),
        )
    )


class NbpRateProvider(RateProvider):
    def __init__(self, url: str = NBP_TABLE_A_URL, timeout: float = 5.0, retries: int = 2):
        self._url = url
        self._timeout = timeout
        self._retries = retries

    def fetch(self) -> Result[FxQuote]:  # type: ignore[override]
        fetched = get_json(self._url, timeout=self._timeout, retries=self._retries)
        if not fetched.ok:
            logger.warning("NBP rate fetch failed: %s", fetched.error)
            return Err("could not fetch exchange rates (network error)")
        quote = parse_nbp_table(fetched.value)
        if quote.ok:
            logger.info("fetched NBP rates: %s", quote.value.label)
        return quote


_PROVIDER_REGISTRY = {
    "static": StaticRateProvider,
    "nbp": NbpRateProvider,
}


def make_rate_provider(kind: str, **kwargs: Any) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    if cls is StaticRateProvider:
        return cls()
    return cls(**kwargs)

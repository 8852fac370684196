from __future__ import annotations

"""Rate provider abstraction.

A provider returns a complete quote (PLN per unit for each supported currency
plus a label naming its source) or an `Err` describing why it could not.
Providers never touch state; the ledger applies a quote through the setFx
action.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict

from spendbook.models import Currency
from spendbook.models.result import Result


@dataclass(frozen=True)
class FxQuote:
    rates: Dict[Currency, float]
    label: str


class RateProvider(ABC):
    @abstractmethod
    def fetch(self) -> Result[FxQuote]:
        """Return PLN per 1 unit of each currency, labelled with its source."""
        raise NotImplementedError

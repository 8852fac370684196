"""Domain constants and enumerations for validation.

The currency set is closed; every ingestion point (form input, import file)
checks membership through `is_currency`.
"""

from enum import Enum
from typing import Tuple


class Currency(str, Enum):
    PLN = "PLN"
    EUR = "EUR"
    USD = "USD"


CURRENCIES: Tuple[Currency, ...] = tuple(Currency)

# Rates are expressed as PLN per one unit of a currency; PLN itself is pinned to 1.
REFERENCE_CURRENCY = Currency.PLN

DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Food",
    "Transport",
    "Bills",
    "Entertainment",
    "Other",
)

# Label meaning "no real rates loaded yet" (every rate is 1.0).
NO_RATES_LABEL = "none (1.0)"


def is_currency(value: object) -> bool:
    return isinstance(value, str) and value in Currency.__members__

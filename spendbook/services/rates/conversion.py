"""Two-hop currency conversion through the reference currency (PLN).

Rates are PLN per one unit of a currency, so ``amount * rate(from)`` is the
PLN value and dividing by ``rate(to)`` lands in the target currency. A
currency missing from the table counts as 1.0; non-positive or non-numeric
entries are treated the same way. No rounding happens here; callers format
for display.
"""

from __future__ import annotations

import math
from typing import Mapping

from spendbook.models import Currency


def rate_for(currency: Currency | str, rates: Mapping[Currency, object]) -> float:
    value = rates.get(currency)  # type: ignore[call-overload]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1.0
    if not math.isfinite(value) or value <= 0:
        return 1.0
    return float(value)


def convert(
    amount: float,
    from_currency: Currency | str,
    to_currency: Currency | str,
    rates: Mapping[Currency, object],
) -> float:
    return amount * rate_for(from_currency, rates) / rate_for(to_currency, rates)

"""JSON boundary for persisted and exported state.

`serialize` is a direct structural dump using the document keys (``dateISO``,
``fxPLN`` ...). `deserialize` never raises: structural problems come back as
`Err`, while individual fields are repaired with defaults. Repair happens
first; a per-record gate then drops any expense that is still unusable
(empty id, category or date, or an amount that is not a positive number).
A bad record is lost rather than imported as corrupt data.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, List, Optional

from spendbook.models import (
    CURRENCIES,
    NO_RATES_LABEL,
    REFERENCE_CURRENCY,
    Currency,
    Expense,
    Filters,
    State,
    is_currency,
)
from spendbook.models.result import Err, Ok, Result

logger = logging.getLogger("spendbook.serialization")


def serialize(state: State) -> str:
    return state.model_dump_json(by_alias=True)


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _as_currency(value: Any) -> Currency:
    code = _as_str(value, REFERENCE_CURRENCY.value).upper()
    return Currency(code) if is_currency(code) else REFERENCE_CURRENCY


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _coerce_expense(entry: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(entry, dict):
        return None
    return {
        "id": _as_str(entry.get("id")),
        "amount": _as_number(entry.get("amount")),
        "currency": _as_currency(entry.get("currency")),
        "category": _as_str(entry.get("category")),
        "date_iso": _as_str(entry.get("dateISO")),
        "note": _as_str(entry.get("note")),
    }


def _is_usable(record: Dict[str, Any]) -> bool:
    amount = record["amount"]
    return (
        record["id"] != ""
        and record["category"] != ""
        and record["date_iso"] != ""
        and math.isfinite(amount)
        and amount > 0
    )


def _coerce_rates(raw: Any) -> Dict[Currency, float]:
    table = raw if isinstance(raw, dict) else {}
    rates: Dict[Currency, float] = {}
    for currency in CURRENCIES:
        if currency == REFERENCE_CURRENCY:
            rates[currency] = 1.0
            continue
        value = _as_number(table.get(currency.value))
        rates[currency] = value if math.isfinite(value) and value > 0 else 1.0
    return rates


def _coerce_filters(raw: Any) -> Filters:
    data = raw if isinstance(raw, dict) else {}
    return Filters(
        date_from=_optional_str(data.get("dateFrom")),
        date_to=_optional_str(data.get("dateTo")),
        category=_optional_str(data.get("category")),
        text=_as_str(data.get("text")),
    )


def deserialize(text: str) -> Result[State]:
    try:
        doc = json.loads(text)
    except (ValueError, TypeError, RecursionError):
        return Err("could not parse JSON document")

    if not isinstance(doc, dict):
        return Err("invalid JSON structure")
    raw_expenses = doc.get("expenses")
    raw_categories = doc.get("categories")
    if not isinstance(raw_expenses, list) or not isinstance(raw_categories, list):
        return Err("missing expenses or categories array")

    expenses: List[Expense] = []
    dropped = 0
    for entry in raw_expenses:
        record = _coerce_expense(entry)
        if record is None or not _is_usable(record):
            dropped += 1
            continue
        expenses.append(Expense(**record))
    if dropped:
        logger.info("dropped %d malformed expense record(s) on import", dropped)

    categories = tuple(
        name for name in (_as_str(c) for c in raw_categories) if name.strip()
    )

    fx_label = doc.get("fxLabel")
    state = State(
        expenses=tuple(expenses),
        categories=categories,
        currency=_as_currency(doc.get("currency")),
        filters=_coerce_filters(doc.get("filters")),
        sort="amount" if doc.get("sort") == "amount" else "date",
        fx_pln=_coerce_rates(doc.get("fxPLN")),
        fx_label=fx_label if isinstance(fx_label, str) else NO_RATES_LABEL,
    )
    return Ok(state)

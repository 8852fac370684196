"""Expense draft and filter validation.

Two entry points guard the add/edit flow:

* `parse_draft` turns raw form fields into an `ExpenseDraft`, stopping at the
  first bad field and returning an `Err` with a readable message.
* `validate_draft` re-checks a draft and accumulates every problem as an
  `Issue`, so a caller can report all of them at once.

`reconcile_filter_dates` never fails: an inverted date range is corrected by
snapping the bound that was not just edited onto the one that was.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import List, Mapping, Optional

from spendbook.models import (
    Currency,
    ExpenseDraft,
    Filters,
    FiltersPatch,
    Issue,
    is_currency,
)
from spendbook.models.result import Err, Ok, Result


def parse_instant(value: object) -> Optional[datetime]:
    """Parse an ISO 8601 date or datetime into a UTC-aware datetime.

    Date-only strings are midnight UTC, naive datetimes are treated as UTC and a
    trailing ``Z`` is accepted. Returns None for anything unparseable.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            d = date.fromisoformat(text)
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        dt = datetime.fromisoformat(text)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        # an offset can push the UTC instant outside year 1..9999
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def _field(raw: Mapping[str, object], key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    return str(value).strip()


def parse_amount(text: str) -> Optional[float]:
    """Return a finite positive float or None."""
    if not text:
        return None
    try:
        amount = float(text)
    except ValueError:
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def parse_draft(raw: Mapping[str, object]) -> Result[ExpenseDraft]:
    amount = parse_amount(_field(raw, "amount"))
    if amount is None:
        return Err("amount must be a positive number")

    currency = _field(raw, "currency").upper()
    if not currency:
        return Err("currency is required")
    if not is_currency(currency):
        return Err("unsupported currency")

    category = _field(raw, "category")
    if not category:
        return Err("category is required")

    date_iso = _field(raw, "date")
    if not date_iso:
        return Err("date is required")

    note = _field(raw, "note")

    return Ok(
        ExpenseDraft(
            amount=amount,
            currency=Currency(currency),
            category=category,
            date_iso=date_iso,
            note=note,
        )
    )


def validate_draft(draft: ExpenseDraft) -> List[Issue]:
    issues: List[Issue] = []
    if not draft.amount > 0:
        issues.append(Issue("amount", "amount must be greater than 0"))
    if not is_currency(draft.currency):
        issues.append(Issue("currency", "unsupported currency"))
    if not draft.category.strip():
        issues.append(Issue("category", "category is required"))
    if parse_instant(draft.date_iso) is None:
        issues.append(Issue("date", "a valid date is required"))
    return issues


def reconcile_filter_dates(current: Filters, patch: FiltersPatch) -> Filters:
    changes = patch.changes()
    merged = current.model_copy(update=changes)

    start = parse_instant(merged.date_from)
    end = parse_instant(merged.date_to)
    if start is None or end is None or start <= end:
        return merged

    if "date_from" in changes:
        return merged.model_copy(update={"date_to": merged.date_from})
    if "date_to" in changes:
        return merged.model_copy(update={"date_from": merged.date_to})
    return merged

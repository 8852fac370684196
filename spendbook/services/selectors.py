"""Visible expenses: filter by date range, category and note text, then sort.

Date bounds are inclusive and compared as instants. Callers reconcile an
inverted range with `reconcile_filter_dates` before it reaches this module.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Tuple

from spendbook.models import Expense, Filters, State
from spendbook.services.validation import parse_instant


def _date_predicate(filters: Filters) -> Callable[[Expense], bool]:
    start = parse_instant(filters.date_from)
    end = parse_instant(filters.date_to)

    def match(expense: Expense) -> bool:
        if start is None and end is None:
            return True
        when = parse_instant(expense.date_iso)
        if when is None:
            return False
        if start is not None and when < start:
            return False
        if end is not None and when > end:
            return False
        return True

    return match


def _category_predicate(filters: Filters) -> Callable[[Expense], bool]:
    category = filters.category
    if not category:
        return lambda expense: True
    return lambda expense: expense.category == category


def _text_predicate(filters: Filters) -> Callable[[Expense], bool]:
    needle = (filters.text or "").strip().lower()
    if not needle:
        return lambda expense: True
    return lambda expense: needle in expense.note.lower()


def _date_sort_key(expense: Expense) -> Tuple[int, float]:
    when: Optional[datetime] = parse_instant(expense.date_iso)
    # unparseable dates go last
    if when is None:
        return (1, 0.0)
    return (0, -when.timestamp())


def select_visible(state: State, filters: Filters) -> Tuple[Expense, ...]:
    predicates = (
        _date_predicate(filters),
        _category_predicate(filters),
        _text_predicate(filters),
    )
    filtered: List[Expense] = [
        e for e in state.expenses if all(p(e) for p in predicates)
    ]
    if state.sort == "amount":
        ordered = sorted(filtered, key=lambda e: -e.amount)
    else:
        ordered = sorted(filtered, key=_date_sort_key)
    return tuple(ordered)

"""Pure state transitions.

`reduce(state, action)` looks up a handler by ``action.kind`` and returns a new
`State`; nothing is mutated in place. Handlers never raise. An object whose
kind has no handler (e.g. produced by a newer client) leaves the state
unchanged. Every kind declared in `ACTION_TYPES` must have a handler; this is
checked once when the module is imported.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict

from spendbook.models import (
    ACTION_TYPES,
    CURRENCIES,
    REFERENCE_CURRENCY,
    AddCategory,
    AddExpense,
    DeleteExpense,
    EditExpense,
    MergeState,
    ReplaceState,
    SetCurrency,
    SetFilters,
    SetFx,
    SetSort,
    State,
)
from spendbook.services.validation import reconcile_filter_dates

logger = logging.getLogger("spendbook.reducer")


def _add(state: State, action: AddExpense) -> State:
    expense = action.expense
    categories = state.categories
    if expense.category not in categories:
        categories = categories + (expense.category,)
    return state.model_copy(
        update={"expenses": (expense,) + state.expenses, "categories": categories}
    )


def _edit(state: State, action: EditExpense) -> State:
    changes = action.patch.changes()
    expenses = tuple(
        e.model_copy(update=changes) if e.id == action.id else e for e in state.expenses
    )
    return state.model_copy(update={"expenses": expenses})


def _delete(state: State, action: DeleteExpense) -> State:
    expenses = tuple(e for e in state.expenses if e.id != action.id)
    return state.model_copy(update={"expenses": expenses})


def _set_filters(state: State, action: SetFilters) -> State:
    filters = reconcile_filter_dates(state.filters, action.filters)
    return state.model_copy(update={"filters": filters})


def _set_sort(state: State, action: SetSort) -> State:
    return state.model_copy(update={"sort": action.sort})


def _add_category(state: State, action: AddCategory) -> State:
    name = action.category.strip()
    if not name or name in state.categories:
        return state
    return state.model_copy(update={"categories": state.categories + (name,)})


def _set_currency(state: State, action: SetCurrency) -> State:
    return state.model_copy(update={"currency": action.currency})


def _accepted_rate(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _set_fx(state: State, action: SetFx) -> State:
    rates = {}
    for currency in CURRENCIES:
        if currency == REFERENCE_CURRENCY:
            rates[currency] = 1.0
            continue
        incoming = action.rates.get(currency)
        if _accepted_rate(incoming):
            rates[currency] = float(incoming)  # type: ignore[arg-type]
        else:
            # keep the previous rate for this slot only
            rates[currency] = state.fx_pln.get(currency, 1.0)
    return state.model_copy(update={"fx_pln": rates, "fx_label": action.label})


def _replace_state(state: State, action: ReplaceState) -> State:
    return action.state


def _merge_state(state: State, action: MergeState) -> State:
    incoming = action.state
    categories = tuple(dict.fromkeys(state.categories + incoming.categories))

    seen = {e.id for e in state.expenses}
    added = []
    for expense in incoming.expenses:
        if expense.id in seen:
            continue
        seen.add(expense.id)
        added.append(expense)

    # currency, rates and label stay local; the import only contributes data
    return state.model_copy(
        update={"categories": categories, "expenses": state.expenses + tuple(added)}
    )


_HANDLERS: Dict[str, Callable[[State, object], State]] = {
    "add": _add,
    "edit": _edit,
    "delete": _delete,
    "setFilters": _set_filters,
    "setSort": _set_sort,
    "addCategory": _add_category,
    "setCurrency": _set_currency,
    "setFx": _set_fx,
    "replaceState": _replace_state,
    "mergeState": _merge_state,
}

_missing = {cls.model_fields["kind"].default for cls in ACTION_TYPES} - set(_HANDLERS)
if _missing:
    raise RuntimeError(f"reducer has no handler for action kinds: {sorted(_missing)}")


def reduce(state: State, action: object) -> State:
    kind = getattr(action, "kind", None)
    handler = _HANDLERS.get(kind) if isinstance(kind, str) else None
    if handler is None:
        logger.debug("ignoring unknown action kind %r", kind)
        return state
    return handler(state, action)

"""Ledger service: owns the current state and applies user operations.

Every mutation goes through `dispatch`, which runs the pure reducer, persists
the new state through the storage port and swaps the reference. Raw user input
is parsed and validated here before any action is built; problems come back as
`Err` values rather than exceptions.

Ids are produced by an injected ``id_factory`` so tests stay deterministic.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Literal, Mapping, Optional, Tuple
from uuid import uuid4

from spendbook.db.store import StoragePort, load_state, persist_state
from spendbook.models import (
    NO_RATES_LABEL,
    AddCategory,
    AddExpense,
    Currency,
    DeleteExpense,
    EditExpense,
    Expense,
    ExpenseDraft,
    ExpensePatch,
    FiltersPatch,
    MergeState,
    Rates,
    ReplaceState,
    SetCurrency,
    SetFilters,
    SetFx,
    SetSort,
    SortBy,
    State,
    Summary,
)
from spendbook.models.result import Err, Ok, Result
from spendbook.services.rates.base import RateProvider
from spendbook.services.rates.providers import StaticRateProvider
from spendbook.services.reducer import reduce
from spendbook.services.selectors import select_visible
from spendbook.services.serialization import deserialize, serialize
from spendbook.services.summary import summarize
from spendbook.services.validation import parse_draft, validate_draft

logger = logging.getLogger("spendbook.ledger")

ImportMode = Literal["replace", "merge"]


def _new_id() -> str:
    return str(uuid4())


class Ledger:
    def __init__(
        self,
        storage: StoragePort,
        key: str,
        rate_provider: RateProvider,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._storage = storage
        self._key = key
        self._rate_provider = rate_provider
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._state = load_state(storage, key)

    # State access ------------------------------------------------
    @property
    def state(self) -> State:
        return self._state

    def dispatch(self, action: object) -> State:
        with self._lock:
            state = reduce(self._state, action)
            persist_state(self._storage, self._key, state)
            self._state = state
        logger.debug("applied %s", getattr(action, "kind", action))
        return state

    def visible(self) -> Tuple[Expense, ...]:
        state = self._state
        return select_visible(state, state.filters)

    def summary(self) -> Summary:
        state = self._state
        return summarize(self.visible(), state.currency, state.fx_pln)

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._state.find_expense(expense_id)

    # Expenses ----------------------------------------------------
    def _checked_draft(self, raw: Mapping[str, object]) -> Result[ExpenseDraft]:
        parsed = parse_draft(raw)
        if not parsed.ok:
            return parsed
        issues = validate_draft(parsed.value)
        if issues:
            return Err("\n".join(str(i) for i in issues))
        return parsed

    def add_expense(self, raw: Mapping[str, object]) -> Result[Expense]:
        checked = self._checked_draft(raw)
        if not checked.ok:
            return checked
        expense = checked.value.with_id(self._id_factory())
        self.dispatch(AddExpense(expense=expense))
        logger.info("added expense", extra={"expense_id": expense.id})
        return Ok(expense)

    def edit_expense(self, expense_id: str, raw: Mapping[str, object]) -> Result[Expense]:
        if self.get_expense(expense_id) is None:
            return Err("expense to edit not found")
        checked = self._checked_draft(raw)
        if not checked.ok:
            return checked
        patch = ExpensePatch.from_draft(checked.value)
        state = self.dispatch(EditExpense(id=expense_id, patch=patch))
        logger.info("edited expense", extra={"expense_id": expense_id})
        return Ok(state.find_expense(expense_id))  # type: ignore[arg-type]

    def delete_expense(self, expense_id: str) -> Result[None]:
        if self.get_expense(expense_id) is None:
            return Err("expense to delete not found")
        self.dispatch(DeleteExpense(id=expense_id))
        logger.info("deleted expense", extra={"expense_id": expense_id})
        return Ok(None)

    def add_category(self, name: str) -> Result[Tuple[str, ...]]:
        if not name.strip():
            return Err("category name cannot be empty")
        state = self.dispatch(AddCategory(category=name))
        return Ok(state.categories)

    # View preferences --------------------------------------------
    def set_filters(self, patch: FiltersPatch) -> State:
        return self.dispatch(SetFilters(filters=patch))

    def set_sort(self, sort: SortBy) -> State:
        return self.dispatch(SetSort(sort=sort))

    def set_currency(self, currency: Currency) -> State:
        return self.dispatch(SetCurrency(currency=currency))

    # Rates -------------------------------------------------------
    def set_rates(self, rates: Mapping[Currency, object], label: str) -> State:
        return self.dispatch(SetFx(rates=dict(rates), label=label))

    def ensure_rates(self) -> State:
        """Load fallback rates when the state has never held real ones."""
        state = self._state
        if state.fx_label and state.fx_label != NO_RATES_LABEL:
            return state
        quote = StaticRateProvider().fetch()
        if not quote.ok:  # pragma: no cover - static provider always succeeds
            return state
        return self.set_rates(quote.value.rates, quote.value.label)

    def refresh_rates(self) -> Result[Rates]:
        quote = self._rate_provider.fetch()
        if not quote.ok:
            return quote
        state = self.set_rates(quote.value.rates, quote.value.label)
        return Ok(state.fx_pln)

    # Import / export ---------------------------------------------
    def export_json(self) -> str:
        return serialize(self._state)

    def parse_import(self, text: str) -> Result[State]:
        return deserialize(text)

    def apply_import(self, mode: ImportMode, incoming: State) -> State:
        if mode == "replace":
            action = ReplaceState(state=incoming)
        else:
            action = MergeState(state=incoming)
        state = self.dispatch(action)
        logger.info(
            "imported state (%s): %d expense(s) now stored", mode, len(state.expenses)
        )
        return state

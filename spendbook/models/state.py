from __future__ import annotations

from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    CURRENCIES,
    DEFAULT_CATEGORIES,
    NO_RATES_LABEL,
    REFERENCE_CURRENCY,
    Currency,
)
from .expense import Expense
from .text import Text

SortBy = Literal["date", "amount"]

# PLN per one unit of each currency.
Rates = Dict[Currency, float]


def default_rates() -> Rates:
    return {c: 1.0 for c in CURRENCIES}


class Filters(BaseModel):
    """Visible-list filters; both date bounds are inclusive ISO dates."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date_from: Optional[Text] = Field(None, alias="dateFrom")
    date_to: Optional[Text] = Field(None, alias="dateTo")
    category: Optional[Text] = None
    text: Text = ""


class FiltersPatch(BaseModel):
    """Partial filters update. Presence is tracked via ``model_fields_set``,
    so an explicit ``None`` clears a bound while an omitted field is kept."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date_from: Optional[Text] = Field(None, alias="dateFrom")
    date_to: Optional[Text] = Field(None, alias="dateTo")
    category: Optional[Text] = None
    text: Optional[Text] = None

    def changes(self) -> dict:
        changes = self.model_dump(exclude_unset=True)
        if changes.get("text", "") is None:
            changes["text"] = ""
        return changes


class State(BaseModel):
    """Aggregate root. Replaced wholesale on every transition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    expenses: Tuple[Expense, ...] = ()
    categories: Tuple[Text, ...] = ()
    currency: Currency = REFERENCE_CURRENCY
    filters: Filters = Filters()
    sort: SortBy = "date"
    fx_pln: Rates = Field(default_factory=default_rates, alias="fxPLN")
    fx_label: Text = Field(NO_RATES_LABEL, alias="fxLabel")

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)


def create_initial_state() -> State:
    return State(
        expenses=(),
        categories=DEFAULT_CATEGORIES,
        currency=REFERENCE_CURRENCY,
        filters=Filters(),
        sort="date",
        fx_pln=default_rates(),
        fx_label=NO_RATES_LABEL,
    )


class CategoryTotal(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    total: float


class MonthTotal(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str
    total: float


class Summary(BaseModel):
    """Derived totals in a target currency; never persisted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: float
    by_category: Tuple[CategoryTotal, ...] = Field((), alias="byCategory")
    monthly: Tuple[MonthTotal, ...] = ()

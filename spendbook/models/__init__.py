"""Pydantic domain models for the expense ledger."""

from .constants import (
    CURRENCIES,
    DEFAULT_CATEGORIES,
    NO_RATES_LABEL,
    REFERENCE_CURRENCY,
    Currency,
    is_currency,
)  # re-export
from .expense import Expense, ExpenseDraft, ExpensePatch
from .text import Text, scrub_surrogates
from .state import (
    CategoryTotal,
    Filters,
    FiltersPatch,
    MonthTotal,
    Rates,
    SortBy,
    State,
    Summary,
    create_initial_state,
    default_rates,
)
from .result import Err, Issue, Ok, Result
from .actions import (
    ACTION_TYPES,
    Action,
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
)

__all__ = [
    "CURRENCIES",
    "DEFAULT_CATEGORIES",
    "NO_RATES_LABEL",
    "REFERENCE_CURRENCY",
    "Currency",
    "is_currency",
    "Expense",
    "ExpenseDraft",
    "ExpensePatch",
    "Text",
    "scrub_surrogates",
    "CategoryTotal",
    "Filters",
    "FiltersPatch",
    "MonthTotal",
    "Rates",
    "SortBy",
    "State",
    "Summary",
    "create_initial_state",
    "default_rates",
    "Err",
    "Issue",
    "Ok",
    "Result",
    "ACTION_TYPES",
    "Action",
    "AddCategory",
    "AddExpense",
    "DeleteExpense",
    "EditExpense",
    "MergeState",
    "ReplaceState",
    "SetCurrency",
    "SetFilters",
    "SetFx",
    "SetSort",
]

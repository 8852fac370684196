"""State transition requests consumed by `spendbook.services.reducer.reduce`."""

from __future__ import annotations

from typing import Annotated, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import Currency
from .expense import Expense, ExpensePatch
from .state import FiltersPatch, SortBy, State
from .text import Text


class _ActionBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddExpense(_ActionBase):
    kind: Literal["add"] = "add"
    expense: Expense


class EditExpense(_ActionBase):
    kind: Literal["edit"] = "edit"
    id: str
    patch: ExpensePatch


class DeleteExpense(_ActionBase):
    kind: Literal["delete"] = "delete"
    id: str


class SetFilters(_ActionBase):
    kind: Literal["setFilters"] = "setFilters"
    filters: FiltersPatch


class SetSort(_ActionBase):
    kind: Literal["setSort"] = "setSort"
    sort: SortBy


class AddCategory(_ActionBase):
    kind: Literal["addCategory"] = "addCategory"
    category: Text


class SetCurrency(_ActionBase):
    kind: Literal["setCurrency"] = "setCurrency"
    currency: Currency


class SetFx(_ActionBase):
    kind: Literal["setFx"] = "setFx"
    # Raw values: the reducer decides per currency whether to accept them.
    rates: Dict[Currency, object]
    label: Text


class ReplaceState(_ActionBase):
    kind: Literal["replaceState"] = "replaceState"
    state: State


class MergeState(_ActionBase):
    kind: Literal["mergeState"] = "mergeState"
    state: State


Action = Annotated[
    Union[
        AddExpense,
        EditExpense,
        DeleteExpense,
        SetFilters,
        SetSort,
        AddCategory,
        SetCurrency,
        SetFx,
        ReplaceState,
        MergeState,
    ],
    Field(discriminator="kind"),
]

ACTION_TYPES = (
    AddExpense,
    EditExpense,
    DeleteExpense,
    SetFilters,
    SetSort,
    AddCategory,
    SetCurrency,
    SetFx,
    ReplaceState,
    MergeState,
)

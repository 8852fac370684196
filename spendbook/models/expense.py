from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import Currency
from .text import Text


class ExpenseDraft(BaseModel):
    """An expense without an identifier, pending validation and id assignment.

    Currency is kept as the raw code here; `validate_draft` checks it and
    `with_id` narrows it to `Currency`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    amount: float
    currency: Text
    category: Text
    date_iso: Text = Field(..., alias="dateISO")
    note: Text = ""

    def with_id(self, expense_id: str) -> "Expense":
        return Expense(id=expense_id, **self.model_dump())


class Expense(ExpenseDraft):
    id: Text
    currency: Currency

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("amount must be a finite number greater than 0")
        return v


class ExpensePatch(BaseModel):
    """Partial update over any expense field except the id.

    Only fields explicitly provided are applied; use
    ``model_dump(exclude_unset=True)`` to read them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    amount: Optional[float] = None
    currency: Optional[Currency] = None
    category: Optional[Text] = None
    date_iso: Optional[Text] = Field(None, alias="dateISO")
    note: Optional[Text] = None

    @classmethod
    def from_draft(cls, draft: ExpenseDraft) -> "ExpensePatch":
        return cls(**draft.model_dump())

    def changes(self) -> dict:
        return {
            k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None
        }

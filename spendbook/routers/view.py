"""View preferences: filters, sort mode and the summary (base) currency.

Filter date ranges are never rejected; an inverted range is corrected by the
reducer, so the response always reflects the stored (reconciled) filters.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from spendbook.models import Currency, Filters, FiltersPatch, SortBy, State
from spendbook.routers.deps import get_ledger
from spendbook.services.ledger import Ledger

router = APIRouter(prefix="/view", tags=["view"])


class ViewOut(BaseModel):
    filters: Filters
    sort: SortBy
    currency: Currency

    @classmethod
    def from_state(cls, state: State) -> "ViewOut":
        return cls(filters=state.filters, sort=state.sort, currency=state.currency)


class SortIn(BaseModel):
    sort: SortBy


class CurrencyIn(BaseModel):
    currency: Currency


@router.get("", response_model=ViewOut, summary="Current filters, sort and base currency")
async def get_view(ledger: Ledger = Depends(get_ledger)):
    return ViewOut.from_state(ledger.state)


@router.patch("/filters", response_model=ViewOut, summary="Update filters (partial)")
def patch_filters(payload: FiltersPatch, ledger: Ledger = Depends(get_ledger)):
    return ViewOut.from_state(ledger.set_filters(payload))


@router.put("/sort", response_model=ViewOut, summary="Set sort mode")
def put_sort(payload: SortIn, ledger: Ledger = Depends(get_ledger)):
    return ViewOut.from_state(ledger.set_sort(payload.sort))


@router.put("/currency", response_model=ViewOut, summary="Set base currency for summaries")
def put_currency(payload: CurrencyIn, ledger: Ledger = Depends(get_ledger)):
    return ViewOut.from_state(ledger.set_currency(payload.currency))

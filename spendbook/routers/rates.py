"""Rates router.

Endpoints:
    - GET /rates          -> current table (PLN per unit) and its label
    - PUT /rates          -> manual table; non-positive entries keep the old rate
    - POST /rates/refresh -> fetch from the configured provider
"""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from spendbook.models import Currency, State
from spendbook.routers.deps import get_ledger
from spendbook.services.ledger import Ledger

router = APIRouter(prefix="/rates", tags=["rates"])

MANUAL_LABEL = "manual"


class RatesOut(BaseModel):
    rates: Dict[Currency, float]
    label: str

    @classmethod
    def from_state(cls, state: State) -> "RatesOut":
        return cls(rates=state.fx_pln, label=state.fx_label)


class RatesIn(BaseModel):
    rates: Dict[Currency, float] = Field(..., description="PLN per 1 unit of currency")
    label: Optional[str] = None


@router.get("", response_model=RatesOut, summary="Current exchange rates")
async def get_rates(ledger: Ledger = Depends(get_ledger)):
    return RatesOut.from_state(ledger.state)


@router.put("", response_model=RatesOut, summary="Set rates manually")
def put_rates(payload: RatesIn, ledger: Ledger = Depends(get_ledger)):
    state = ledger.set_rates(payload.rates, payload.label or MANUAL_LABEL)
    return RatesOut.from_state(state)


@router.post("/refresh", response_model=RatesOut, summary="Refresh rates from provider")
def refresh_rates(ledger: Ledger = Depends(get_ledger)):
    result = ledger.refresh_rates()
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.error)
    return RatesOut.from_state(ledger.state)

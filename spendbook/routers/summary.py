from fastapi import APIRouter, Depends
from pydantic import BaseModel

from spendbook.models import Currency, Summary
from spendbook.routers.deps import get_ledger
from spendbook.services.ledger import Ledger

router = APIRouter(prefix="/summary", tags=["summary"])


class SummaryOut(BaseModel):
    currency: Currency
    rates_label: str
    summary: Summary


@router.get("", response_model=SummaryOut, summary="Totals of visible expenses in base currency")
async def get_summary(ledger: Ledger = Depends(get_ledger)):
    state = ledger.state
    return SummaryOut(
        currency=state.currency, rates_label=state.fx_label, summary=ledger.summary()
    )

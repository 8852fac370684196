from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from spendbook.models import Expense
from spendbook.routers.deps import get_ledger
from spendbook.services.ledger import Ledger

router = APIRouter(prefix="/expenses", tags=["expenses"])


# Request models ---------------------------------------------------
class ExpenseFormIn(BaseModel):
    """Raw form fields; parsing and validation happen in the ledger."""

    amount: Optional[Union[float, str]] = None
    currency: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None
    note: Optional[str] = None


# Helpers ----------------------------------------------------------
def _require_expense(ledger: Ledger, expense_id: str) -> Expense:
    expense = ledger.get_expense(expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail="expense not found")
    return expense


# Routes -----------------------------------------------------------
@router.get(
    "/", response_model=List[Expense], summary="Visible expenses (current filters & sort)"
)
async def list_visible_expenses(ledger: Ledger = Depends(get_ledger)):
    return list(ledger.visible())


@router.get("/{expense_id}", response_model=Expense, summary="Get one expense")
async def get_expense(expense_id: str, ledger: Ledger = Depends(get_ledger)):
    return _require_expense(ledger, expense_id)


@router.post("/", response_model=Expense, status_code=201, summary="Create an expense")
def create_expense(payload: ExpenseFormIn, ledger: Ledger = Depends(get_ledger)):
    result = ledger.add_expense(payload.model_dump())
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return result.value


@router.put("/{expense_id}", response_model=Expense, summary="Replace an expense's fields")
def update_expense(
    expense_id: str, payload: ExpenseFormIn, ledger: Ledger = Depends(get_ledger)
):
    _require_expense(ledger, expense_id)
    result = ledger.edit_expense(expense_id, payload.model_dump())
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return result.value


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
def delete_expense(expense_id: str, ledger: Ledger = Depends(get_ledger)):
    _require_expense(ledger, expense_id)
    result = ledger.delete_expense(expense_id)
    if not result.ok:
        raise HTTPException(status_code=404, detail=result.error)
    return Response(status_code=204)

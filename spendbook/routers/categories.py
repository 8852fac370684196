from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from spendbook.routers.deps import get_ledger
from spendbook.services.ledger import Ledger

router = APIRouter(prefix="/categories", tags=["categories"])


class CategoryIn(BaseModel):
    name: str = Field(..., description="Category name; trimmed, ignored if already known")


@router.get("/", response_model=List[str], summary="Known categories in insertion order")
async def list_categories(ledger: Ledger = Depends(get_ledger)):
    return list(ledger.state.categories)


@router.post("/", response_model=List[str], summary="Add a category")
def add_category(payload: CategoryIn, ledger: Ledger = Depends(get_ledger)):
    result = ledger.add_category(payload.name)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return list(result.value)

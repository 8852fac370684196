from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel

from spendbook.routers.deps import get_ledger
from spendbook.services.ledger import Ledger

router = APIRouter(prefix="/transfer", tags=["transfer"])

EXPORT_FILENAME = "expenses.json"


class ImportOut(BaseModel):
    mode: Literal["replace", "merge"]
    expenses: int
    categories: int


@router.get("/export", summary="Download the whole state as JSON")
async def export_state(ledger: Ledger = Depends(get_ledger)):
    return Response(
        content=ledger.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/import", response_model=ImportOut, summary="Import a JSON state document")
async def import_state(
    request: Request,
    mode: Literal["replace", "merge"] = Query(
        "merge", description="replace: substitute everything; merge: add new expenses & categories"
    ),
    ledger: Ledger = Depends(get_ledger),
):
    body = await request.body()
    parsed = ledger.parse_import(body.decode("utf-8", errors="replace"))
    if not parsed.ok:
        raise HTTPException(status_code=400, detail=parsed.error)
    state = ledger.apply_import(mode, parsed.value)
    return ImportOut(
        mode=mode, expenses=len(state.expenses), categories=len(state.categories)
    )

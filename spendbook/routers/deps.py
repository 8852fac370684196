from fastapi import Request

from spendbook.services.ledger import Ledger


def get_ledger(request: Request) -> Ledger:
    return request.app.state.ledger

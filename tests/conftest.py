from __future__ import annotations

import itertools
import os
import tempfile

# Establish isolated settings BEFORE anything imports get_settings
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="spendbook_test_"))
os.environ.setdefault("EXCHANGE_RATE_PROVIDER", "static")
os.environ.setdefault("REFRESH_RATES_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient

from spendbook.core.config import Settings
from spendbook.db.store import MemoryStorage
from spendbook.main import create_app
from spendbook.models import Currency, Expense, State, create_initial_state
from spendbook.models.result import Err, Ok, Result
from spendbook.services.ledger import Ledger
from spendbook.services.rates.base import FxQuote, RateProvider

STATE_KEY = "test-state"


def make_expense(
    id: str = "e1",
    amount: float = 10.0,
    currency: Currency = Currency.PLN,
    category: str = "Food",
    date_iso: str = "2024-01-15",
    note: str = "",
) -> Expense:
    return Expense(
        id=id,
        amount=amount,
        currency=currency,
        category=category,
        date_iso=date_iso,
        note=note,
    )


def state_with(*expenses: Expense, **changes) -> State:
    base = create_initial_state()
    return base.model_copy(update={"expenses": tuple(expenses), **changes})


class StubRateProvider(RateProvider):
    def __init__(self, result: Result[FxQuote] | None = None):
        self.result = result or Ok(
            FxQuote(
                rates={Currency.PLN: 1.0, Currency.EUR: 4.25, Currency.USD: 4.0},
                label="NBP 2024-03-01",
            )
        )
        self.calls = 0

    def fetch(self) -> Result[FxQuote]:
        self.calls += 1
        return self.result


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def provider() -> StubRateProvider:
    return StubRateProvider()


@pytest.fixture
def failing_provider() -> StubRateProvider:
    return StubRateProvider(Err("could not fetch exchange rates (network error)"))


@pytest.fixture
def ledger(storage, provider) -> Ledger:
    counter = itertools.count(1)
    return Ledger(storage, STATE_KEY, provider, id_factory=lambda: f"id-{next(counter)}")


@pytest.fixture
def client(ledger, tmp_path) -> TestClient:
    settings = Settings(
        data_dir=tmp_path,
        exchange_rate_provider="static",
        refresh_rates_on_startup=False,
    )
    settings.init_post_load()
    app = create_app(settings_override=settings, ledger=ledger)
    return TestClient(app)

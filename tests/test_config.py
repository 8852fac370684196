from __future__ import annotations

import json
import logging

import pytest

from spendbook.core.config import Settings
from spendbook.core.logging import JsonFormatter, RequestIdFilter, request_id_ctx


def test_init_post_load_creates_data_dir(tmp_path):
    settings = Settings(data_dir=tmp_path / "nested" / "data", exchange_rate_provider="static")
    settings.init_post_load()
    assert settings.data_dir.is_dir()


def test_unknown_provider_rejected(tmp_path):
    settings = Settings(data_dir=tmp_path, exchange_rate_provider="ecb")
    with pytest.raises(ValueError):
        settings.init_post_load()


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("STATE_KEY", "my-ledger")
    monkeypatch.setenv("EXCHANGE_RATE_PROVIDER", "static")
    settings = Settings(data_dir=tmp_path)
    assert settings.state_key == "my-ledger"
    assert settings.exchange_rate_provider == "static"


def test_json_formatter_includes_request_id():
    record = logging.LogRecord("spendbook.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    token = request_id_ctx.set("req-1")
    try:
        RequestIdFilter().filter(record)
    finally:
        request_id_ctx.reset(token)
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "hello x"
    assert payload["request_id"] == "req-1"
    assert payload["level"] == "INFO"


def test_json_formatter_collects_extra_fields():
    logger = logging.getLogger("spendbook.test")
    record = logger.makeRecord(
        logger.name, logging.INFO, __file__, 1, "added expense", (), None, extra={"expense_id": "e1"}
    )
    payload = json.loads(JsonFormatter(app_name="Spendbook").format(record))
    assert payload["context"] == {"expense_id": "e1"}
    assert payload["app"] == "Spendbook"

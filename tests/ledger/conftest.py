import os
from uuid import uuid4

import pytest


@pytest.fixture(scope="session")
def _ledger_domain(request):
    """Initialize the ledger domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from ledger.domain import ledger

    ledger.init()
    return ledger


@pytest.fixture(scope="session", autouse=True)
def setup_db(_ledger_domain):
    from ledger.domain import ledger
    from ledger.utils.db import drop_db, setup_db

    setup_db(ledger)

    yield

    drop_db(ledger)


@pytest.fixture(autouse=True)
def run_around_tests(_ledger_domain, monkeypatch):
    """Push domain context before each test, cleanup after."""
    from ledger.costing import reset_costing_strategy
    from ledger.shared.serialization import reset_item_locks

    monkeypatch.delenv("COSTING_STRATEGY", raising=False)
    reset_costing_strategy()
    ctx = _ledger_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
    reset_costing_strategy()
    reset_item_locks()


@pytest.fixture()
def owner_id():
    return f"owner-{uuid4().hex[:8]}"


@pytest.fixture()
def fifo_costing(monkeypatch):
    """Switch the deployment to lot-consumption costing for one test."""
    from ledger.costing import reset_costing_strategy

    monkeypatch.setenv("COSTING_STRATEGY", "fifo")
    reset_costing_strategy()
    yield
    reset_costing_strategy()


@pytest.fixture()
def custom_settings(_ledger_domain):
    """Override ``[custom]`` ledger settings for one test."""
    custom = _ledger_domain.config["custom"]
    original = dict(custom)

    def _apply(**values):
        from ledger.costing import reset_costing_strategy

        custom.update(values)
        reset_costing_strategy()

    yield _apply

    custom.clear()
    custom.update(original)

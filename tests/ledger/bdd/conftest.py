"""Shared BDD fixtures and step definitions for the ledger."""

from decimal import Decimal

import pytest
from ledger import gateway
from ledger.sale.sale import Sale
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def ledger_state():
    """Ids created by the steps of one scenario."""
    return {"lots": [], "sale_id": None, "simulation": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an item "{name}"'), target_fixture="item_id")
def an_item(owner_id, name):
    return gateway.create_item(owner_id, name)


@given(parsers.cfparse('a lot of {quantity:d} units at {cost} {currency} bought on "{day}"'))
def a_lot(owner_id, item_id, ledger_state, quantity, cost, currency, day):
    ledger_state["lots"].append(gateway.add_lot(owner_id, item_id, quantity, cost, currency, bought_at=day))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the sale profit is {amount}"))
def sale_profit_is(ledger_state, amount):
    sale = current_domain.repository_for(Sale).get(ledger_state["sale_id"])
    assert sale.profit_amount == Decimal(amount)

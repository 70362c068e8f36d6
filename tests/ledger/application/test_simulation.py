"""Application tests for the FIFO what-if simulator."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from ledger import gateway
from ledger.lot.queries import lots_for_item
from ledger.simulation.simulator import simulate
from protean.exceptions import ObjectNotFoundError, ValidationError

T1 = datetime(2024, 1, 1, tzinfo=UTC)
T2 = datetime(2024, 2, 1, tzinfo=UTC)


@pytest.fixture()
def item_id(owner_id):
    return gateway.create_item(owner_id, "Magic Egg")


class TestSimulate:
    def test_single_lot(self, owner_id, item_id):
        gateway.add_lot(owner_id, item_id, 200, "1.5", "WL")
        result = simulate(owner_id, item_id, 100, "2.0")

        assert result.simulated_cogs == Decimal("150")
        assert result.projected_revenue == Decimal("200")
        assert result.projected_profit == Decimal("50")
        assert [(row.qty_used, row.unit_cost) for row in result.breakdown] == [(100, Decimal("1.5"))]
        assert result.insufficient is False

    def test_spans_lots_oldest_first(self, owner_id, item_id):
        second = gateway.add_lot(owner_id, item_id, 100, "2.0", "WL", bought_at=T2)
        first = gateway.add_lot(owner_id, item_id, 100, "1.0", "WL", bought_at=T1)

        result = simulate(owner_id, item_id, 150, "3.0")

        assert result.simulated_cogs == Decimal("200")
        assert [(row.lot_id, row.qty_used) for row in result.breakdown] == [(first, 100), (second, 50)]
        assert [row.bought_at for row in result.breakdown] == sorted(row.bought_at for row in result.breakdown)

    def test_exactly_available(self, owner_id, item_id):
        gateway.add_lot(owner_id, item_id, 3, "1", "WL", bought_at=T1)
        gateway.add_lot(owner_id, item_id, 4, "2", "WL", bought_at=T2)
        result = simulate(owner_id, item_id, 7, "5")
        assert result.insufficient is False
        assert sum(row.qty_used for row in result.breakdown) == 7
        assert result.simulated_cogs == Decimal("11")

    def test_one_more_than_available(self, owner_id, item_id):
        gateway.add_lot(owner_id, item_id, 7, "1", "WL")
        result = simulate(owner_id, item_id, 8, "5")
        assert result.insufficient is True
        assert result.available == 7
        assert result.simulated_cogs == 0
        assert result.projected_profit == 0
        assert result.breakdown == ()

    def test_ties_are_deterministic(self, owner_id, item_id):
        ids = [gateway.add_lot(owner_id, item_id, 1, str(cost), "WL", bought_at=T1) for cost in (3, 1, 2)]
        first = simulate(owner_id, item_id, 3, "10")
        second = simulate(owner_id, item_id, 3, "10")
        assert [row.lot_id for row in first.breakdown] == ids
        assert first == second

    def test_never_mutates_lots(self, owner_id, item_id):
        gateway.add_lot(owner_id, item_id, 10, "1", "WL")
        simulate(owner_id, item_id, 10, "2")
        assert [lot.remaining_qty for lot in lots_for_item(owner_id, item_id)] == [10]

    def test_invalid_inputs(self, owner_id, item_id):
        with pytest.raises(ValidationError):
            simulate(owner_id, item_id, 0, "1")
        with pytest.raises(ValidationError):
            simulate(owner_id, item_id, 1, "0")

    def test_unknown_item(self, owner_id):
        with pytest.raises(ObjectNotFoundError):
            simulate(owner_id, "missing", 1, "1")

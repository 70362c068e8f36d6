"""Records of one owner are invisible to another."""

import pytest
from ledger import gateway
from ledger.aggregation.lifetime import totals_for_item
from ledger.item.management import list_items
from ledger.sale.queries import list_sales
from protean.exceptions import ObjectNotFoundError


class TestOwnerIsolation:
    def test_reads_and_writes_are_scoped(self, owner_id):
        intruder = f"{owner_id}-intruder"
        item_id = gateway.create_item(owner_id, "Magic Egg")
        gateway.add_lot(owner_id, item_id, 5, "1", "WL")
        sale_id = gateway.record_sale(owner_id, item_id, 1, "2", "WL")

        assert list_items(intruder) == []
        assert list_sales(intruder) == []
        with pytest.raises(ObjectNotFoundError):
            totals_for_item(intruder, item_id)
        with pytest.raises(ObjectNotFoundError):
            gateway.add_lot(intruder, item_id, 5, "1", "WL")
        with pytest.raises(ObjectNotFoundError):
            gateway.update_sale(intruder, sale_id, quantity=1)

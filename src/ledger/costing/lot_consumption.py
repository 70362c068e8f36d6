"""Lot-consumption costing: sales draw down the oldest open lots first."""

from protean.utils.globals import current_domain

from ledger.costing.fifo import allocate_fifo
from ledger.costing.port import CostingStrategy, CostQuote
from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry
from ledger.lot.repository import fifo_key
from ledger.shared.numbers import ZERO
from ledger.shared.ownership import load_owned


class LotConsumptionCosting(CostingStrategy):
    """Stock is the sum of open lots; each sale decrements and closes lots."""

    name = "fifo"

    def price(self, owner_id, item_id, quantity, currency_unit, replacing=None):
        item = load_owned(Item, item_id, owner_id)
        lots = {str(lot.id): lot for lot in current_domain.repository_for(InventoryEntry).for_item(owner_id, item.id)}

        touched = {}
        if replacing is not None:
            for lot in self.release(replacing):
                lots[str(lot.id)] = lot
                touched[str(lot.id)] = lot

        if not lots:
            return self._unstocked_quote(owner_id, item_id, quantity)

        ordered = sorted(lots.values(), key=fifo_key)
        available = sum(lot.remaining_qty for lot in ordered)
        if quantity > available:
            self._reject(owner_id, item_id, available, quantity)

        allocations, _ = allocate_fifo(ordered, quantity)
        for allocation in allocations:
            lot = lots[allocation.lot_id]
            lot.consume(allocation.qty_used)
            touched[allocation.lot_id] = lot

        return CostQuote(
            method=self.name,
            quantity=quantity,
            total_cost=sum((a.cost_contribution for a in allocations), ZERO),
            allocations=tuple(allocations),
            currency_consistent=all(lots[a.lot_id].currency_unit == currency_unit for a in allocations),
            touched_lots=tuple(touched.values()),
        )

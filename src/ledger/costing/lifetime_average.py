"""Lifetime-average costing: every unit costs the item's blended purchase price."""

from ledger.aggregation.lifetime import totals_for_item
from ledger.costing.port import CostAllocation, CostingStrategy, CostQuote
from ledger.sale.sale import LIFETIME_AVERAGE_MARKER


class LifetimeAverageCosting(CostingStrategy):
    """Stock is lifetime purchased minus lifetime sold; lots are never decremented."""

    name = "lifetime-average"

    def price(self, owner_id, item_id, quantity, currency_unit, replacing=None):
        totals = totals_for_item(owner_id, item_id)
        released = tuple(self.release(replacing)) if replacing is not None else ()

        if not totals.has_history:
            return self._unstocked_quote(owner_id, item_id, quantity)

        available = totals.remaining_qty
        if replacing is not None:
            available += replacing.quantity_sold
        if quantity > available:
            self._reject(owner_id, item_id, max(available, 0), quantity)

        total_cost = totals.purchased_cost * quantity / totals.purchased_qty
        return CostQuote(
            method=self.name,
            quantity=quantity,
            total_cost=total_cost,
            allocations=(
                CostAllocation(lot_id=LIFETIME_AVERAGE_MARKER, unit_cost=totals.avg_cost, qty_used=quantity),
            ),
            currency_consistent=totals.currency == currency_unit,
            touched_lots=released,
        )

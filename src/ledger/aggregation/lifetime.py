"""Lifetime totals per item, recomputed from lots and sales on every call.

Nothing here is cached: a stale total would let a sale pass the stock check
against units that are already gone.
"""

from dataclasses import dataclass
from decimal import Decimal

from protean.utils.globals import current_domain

from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry
from ledger.sale.sale import Sale
from ledger.shared.numbers import ZERO
from ledger.shared.ownership import load_owned


@dataclass(frozen=True)
class ItemTotals:
    item_id: str
    purchased_qty: int
    purchased_cost: Decimal
    sold_qty: int
    remaining_qty: int
    avg_cost: Decimal
    currency: str | None  # First lot's currency; lots are not converted

    @property
    def has_history(self) -> bool:
        return self.purchased_qty > 0


@dataclass(frozen=True)
class ProfitSummary:
    item_id: str
    revenue: Decimal
    cost: Decimal
    profit: Decimal
    margin_pct: Decimal


def totals_for_item(owner_id, item_id) -> ItemTotals:
    item = load_owned(Item, item_id, owner_id)
    lots = current_domain.repository_for(InventoryEntry).for_item(owner_id, item.id)
    sales = current_domain.repository_for(Sale).for_item(owner_id, item.id)
    return compute_totals(str(item.id), lots, sales)


def compute_totals(item_id, lots, sales) -> ItemTotals:
    """Totals over already-loaded records. ``lots`` must be in FIFO order."""
    purchased_qty = sum(lot.quantity_bought for lot in lots)
    purchased_cost = sum((lot.unit_cost_amount * lot.quantity_bought for lot in lots), ZERO)
    sold_qty = sum(sale.quantity_sold for sale in sales)
    return ItemTotals(
        item_id=item_id,
        purchased_qty=purchased_qty,
        purchased_cost=purchased_cost,
        sold_qty=sold_qty,
        remaining_qty=purchased_qty - sold_qty,
        avg_cost=purchased_cost / purchased_qty if purchased_qty else ZERO,
        currency=lots[0].currency_unit if lots else None,
    )


def profit_summary_for_item(owner_id, item_id) -> ProfitSummary:
    """Revenue against the lifetime cost of everything bought, not cost of units sold."""
    item = load_owned(Item, item_id, owner_id)
    sales = current_domain.repository_for(Sale).for_item(owner_id, item.id)
    totals = totals_for_item(owner_id, item.id)

    revenue = sum((sale.amount for sale in sales), ZERO)
    cost = totals.purchased_cost
    profit = revenue - cost
    return ProfitSummary(
        item_id=str(item.id),
        revenue=revenue,
        cost=cost,
        profit=profit,
        margin_pct=profit / revenue * 100 if revenue else ZERO,
    )

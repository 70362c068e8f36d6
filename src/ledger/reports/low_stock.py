"""Low-stock report: items that are running out but not yet gone."""

from collections import defaultdict
from dataclasses import dataclass

from protean.utils.globals import current_domain

from ledger.aggregation.lifetime import compute_totals
from ledger.category.category import Category
from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry
from ledger.lot.repository import fifo_key
from ledger.sale.sale import Sale
from ledger.settings import ledger_setting


@dataclass(frozen=True)
class LowStockRow:
    item_id: str
    item_name: str
    category_id: str
    category_name: str | None
    remaining_qty: int
    threshold: int


def records_by_item(owner_id):
    """Group an owner's lots (FIFO order) and sales by item id."""
    lots = defaultdict(list)
    for lot in sorted(current_domain.repository_for(InventoryEntry).for_owner(owner_id), key=fifo_key):
        lots[str(lot.item_id)].append(lot)
    sales = defaultdict(list)
    for sale in current_domain.repository_for(Sale).for_owner(owner_id):
        sales[str(sale.item_id)].append(sale)
    return lots, sales


def low_stock_items(owner_id) -> list[LowStockRow]:
    """Items with ``0 < remaining <= threshold``, lowest stock first.

    The threshold is the item's own, or the global ``low_stock_threshold``.
    """
    default_threshold = int(ledger_setting("low_stock_threshold"))
    categories = {str(c.id): c.name for c in current_domain.repository_for(Category).for_owner(owner_id)}
    lots, sales = records_by_item(owner_id)

    rows = []
    for item in current_domain.repository_for(Item).for_owner(owner_id):
        key = str(item.id)
        totals = compute_totals(key, lots[key], sales[key])
        threshold = item.low_stock_threshold if item.low_stock_threshold is not None else default_threshold
        if 0 < totals.remaining_qty <= threshold:
            rows.append(
                LowStockRow(
                    item_id=key,
                    item_name=item.name,
                    category_id=str(item.default_category_id),
                    category_name=categories.get(str(item.default_category_id)),
                    remaining_qty=totals.remaining_qty,
                    threshold=threshold,
                )
            )
    return sorted(rows, key=lambda r: (r.remaining_qty, r.item_name.lower()))

"""CSV exports of an owner's lots and sales."""

from protean.utils.globals import current_domain

from ledger.bulk.templates import LOT_COLUMNS, SALE_COLUMNS, iso_date, write_csv
from ledger.category.category import Category
from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry
from ledger.lot.repository import fifo_key
from ledger.sale.sale import Sale
from ledger.shared.timestamps import as_utc


def export_lots_csv(owner_id) -> str:
    categories = {str(c.id): c.name for c in current_domain.repository_for(Category).for_owner(owner_id)}
    lots = sorted(current_domain.repository_for(InventoryEntry).for_owner(owner_id), key=fifo_key)
    rows = [
        {
            "item_name": lot.snapshot_name,
            "category": categories.get(str(lot.snapshot_category_id), ""),
            "quantity": lot.quantity_bought,
            "unit_cost": lot.unit_cost,
            "currency": lot.currency_unit,
            "notes": lot.notes or "",
            "bought_at": iso_date(as_utc(lot.bought_at)),
        }
        for lot in lots
    ]
    return write_csv(LOT_COLUMNS, rows)


def export_sales_csv(owner_id) -> str:
    items = {str(i.id): i.name for i in current_domain.repository_for(Item).for_owner(owner_id)}
    rows = [
        {
            "item_name": items.get(str(sale.item_id), "Unknown"),
            "quantity_sold": sale.quantity_sold,
            "sale_price": sale.amount_gained,
            "currency": sale.currency_unit,
            "notes": sale.notes or "",
            "sold_at": iso_date(as_utc(sale.sold_at)),
        }
        for sale in current_domain.repository_for(Sale).for_owner(owner_id)
    ]
    return write_csv(SALE_COLUMNS, rows)

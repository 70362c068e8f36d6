"""Write entry points shared by the HTTP routes and CSV import.

Each function checks its quantities, builds the command and processes it
synchronously, returning whatever the handler returns (the new id for
creates). Writes that can move an item's stock figures hold that item's lock
until the unit of work has committed, so two sales cannot both pass the
stock check against the same units.
"""

from enum import Enum

from protean.utils.globals import current_domain

from ledger.category.management import CreateCategory, DeleteCategory, RenameCategory
from ledger.item.management import CreateItem, DeleteItem, UpdateItem
from ledger.lot.lot import InventoryEntry
from ledger.lot.purchase import AddLot
from ledger.lot.removal import DeleteLot
from ledger.lot.revision import UpdateLot
from ledger.sale.recording import RecordSale
from ledger.sale.removal import DeleteSale
from ledger.sale.revision import UpdateSale
from ledger.sale.sale import Sale
from ledger.shared.numbers import money_text, require_non_negative, require_positive, require_quantity
from ledger.shared.ownership import load_owned
from ledger.shared.serialization import item_lock
from ledger.shared.timestamps import as_utc


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _currency(value):
    return value.value if isinstance(value, Enum) else value


def _optional(value, convert, *args):
    return None if value is None else convert(value, *args)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
def create_category(owner_id, name):
    return _process(CreateCategory(owner_id=owner_id, name=name))


def rename_category(owner_id, category_id, name):
    return _process(RenameCategory(owner_id=owner_id, category_id=category_id, name=name))


def delete_category(owner_id, category_id):
    return _process(DeleteCategory(owner_id=owner_id, category_id=category_id))


def create_item(owner_id, name, category_id=None, image_url=None, low_stock_threshold=None):
    return _process(
        CreateItem(
            owner_id=owner_id,
            name=name,
            category_id=category_id,
            image_url=image_url,
            low_stock_threshold=low_stock_threshold,
        )
    )


def update_item(owner_id, item_id, name=None, category_id=None, image_url=None, low_stock_threshold=None):
    return _process(
        UpdateItem(
            owner_id=owner_id,
            item_id=item_id,
            name=name,
            category_id=category_id,
            image_url=image_url,
            low_stock_threshold=low_stock_threshold,
        )
    )


def delete_item(owner_id, item_id):
    with item_lock(owner_id, item_id):
        return _process(DeleteItem(owner_id=owner_id, item_id=item_id))


# ---------------------------------------------------------------------------
# Lots
# ---------------------------------------------------------------------------
def add_lot(owner_id, item_id, quantity, unit_cost, currency_unit, bought_at=None, notes=None):
    quantity = require_quantity(quantity)
    cost = require_non_negative(unit_cost, "unit_cost")
    with item_lock(owner_id, item_id):
        return _process(
            AddLot(
                owner_id=owner_id,
                item_id=item_id,
                quantity=quantity,
                unit_cost=money_text(cost),
                currency_unit=_currency(currency_unit),
                bought_at=as_utc(bought_at),
                notes=notes,
            )
        )


def update_lot(owner_id, lot_id, quantity=None, unit_cost=None, notes=None, bought_at=None):
    quantity = _optional(quantity, require_quantity)
    cost = _optional(unit_cost, require_non_negative, "unit_cost")
    lot = load_owned(InventoryEntry, lot_id, owner_id)
    with item_lock(owner_id, lot.item_id):
        return _process(
            UpdateLot(
                owner_id=owner_id,
                lot_id=lot_id,
                quantity=quantity,
                unit_cost=None if cost is None else money_text(cost),
                notes=notes,
                bought_at=as_utc(bought_at),
            )
        )


def delete_lot(owner_id, lot_id):
    lot = load_owned(InventoryEntry, lot_id, owner_id)
    with item_lock(owner_id, lot.item_id):
        return _process(DeleteLot(owner_id=owner_id, lot_id=lot_id))


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------
def record_sale(owner_id, item_id, quantity, amount_gained, currency_unit, sold_at=None, notes=None):
    quantity = require_quantity(quantity)
    amount = require_positive(amount_gained, "amount_gained")
    with item_lock(owner_id, item_id):
        return _process(
            RecordSale(
                owner_id=owner_id,
                item_id=item_id,
                quantity=quantity,
                amount_gained=money_text(amount),
                currency_unit=_currency(currency_unit),
                sold_at=as_utc(sold_at),
                notes=notes,
            )
        )


def update_sale(owner_id, sale_id, quantity=None, amount_gained=None, notes=None):
    quantity = _optional(quantity, require_quantity)
    amount = _optional(amount_gained, require_positive, "amount_gained")
    sale = load_owned(Sale, sale_id, owner_id)
    with item_lock(owner_id, sale.item_id):
        return _process(
            UpdateSale(
                owner_id=owner_id,
                sale_id=sale_id,
                quantity=quantity,
                amount_gained=None if amount is None else money_text(amount),
                notes=notes,
            )
        )


def delete_sale(owner_id, sale_id):
    sale = load_owned(Sale, sale_id, owner_id)
    with item_lock(owner_id, sale.item_id):
        return _process(DeleteSale(owner_id=owner_id, sale_id=sale_id))

"""Domain events for the InventoryEntry aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from ledger.domain import ledger


@ledger.event(part_of="InventoryEntry")
class LotPurchased:
    """A purchase lot was logged."""

    __version__ = 1

    lot_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity_bought = Integer(required=True)
    unit_cost = String(required=True)
    currency_unit = String(required=True)
    bought_at = DateTime(required=True)


@ledger.event(part_of="InventoryEntry")
class LotRevised:
    """A lot was edited. ``quantity_reset`` tells whether remaining units were reset."""

    __version__ = 1

    lot_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity_bought = Integer(required=True)
    remaining_qty = Integer(required=True)
    unit_cost = String(required=True)
    bought_at = DateTime()
    quantity_reset = Boolean(default=False)

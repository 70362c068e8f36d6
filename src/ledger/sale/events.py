"""Domain events for the Sale aggregate."""

from protean.fields import Identifier, Integer, String

from ledger.domain import ledger


@ledger.event(part_of="Sale")
class SaleRecorded:
    """A sale was recorded. ``profit`` is empty when currencies differ."""

    __version__ = 1

    sale_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity_sold = Integer(required=True)
    amount_gained = String(required=True)
    total_cost = String(required=True)
    profit = String()
    costing_method = String(required=True)


@ledger.event(part_of="Sale")
class SaleRevised:
    """A sale was edited and re-priced against current stock."""

    __version__ = 1

    sale_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity_sold = Integer(required=True)
    amount_gained = String(required=True)
    total_cost = String(required=True)
    profit = String()
    costing_method = String(required=True)

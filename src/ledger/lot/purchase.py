"""Lot purchase: command and handler."""

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ledger.domain import ledger, logger
from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry
from ledger.shared.currency import CurrencyUnit
from ledger.shared.ownership import load_owned


@ledger.command(part_of="InventoryEntry")
class AddLot:
    """Log a purchase of ``quantity`` units of an item at ``unit_cost`` each."""

    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_cost = String(required=True, max_length=50)  # Decimal text, >= 0
    currency_unit = String(required=True, choices=CurrencyUnit)
    bought_at = DateTime()  # Defaults to now
    notes = Text()


@ledger.command_handler(part_of=InventoryEntry)
class AddLotHandler:
    @handle(AddLot)
    def add_lot(self, command):
        item = load_owned(Item, command.item_id, command.owner_id)
        repo = current_domain.repository_for(InventoryEntry)

        lot = InventoryEntry.purchase(
            owner_id=command.owner_id,
            item_id=item.id,
            snapshot_name=item.name,
            snapshot_category_id=item.default_category_id,
            quantity=command.quantity,
            unit_cost=command.unit_cost,
            currency_unit=command.currency_unit,
            bought_at=command.bought_at,
            notes=command.notes,
            sequence=repo.next_sequence(command.owner_id, item.id),
        )
        repo.add(lot)
        logger.info(
            "lot_purchased",
            owner_id=str(command.owner_id),
            item_id=str(item.id),
            lot_id=str(lot.id),
            quantity=lot.quantity_bought,
            unit_cost=lot.unit_cost,
            currency_unit=lot.currency_unit,
        )
        return str(lot.id)

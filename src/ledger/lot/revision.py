"""Lot revision: command and handler."""

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ledger.domain import ledger, logger
from ledger.lot.lot import InventoryEntry
from ledger.shared.ownership import load_owned


@ledger.command(part_of="InventoryEntry")
class UpdateLot:
    owner_id = Identifier(required=True)
    lot_id = Identifier(required=True)
    quantity = Integer(min_value=1)
    unit_cost = String(max_length=50)
    notes = Text()
    bought_at = DateTime()


@ledger.command_handler(part_of=InventoryEntry)
class UpdateLotHandler:
    @handle(UpdateLot)
    def update_lot(self, command):
        lot = load_owned(InventoryEntry, command.lot_id, command.owner_id)
        consumed = lot.quantity_bought - lot.remaining_qty

        lot.revise(
            quantity=command.quantity,
            unit_cost=command.unit_cost,
            notes=command.notes,
            bought_at=command.bought_at,
        )
        current_domain.repository_for(InventoryEntry).add(lot)

        if command.quantity is not None and consumed:
            logger.warning(
                "lot_consumption_discarded",
                owner_id=str(command.owner_id),
                lot_id=str(lot.id),
                discarded=consumed,
            )
        logger.info(
            "lot_revised",
            owner_id=str(command.owner_id),
            item_id=str(lot.item_id),
            lot_id=str(lot.id),
            quantity=lot.quantity_bought,
            remaining_qty=lot.remaining_qty,
            unit_cost=lot.unit_cost,
        )

"""Lot removal: command and handler.

Deletion is a hard delete. Sales whose cost breakdown names the lot keep
their stored cost and profit.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ledger.domain import ledger, logger
from ledger.lot.lot import InventoryEntry
from ledger.shared.ownership import load_owned


@ledger.command(part_of="InventoryEntry")
class DeleteLot:
    owner_id = Identifier(required=True)
    lot_id = Identifier(required=True)


@ledger.command_handler(part_of=InventoryEntry)
class DeleteLotHandler:
    @handle(DeleteLot)
    def delete_lot(self, command):
        lot = load_owned(InventoryEntry, command.lot_id, command.owner_id)
        current_domain.repository_for(InventoryEntry)._dao.delete(lot)
        logger.info(
            "lot_deleted",
            owner_id=str(command.owner_id),
            item_id=str(lot.item_id),
            lot_id=str(lot.id),
            quantity=lot.quantity_bought,
        )

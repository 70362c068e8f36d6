"""Sale removal: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ledger.costing import get_costing_strategy
from ledger.domain import ledger, logger
from ledger.lot.lot import InventoryEntry
from ledger.sale.sale import Sale
from ledger.shared.ownership import load_owned


@ledger.command(part_of="Sale")
class DeleteSale:
    owner_id = Identifier(required=True)
    sale_id = Identifier(required=True)


@ledger.command_handler(part_of=Sale)
class DeleteSaleHandler:
    @handle(DeleteSale)
    def delete_sale(self, command):
        sale = load_owned(Sale, command.sale_id, command.owner_id)

        released = get_costing_strategy().release(sale)
        lot_repo = current_domain.repository_for(InventoryEntry)
        for lot in released:
            lot_repo.add(lot)
        current_domain.repository_for(Sale)._dao.delete(sale)

        logger.info(
            "sale_deleted",
            owner_id=str(command.owner_id),
            item_id=str(sale.item_id),
            sale_id=str(sale.id),
            quantity=sale.quantity_sold,
            lots_released=len(released),
        )

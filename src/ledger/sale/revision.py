"""Sale revision: command and handler.

A revised sale is priced again against the item's current stock and cost,
not the figures in effect when it was first recorded.
"""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ledger.costing import get_costing_strategy
from ledger.domain import ledger, logger
from ledger.lot.lot import InventoryEntry
from ledger.sale.sale import Sale
from ledger.shared.ownership import load_owned


@ledger.command(part_of="Sale")
class UpdateSale:
    owner_id = Identifier(required=True)
    sale_id = Identifier(required=True)
    quantity = Integer(min_value=1)
    amount_gained = String(max_length=50)
    notes = Text()


@ledger.command_handler(part_of=Sale)
class UpdateSaleHandler:
    @handle(UpdateSale)
    def update_sale(self, command):
        sale = load_owned(Sale, command.sale_id, command.owner_id)
        quantity = command.quantity if command.quantity is not None else sale.quantity_sold
        amount = command.amount_gained if command.amount_gained is not None else sale.amount_gained

        quote = get_costing_strategy().price(
            command.owner_id,
            sale.item_id,
            quantity,
            sale.currency_unit,
            replacing=sale,
        )
        sale.reprice(quantity=quantity, amount_gained=amount, quote=quote, notes=command.notes)

        lot_repo = current_domain.repository_for(InventoryEntry)
        for lot in quote.touched_lots:
            lot_repo.add(lot)
        current_domain.repository_for(Sale).add(sale)

        logger.info(
            "sale_revised",
            owner_id=str(command.owner_id),
            item_id=str(sale.item_id),
            sale_id=str(sale.id),
            quantity=sale.quantity_sold,
            amount_gained=sale.amount_gained,
            total_cost=sale.total_cost,
            profit=sale.profit,
        )

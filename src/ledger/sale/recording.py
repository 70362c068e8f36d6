"""Sale recording: command and handler."""

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ledger.costing import get_costing_strategy
from ledger.domain import ledger, logger
from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry
from ledger.sale.sale import Sale
from ledger.shared.currency import CurrencyUnit
from ledger.shared.numbers import require_positive
from ledger.shared.ownership import load_owned


@ledger.command(part_of="Sale")
class RecordSale:
    """Record ``quantity`` units of an item sold for ``amount_gained`` in total."""

    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    amount_gained = String(required=True, max_length=50)  # Decimal text, > 0
    currency_unit = String(required=True, choices=CurrencyUnit)
    sold_at = DateTime()  # Defaults to now
    notes = Text()


@ledger.command_handler(part_of=Sale)
class RecordSaleHandler:
    @handle(RecordSale)
    def record_sale(self, command):
        item = load_owned(Item, command.item_id, command.owner_id)
        require_positive(command.amount_gained, "amount_gained")

        quote = get_costing_strategy().price(
            command.owner_id,
            item.id,
            command.quantity,
            command.currency_unit,
        )
        sale = Sale.record(
            owner_id=command.owner_id,
            item_id=item.id,
            quantity=command.quantity,
            amount_gained=command.amount_gained,
            currency_unit=command.currency_unit,
            quote=quote,
            sold_at=command.sold_at,
            notes=command.notes,
        )

        lot_repo = current_domain.repository_for(InventoryEntry)
        for lot in quote.touched_lots:
            lot_repo.add(lot)
        current_domain.repository_for(Sale).add(sale)

        if sale.profit is None:
            logger.warning(
                "sale_profit_undefined",
                owner_id=str(command.owner_id),
                item_id=str(item.id),
                sale_id=str(sale.id),
                currency_unit=sale.currency_unit,
            )
        logger.info(
            "sale_recorded",
            owner_id=str(command.owner_id),
            item_id=str(item.id),
            sale_id=str(sale.id),
            quantity=sale.quantity_sold,
            amount_gained=sale.amount_gained,
            total_cost=sale.total_cost,
            profit=sale.profit,
            costing_method=sale.costing_method,
        )
        return str(sale.id)

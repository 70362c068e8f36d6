"""Costing port: how a sale's cost of goods sold is worked out.

Two policies satisfy this interface: lifetime-average (one blended unit cost,
lots are never decremented) and lot consumption (oldest open lot first, lots
are decremented and closed). A deployment picks one; see ``get_costing_strategy``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ledger.domain import logger
from ledger.lot.lot import InventoryEntry
from ledger.sale.sale import LIFETIME_AVERAGE_MARKER
from ledger.shared.errors import InsufficientStock
from ledger.shared.numbers import ZERO, money_text


@dataclass(frozen=True)
class CostAllocation:
    """Units of one lot (or the synthetic lifetime-average row) charged to a sale."""

    lot_id: str
    unit_cost: Decimal
    qty_used: int
    bought_at: object = None

    @property
    def cost_contribution(self) -> Decimal:
        return self.unit_cost * self.qty_used

    def as_dict(self) -> dict:
        return {"lot_id": self.lot_id, "unit_cost": money_text(self.unit_cost), "qty_used": self.qty_used}


@dataclass(frozen=True)
class CostQuote:
    method: str
    quantity: int
    total_cost: Decimal
    allocations: tuple = ()
    currency_consistent: bool = True
    touched_lots: tuple = field(default=(), compare=False)


class CostingStrategy(ABC):
    """Prices sales and hands back stock when sales go away."""

    name: str = ""

    def __init__(self, allow_unstocked_sales=True):
        self.allow_unstocked_sales = allow_unstocked_sales

    @abstractmethod
    def price(self, owner_id, item_id, quantity, currency_unit, replacing=None) -> CostQuote:
        """Check stock and cost ``quantity`` units of the item.

        ``replacing`` is a sale being revised; its own units count as
        available again. Raises ``InsufficientStock`` when the demand cannot
        be met. Lots changed in memory are returned in ``touched_lots`` and
        must be persisted by the caller.
        """
        ...

    def release(self, sale) -> list[InventoryEntry]:
        """Give back lot units consumed by ``sale``.

        Only real lot rows are restored. Lots deleted since the sale are
        skipped, and restores never exceed a lot's ``quantity_bought``.
        """
        repo = current_domain.repository_for(InventoryEntry)
        released = []
        for row in sale.breakdown():
            if row["lot_id"] == LIFETIME_AVERAGE_MARKER:
                continue
            try:
                lot = repo.get(row["lot_id"])
            except ObjectNotFoundError:
                logger.info("release_skipped_missing_lot", sale_id=str(sale.id), lot_id=row["lot_id"])
                continue
            lot.restore(int(row["qty_used"]))
            released.append(lot)
        return released

    def _unstocked_quote(self, owner_id, item_id, quantity):
        """Quote for an item without any purchase history."""
        if not self.allow_unstocked_sales:
            self._reject(owner_id, item_id, 0, quantity)
        logger.warning("sale_without_purchase_history", owner_id=str(owner_id), item_id=str(item_id), quantity=quantity)
        return CostQuote(
            method=self.name,
            quantity=quantity,
            total_cost=ZERO,
            allocations=(CostAllocation(lot_id=LIFETIME_AVERAGE_MARKER, unit_cost=ZERO, qty_used=quantity),),
        )

    def _reject(self, owner_id, item_id, available, quantity):
        logger.warning(
            "sale_rejected_insufficient_stock",
            owner_id=str(owner_id),
            item_id=str(item_id),
            available=available,
            requested=quantity,
        )
        raise InsufficientStock(available=available, requested=quantity)

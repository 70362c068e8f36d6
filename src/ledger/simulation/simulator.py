"""FIFO what-if projection for a sale that has not happened.

Reads open lots and nothing else; it never writes, so it is safe to run
concurrently with anything.
"""

from dataclasses import dataclass
from decimal import Decimal

from ledger.costing.fifo import allocate_fifo
from ledger.lot.queries import open_lots_for_item
from ledger.shared.numbers import ZERO, require_positive, require_quantity


@dataclass(frozen=True)
class SimulatedLotUse:
    lot_id: str
    bought_at: object
    unit_cost: Decimal
    qty_used: int
    cost_contribution: Decimal


@dataclass(frozen=True)
class SimulationResult:
    available: int
    simulate_qty: int
    sell_unit_price: Decimal
    projected_revenue: Decimal
    simulated_cogs: Decimal
    projected_profit: Decimal
    breakdown: tuple = ()
    insufficient: bool = False


def simulate(owner_id, item_id, quantity, sell_unit_price) -> SimulationResult:
    """Project revenue, cost and profit of selling ``quantity`` units now.

    Asking for more than the open lots hold is a normal outcome, reported
    with ``insufficient=True`` and zero figures.
    """
    quantity = require_quantity(quantity, "simulate_qty")
    price = require_positive(sell_unit_price, "sell_unit_price")

    lots = open_lots_for_item(owner_id, item_id)
    available = sum(lot.remaining_qty for lot in lots)

    if quantity > available:
        return SimulationResult(
            available=available,
            simulate_qty=quantity,
            sell_unit_price=price,
            projected_revenue=ZERO,
            simulated_cogs=ZERO,
            projected_profit=ZERO,
            insufficient=True,
        )

    allocations, _ = allocate_fifo(lots, quantity)
    breakdown = tuple(
        SimulatedLotUse(
            lot_id=a.lot_id,
            bought_at=a.bought_at,
            unit_cost=a.unit_cost,
            qty_used=a.qty_used,
            cost_contribution=a.cost_contribution,
        )
        for a in allocations
    )
    revenue = price * quantity
    cogs = sum((row.cost_contribution for row in breakdown), ZERO)
    return SimulationResult(
        available=available,
        simulate_qty=quantity,
        sell_unit_price=price,
        projected_revenue=revenue,
        simulated_cogs=cogs,
        projected_profit=revenue - cogs,
        breakdown=breakdown,
    )

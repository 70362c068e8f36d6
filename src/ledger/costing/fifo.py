"""First-in-first-out allocation over an ordered run of open lots."""

from ledger.costing.port import CostAllocation


def allocate_fifo(lots, quantity):
    """Walk ``lots`` in the given order, taking units until ``quantity`` is met.

    ``lots`` must already be in FIFO order. Returns ``(allocations, unmet)``
    where ``unmet`` is the demand left when the lots ran out. Lots are not
    modified.
    """
    allocations = []
    demand = quantity
    for lot in lots:
        if demand <= 0:
            break
        if lot.remaining_qty <= 0:
            continue
        used = min(demand, lot.remaining_qty)
        allocations.append(
            CostAllocation(
                lot_id=str(lot.id),
                unit_cost=lot.unit_cost_amount,
                qty_used=used,
                bought_at=lot.bought_at,
            )
        )
        demand -= used
    return allocations, demand

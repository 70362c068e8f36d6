"""Ledger bounded context: catalogue, purchase lots, sales and costing.

Turns a stream of purchase lots and sale events into quantities on hand and
profit figures. Aggregates (Category, Item, InventoryEntry, Sale) are plain
state-stored aggregates; totals, simulations and reports are recomputed from
them on every read.
"""

from protean.domain import Domain

from ledger.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ledger = Domain(name="ledger")

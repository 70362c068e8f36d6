"""Read helpers over purchase lots."""

from protean.utils.globals import current_domain

from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry
from ledger.shared.ownership import load_owned


def lots_for_item(owner_id, item_id) -> list[InventoryEntry]:
    """Every lot of the item, in FIFO order."""
    item = load_owned(Item, item_id, owner_id)
    return current_domain.repository_for(InventoryEntry).for_item(owner_id, item.id)


def open_lots_for_item(owner_id, item_id) -> list[InventoryEntry]:
    """Lots with units remaining, oldest ``bought_at`` first, ties by insertion order."""
    item = load_owned(Item, item_id, owner_id)
    return current_domain.repository_for(InventoryEntry).open_for_item(owner_id, item.id)


def distinct_available_items(owner_id) -> list[Item]:
    """Items with at least one open lot, ordered by name."""
    lots = current_domain.repository_for(InventoryEntry).for_owner(owner_id)
    item_ids = {str(lot.item_id) for lot in lots if lot.remaining_qty > 0}
    items = [i for i in current_domain.repository_for(Item).for_owner(owner_id) if str(i.id) in item_ids]
    return items

"""Repository for the InventoryEntry aggregate."""

from ledger.domain import ledger
from ledger.lot.lot import InventoryEntry
from ledger.shared.timestamps import as_utc


def fifo_key(lot):
    """Oldest purchase first; lots bought at the same instant keep insertion order."""
    return (as_utc(lot.bought_at), lot.sequence or 0)


@ledger.repository(part_of=InventoryEntry)
class InventoryEntryRepository:
    def for_owner(self, owner_id) -> list[InventoryEntry]:
        return self._dao.query.filter(owner_id=str(owner_id)).all().items

    def for_item(self, owner_id, item_id) -> list[InventoryEntry]:
        lots = self._dao.query.filter(owner_id=str(owner_id), item_id=str(item_id)).all().items
        return sorted(lots, key=fifo_key)

    def open_for_item(self, owner_id, item_id) -> list[InventoryEntry]:
        return [lot for lot in self.for_item(owner_id, item_id) if lot.remaining_qty > 0]

    def in_snapshot_category(self, owner_id, category_id) -> list[InventoryEntry]:
        return self._dao.query.filter(owner_id=str(owner_id), snapshot_category_id=str(category_id)).all().items

    def next_sequence(self, owner_id, item_id) -> int:
        lots = self._dao.query.filter(owner_id=str(owner_id), item_id=str(item_id)).all().items
        return max((lot.sequence or 0 for lot in lots), default=0) + 1

"""Repository for the Item aggregate."""

from ledger.domain import ledger
from ledger.item.item import Item


@ledger.repository(part_of=Item)
class ItemRepository:
    def for_owner(self, owner_id) -> list[Item]:
        items = self._dao.query.filter(owner_id=str(owner_id)).all().items
        return sorted(items, key=lambda i: i.name_key)

    def find_by_name(self, owner_id, name) -> Item | None:
        key = (name or "").strip().lower()
        return self._dao.query.filter(owner_id=str(owner_id), name_key=key).all().first

    def in_category(self, owner_id, category_id) -> list[Item]:
        return self._dao.query.filter(owner_id=str(owner_id), default_category_id=str(category_id)).all().items

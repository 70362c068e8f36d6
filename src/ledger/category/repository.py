"""Repository for the Category aggregate."""

from ledger.category.category import Category
from ledger.domain import ledger


@ledger.repository(part_of=Category)
class CategoryRepository:
    def for_owner(self, owner_id) -> list[Category]:
        """All categories of an owner, the protected default first, then by name."""
        categories = self._dao.query.filter(owner_id=str(owner_id)).all().items
        return sorted(categories, key=lambda c: (not c.is_protected, c.name_key))

    def default_for(self, owner_id) -> Category | None:
        return next((c for c in self.for_owner(owner_id) if c.is_protected), None)

    def find_by_name(self, owner_id, name) -> Category | None:
        key = (name or "").strip().lower()
        return self._dao.query.filter(owner_id=str(owner_id), name_key=key).all().first

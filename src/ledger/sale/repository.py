"""Repository for the Sale aggregate."""

from ledger.domain import ledger
from ledger.sale.sale import Sale
from ledger.shared.timestamps import as_utc


@ledger.repository(part_of=Sale)
class SaleRepository:
    def for_owner(self, owner_id) -> list[Sale]:
        sales = self._dao.query.filter(owner_id=str(owner_id)).all().items
        return sorted(sales, key=lambda s: as_utc(s.sold_at), reverse=True)

    def for_item(self, owner_id, item_id) -> list[Sale]:
        sales = self._dao.query.filter(owner_id=str(owner_id), item_id=str(item_id)).all().items
        return sorted(sales, key=lambda s: as_utc(s.sold_at), reverse=True)

"""Item aggregate: a tradeable thing that purchase lots and sales refer to."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String

from ledger.category.category import normalize_name
from ledger.domain import ledger

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


@ledger.aggregate
class Item:
    """Pure reference data; quantities and costs live on lots and sales."""

    owner_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    name_key = String(required=True, max_length=150)
    default_category_id = Identifier(required=True)
    image_url = String(max_length=500)
    low_stock_threshold = Integer(min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, owner_id, name, default_category_id, image_url=None, low_stock_threshold=None):
        from ledger.item.events import ItemCreated

        normalized = normalize_name(name)
        now = datetime.now(UTC)
        item = cls(
            owner_id=owner_id,
            name=normalized,
            name_key=normalized.lower(),
            default_category_id=default_category_id,
            image_url=image_url,
            low_stock_threshold=low_stock_threshold,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemCreated(
                item_id=item.id,
                owner_id=owner_id,
                name=normalized,
                default_category_id=default_category_id,
            )
        )
        return item

    def update_details(self, name=_UNSET, default_category_id=_UNSET, image_url=_UNSET, low_stock_threshold=_UNSET):
        from ledger.item.events import ItemDetailsUpdated

        if name is not _UNSET and name is not None:
            normalized = normalize_name(name)
            self.name = normalized
            self.name_key = normalized.lower()
        if default_category_id is not _UNSET and default_category_id is not None:
            self.default_category_id = default_category_id
        if image_url is not _UNSET:
            self.image_url = image_url
        if low_stock_threshold is not _UNSET:
            self.low_stock_threshold = low_stock_threshold
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ItemDetailsUpdated(
                item_id=self.id,
                owner_id=self.owner_id,
                name=self.name,
                default_category_id=self.default_category_id,
                image_url=self.image_url,
            )
        )

    def assign_category(self, category_id):
        """Move the item to another category without touching its other details."""
        self.update_details(default_category_id=category_id)

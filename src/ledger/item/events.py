"""Domain events for the Item aggregate."""

from protean.fields import Identifier, String

from ledger.domain import ledger


@ledger.event(part_of="Item")
class ItemCreated:
    """A new item was added to an owner's catalogue."""

    __version__ = 1

    item_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)
    default_category_id = Identifier(required=True)


@ledger.event(part_of="Item")
class ItemDetailsUpdated:
    """An item's name, category or image changed."""

    __version__ = 1

    item_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)
    default_category_id = Identifier(required=True)
    image_url = String()

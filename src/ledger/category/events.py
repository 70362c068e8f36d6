"""Domain events for the Category aggregate."""

from protean.fields import Boolean, Identifier, String

from ledger.domain import ledger


@ledger.event(part_of="Category")
class CategoryCreated:
    """A category was added for an owner."""

    __version__ = 1

    category_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)
    is_protected = Boolean(default=False)


@ledger.event(part_of="Category")
class CategoryRenamed:
    """A category's display name was changed."""

    __version__ = 1

    category_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    previous_name = String(required=True)
    name = String(required=True)

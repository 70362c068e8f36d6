"""Read helpers over sales."""

from protean.utils.globals import current_domain

from ledger.item.item import Item
from ledger.sale.sale import Sale
from ledger.shared.ownership import load_owned


def list_sales(owner_id, item_id=None) -> list[Sale]:
    """An owner's sales, newest first, optionally for a single item."""
    repo = current_domain.repository_for(Sale)
    if item_id is None:
        return repo.for_owner(owner_id)
    item = load_owned(Item, item_id, owner_id)
    return repo.for_item(owner_id, item.id)

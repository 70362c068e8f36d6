"""Item management: commands, handler and read helpers."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ledger.category.category import Category, normalize_name
from ledger.category.management import ensure_default_category
from ledger.domain import ledger, logger
from ledger.item.item import Item
from ledger.shared.ownership import load_owned


@ledger.command(part_of="Item")
class CreateItem:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    category_id = Identifier()  # Defaults to the owner's "Other" category
    image_url = String(max_length=500)
    low_stock_threshold = Integer(min_value=0)


@ledger.command(part_of="Item")
class UpdateItem:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    name = String(max_length=150)
    category_id = Identifier()
    image_url = String(max_length=500)
    low_stock_threshold = Integer(min_value=0)


@ledger.command(part_of="Item")
class DeleteItem:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)


def list_items(owner_id) -> list[Item]:
    return current_domain.repository_for(Item).for_owner(owner_id)


def find_item_by_name(owner_id, name) -> Item | None:
    """Case-insensitive lookup of an owner's item by name."""
    return current_domain.repository_for(Item).find_by_name(owner_id, name)


def _ensure_unique_name(owner_id, name, exclude_id=None):
    existing = find_item_by_name(owner_id, name)
    if existing is not None and str(existing.id) != str(exclude_id):
        raise ValidationError({"name": [f'Item "{name}" already exists']})


def _resolve_category(owner_id, category_id):
    default = ensure_default_category(owner_id)
    if not category_id or str(category_id) == str(default.id):
        return default.id
    return load_owned(Category, category_id, owner_id).id


@ledger.command_handler(part_of=Item)
class ManageItemHandler:
    @handle(CreateItem)
    def create_item(self, command):
        name = normalize_name(command.name)
        _ensure_unique_name(command.owner_id, name)
        category_id = _resolve_category(command.owner_id, command.category_id)

        item = Item.create(
            owner_id=command.owner_id,
            name=name,
            default_category_id=category_id,
            image_url=command.image_url,
            low_stock_threshold=command.low_stock_threshold,
        )
        current_domain.repository_for(Item).add(item)
        logger.info("item_created", owner_id=str(command.owner_id), item_id=str(item.id), name=name)
        return str(item.id)

    @handle(UpdateItem)
    def update_item(self, command):
        item = load_owned(Item, command.item_id, command.owner_id)

        changes = {}
        if command.name is not None:
            name = normalize_name(command.name)
            _ensure_unique_name(command.owner_id, name, exclude_id=item.id)
            changes["name"] = name
        if command.category_id is not None:
            changes["default_category_id"] = _resolve_category(command.owner_id, command.category_id)
        if command.image_url is not None:
            changes["image_url"] = command.image_url
        if command.low_stock_threshold is not None:
            changes["low_stock_threshold"] = command.low_stock_threshold

        item.update_details(**changes)
        current_domain.repository_for(Item).add(item)
        logger.info("item_updated", owner_id=str(command.owner_id), item_id=str(item.id), fields=sorted(changes))

    @handle(DeleteItem)
    def delete_item(self, command):
        from ledger.lot.lot import InventoryEntry
        from ledger.sale.sale import Sale

        item = load_owned(Item, command.item_id, command.owner_id)
        lots = current_domain.repository_for(InventoryEntry).for_item(command.owner_id, item.id)
        sales = current_domain.repository_for(Sale).for_item(command.owner_id, item.id)
        if lots or sales:
            raise ValidationError(
                {"item": [f"Item has {len(lots)} lot(s) and {len(sales)} sale(s); delete those first"]}
            )

        current_domain.repository_for(Item)._dao.delete(item)
        logger.info("item_deleted", owner_id=str(command.owner_id), item_id=str(item.id))

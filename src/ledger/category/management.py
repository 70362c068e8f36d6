"""Category management: commands, handler and read helpers."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ledger.category.category import Category, normalize_name
from ledger.domain import ledger, logger
from ledger.shared.ownership import load_owned


@ledger.command(part_of="Category")
class CreateCategory:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=100)


@ledger.command(part_of="Category")
class RenameCategory:
    owner_id = Identifier(required=True)
    category_id = Identifier(required=True)
    name = String(required=True, max_length=100)


@ledger.command(part_of="Category")
class DeleteCategory:
    owner_id = Identifier(required=True)
    category_id = Identifier(required=True)


def ensure_default_category(owner_id) -> Category:
    """Return the owner's protected "Other" category, creating it on first use."""
    repo = current_domain.repository_for(Category)
    default = repo.default_for(owner_id)
    if default is None:
        default = Category.create_default(owner_id)
        repo.add(default)
        logger.info("default_category_created", owner_id=str(owner_id), category_id=str(default.id))
    return default


def list_categories(owner_id) -> list[Category]:
    ensure_default_category(owner_id)
    return current_domain.repository_for(Category).for_owner(owner_id)


def _ensure_unique_name(owner_id, name, default, exclude_id=None):
    # The default may have been created in this unit of work and not be queryable yet
    if name.lower() == default.name_key:
        raise ValidationError({"name": [f'Category "{name}" already exists']})
    existing = current_domain.repository_for(Category).find_by_name(owner_id, name)
    if existing is not None and str(existing.id) != str(exclude_id):
        raise ValidationError({"name": [f'Category "{name}" already exists']})


@ledger.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        default = ensure_default_category(command.owner_id)
        name = normalize_name(command.name)
        _ensure_unique_name(command.owner_id, name, default)

        category = Category.create(owner_id=command.owner_id, name=name)
        current_domain.repository_for(Category).add(category)
        logger.info("category_created", owner_id=str(command.owner_id), category_id=str(category.id), name=name)
        return str(category.id)

    @handle(RenameCategory)
    def rename_category(self, command):
        category = load_owned(Category, command.category_id, command.owner_id)
        name = normalize_name(command.name)
        if not category.is_protected:
            _ensure_unique_name(command.owner_id, name, ensure_default_category(command.owner_id), exclude_id=category.id)

        category.rename(name)
        current_domain.repository_for(Category).add(category)
        logger.info("category_renamed", owner_id=str(command.owner_id), category_id=str(category.id), name=name)

    @handle(DeleteCategory)
    def delete_category(self, command):
        from ledger.item.item import Item
        from ledger.lot.lot import InventoryEntry

        category = load_owned(Category, command.category_id, command.owner_id)
        category.ensure_deletable()
        fallback = ensure_default_category(command.owner_id)

        item_repo = current_domain.repository_for(Item)
        items = item_repo.in_category(command.owner_id, category.id)
        for item in items:
            item.assign_category(fallback.id)
            item_repo.add(item)

        lot_repo = current_domain.repository_for(InventoryEntry)
        lots = lot_repo.in_snapshot_category(command.owner_id, category.id)
        for lot in lots:
            lot.reassign_snapshot_category(fallback.id)
            lot_repo.add(lot)

        current_domain.repository_for(Category)._dao.delete(category)
        logger.info(
            "category_deleted",
            owner_id=str(command.owner_id),
            category_id=str(category.id),
            items_reassigned=len(items),
            lots_reassigned=len(lots),
        )

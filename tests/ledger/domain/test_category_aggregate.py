import pytest
from ledger.category.category import DEFAULT_CATEGORY_NAME, Category
from ledger.category.events import CategoryCreated, CategoryRenamed
from ledger.shared.errors import ProtectedCategoryError
from protean.exceptions import ValidationError


class TestCategoryCreation:
    def test_name_is_trimmed_and_keyed(self):
        category = Category.create(owner_id="owner-1", name="  Rare Seeds ")
        assert category.name == "Rare Seeds"
        assert category.name_key == "rare seeds"
        assert category.is_protected is False

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Category.create(owner_id="owner-1", name="   ")
        assert "name" in exc.value.messages

    def test_raises_created_event(self):
        category = Category.create(owner_id="owner-1", name="Blocks")
        assert len(category._events) == 1
        assert isinstance(category._events[0], CategoryCreated)

    def test_default_is_protected_other(self):
        category = Category.create_default("owner-1")
        assert category.name == DEFAULT_CATEGORY_NAME
        assert category.is_protected is True


class TestCategoryRename:
    def test_rename(self):
        category = Category.create(owner_id="owner-1", name="Blocks")
        category.rename("Building Blocks")
        assert category.name == "Building Blocks"
        assert category.name_key == "building blocks"
        event = category._events[-1]
        assert isinstance(event, CategoryRenamed)
        assert event.previous_name == "Blocks"

    def test_default_cannot_be_renamed(self):
        category = Category.create_default("owner-1")
        with pytest.raises(ProtectedCategoryError):
            category.rename("Misc")

    def test_default_cannot_be_deleted(self):
        category = Category.create_default("owner-1")
        with pytest.raises(ProtectedCategoryError) as exc:
            category.ensure_deletable()
        assert exc.value.action == "delete"

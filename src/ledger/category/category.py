"""Category aggregate: a named grouping for items and purchase lots."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from ledger.domain import ledger
from ledger.shared.errors import ProtectedCategoryError

DEFAULT_CATEGORY_NAME = "Other"


def normalize_name(name):
    """Trim a display name, rejecting blank input."""
    normalized = (name or "").strip()
    if not normalized:
        raise ValidationError({"name": ["Name cannot be empty"]})
    return normalized


@ledger.aggregate
class Category:
    """A grouping owned by one user.

    Every owner has exactly one protected "Other" category. It cannot be
    renamed or deleted and receives the items and lots of deleted categories.
    Names are unique per owner, compared case-insensitively via ``name_key``.
    """

    owner_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    name_key = String(required=True, max_length=100)
    is_protected = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, owner_id, name, is_protected=False):
        from ledger.category.events import CategoryCreated

        normalized = normalize_name(name)
        now = datetime.now(UTC)
        category = cls(
            owner_id=owner_id,
            name=normalized,
            name_key=normalized.lower(),
            is_protected=is_protected,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                owner_id=owner_id,
                name=normalized,
                is_protected=is_protected,
            )
        )
        return category

    @classmethod
    def create_default(cls, owner_id):
        return cls.create(owner_id=owner_id, name=DEFAULT_CATEGORY_NAME, is_protected=True)

    def rename(self, name):
        from ledger.category.events import CategoryRenamed

        if self.is_protected:
            raise ProtectedCategoryError(self.id, "rename")

        normalized = normalize_name(name)
        previous_name = self.name
        self.name = normalized
        self.name_key = normalized.lower()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryRenamed(
                category_id=self.id,
                owner_id=self.owner_id,
                previous_name=previous_name,
                name=normalized,
            )
        )

    def ensure_deletable(self):
        if self.is_protected:
            raise ProtectedCategoryError(self.id, "delete")

"""Business-rule violations raised by the ledger.

Both subclass Protean's ``ValidationError`` so framework-level callers treat
them as caller errors, while the HTTP layer and tests can tell them apart.
"""

from protean.exceptions import ValidationError


class InsufficientStock(ValidationError):
    """A sale asked for more units than the item has available."""

    def __init__(self, available, requested):
        self.available = available
        self.requested = requested
        super().__init__({"quantity": [f"Insufficient stock: {available} available, {requested} requested"]})


class ProtectedCategoryError(ValidationError):
    """The default "Other" category cannot be renamed or deleted."""

    def __init__(self, category_id, action):
        self.category_id = category_id
        self.action = action
        super().__init__({"category": [f'Cannot {action} the "Other" category']})

"""InventoryEntry aggregate: one purchase lot of an item.

A lot records what was bought, when, at which unit cost and in which
currency. ``remaining_qty`` is only decremented along the lot-consumption
costing path; under lifetime-average costing it stays at ``quantity_bought``
and stock is derived from sale totals instead.

The name, category and currency are captured at purchase time and do not
follow later changes to the item.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from ledger.domain import ledger
from ledger.shared.currency import CurrencyUnit
from ledger.shared.numbers import money_text, require_non_negative, to_decimal
from ledger.shared.timestamps import as_utc


class LotStatus(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


def _status_for(remaining_qty):
    return LotStatus.OPEN.value if remaining_qty > 0 else LotStatus.CLOSED.value


@ledger.aggregate
class InventoryEntry:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    snapshot_name = String(required=True, max_length=150)
    snapshot_category_id = Identifier(required=True)
    quantity_bought = Integer(required=True, min_value=1)
    unit_cost = String(required=True, max_length=50)  # Decimal text
    currency_unit = String(required=True, choices=CurrencyUnit)
    bought_at = DateTime(required=True)
    remaining_qty = Integer(required=True, min_value=0)
    status = String(choices=LotStatus, default=LotStatus.OPEN.value)
    notes = Text()
    sequence = Integer(default=0)  # Per-item insertion order, breaks bought_at ties
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def remaining_cannot_exceed_bought(self):
        if self.remaining_qty is not None and self.quantity_bought is not None:
            if self.remaining_qty > self.quantity_bought:
                raise ValidationError({"remaining_qty": ["Remaining quantity cannot exceed quantity bought"]})

    @invariant.post
    def status_follows_remaining(self):
        if self.remaining_qty is not None and self.status != _status_for(self.remaining_qty):
            raise ValidationError({"status": ["Status must be OPEN exactly when units remain"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def purchase(
        cls,
        owner_id,
        item_id,
        snapshot_name,
        snapshot_category_id,
        quantity,
        unit_cost,
        currency_unit,
        bought_at=None,
        notes=None,
        sequence=0,
    ):
        from ledger.lot.events import LotPurchased

        cost = require_non_negative(unit_cost, "unit_cost")
        now = datetime.now(UTC)
        bought = as_utc(bought_at) or now
        lot = cls(
            owner_id=owner_id,
            item_id=item_id,
            snapshot_name=snapshot_name,
            snapshot_category_id=snapshot_category_id,
            quantity_bought=quantity,
            unit_cost=money_text(cost),
            currency_unit=currency_unit,
            bought_at=bought,
            remaining_qty=quantity,
            status=_status_for(quantity),
            notes=notes,
            sequence=sequence,
            created_at=now,
            updated_at=now,
        )
        lot.raise_(
            LotPurchased(
                lot_id=lot.id,
                owner_id=owner_id,
                item_id=item_id,
                quantity_bought=quantity,
                unit_cost=money_text(cost),
                currency_unit=currency_unit,
                bought_at=bought,
            )
        )
        return lot

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def unit_cost_amount(self):
        return to_decimal(self.unit_cost, "unit_cost")

    @property
    def is_open(self):
        return self.remaining_qty > 0

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def revise(self, quantity=None, unit_cost=None, notes=None, bought_at=None):
        """Apply an edit.

        A new quantity resets ``remaining_qty`` to that quantity, discarding
        any consumption already recorded against this lot.
        """
        from ledger.lot.events import LotRevised

        with atomic_change(self):
            if quantity is not None:
                self.quantity_bought = quantity
                self.remaining_qty = quantity
                self.status = _status_for(quantity)
            if unit_cost is not None:
                self.unit_cost = money_text(require_non_negative(unit_cost, "unit_cost"))
            if notes is not None:
                self.notes = notes
            if bought_at is not None:
                self.bought_at = as_utc(bought_at)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            LotRevised(
                lot_id=self.id,
                owner_id=self.owner_id,
                item_id=self.item_id,
                quantity_bought=self.quantity_bought,
                remaining_qty=self.remaining_qty,
                unit_cost=self.unit_cost,
                bought_at=self.bought_at,
                quantity_reset=quantity is not None,
            )
        )

    def consume(self, quantity):
        if quantity > self.remaining_qty:
            raise ValidationError(
                {"remaining_qty": [f"Cannot consume {quantity} units, only {self.remaining_qty} remain"]}
            )
        with atomic_change(self):
            self.remaining_qty -= quantity
            self.status = _status_for(self.remaining_qty)
            self.updated_at = datetime.now(UTC)

    def restore(self, quantity):
        """Return units to the lot, never beyond what was bought."""
        with atomic_change(self):
            self.remaining_qty = min(self.quantity_bought, self.remaining_qty + quantity)
            self.status = _status_for(self.remaining_qty)
            self.updated_at = datetime.now(UTC)

    def reassign_snapshot_category(self, category_id):
        self.snapshot_category_id = category_id
        self.updated_at = datetime.now(UTC)

"""Sale aggregate: units of an item sold, with a point-in-time cost and profit.

``total_cost`` and ``profit`` are snapshots taken when the sale is recorded or
revised. ``profit`` is left empty when the sale currency differs from the
currency of the lots it was costed against; there is no conversion between
currency units, so no honest figure exists for that pairing.

``cost_breakdown`` is a JSON list of ``{lot_id, unit_cost, qty_used}`` rows.
Under lifetime-average costing it holds one synthetic row whose ``lot_id`` is
``LIFETIME_AVERAGE_MARKER``.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String, Text

from ledger.domain import ledger
from ledger.shared.currency import CurrencyUnit
from ledger.shared.numbers import money_text, require_positive, to_decimal
from ledger.shared.timestamps import as_utc

LIFETIME_AVERAGE_MARKER = "lifetime-average"


@ledger.aggregate
class Sale:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity_sold = Integer(required=True, min_value=1)
    amount_gained = String(required=True, max_length=50)
    currency_unit = String(required=True, choices=CurrencyUnit)
    cost_breakdown = Text()  # JSON list of allocation rows
    total_cost = String(required=True, max_length=50)
    profit = String(max_length=50)  # Empty when currencies differ
    costing_method = String(required=True, max_length=30)
    sold_at = DateTime(required=True)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def record(cls, owner_id, item_id, quantity, amount_gained, currency_unit, quote, sold_at=None, notes=None):
        from ledger.sale.events import SaleRecorded

        amount = require_positive(amount_gained, "amount_gained")
        now = datetime.now(UTC)
        profit = _profit(amount, quote)
        sale = cls(
            owner_id=owner_id,
            item_id=item_id,
            quantity_sold=quantity,
            amount_gained=money_text(amount),
            currency_unit=currency_unit,
            cost_breakdown=_breakdown_json(quote),
            total_cost=money_text(quote.total_cost),
            profit=money_text(profit) if profit is not None else None,
            costing_method=quote.method,
            sold_at=as_utc(sold_at) or now,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        sale.raise_(
            SaleRecorded(
                sale_id=sale.id,
                owner_id=owner_id,
                item_id=item_id,
                quantity_sold=quantity,
                amount_gained=sale.amount_gained,
                total_cost=sale.total_cost,
                profit=sale.profit,
                costing_method=quote.method,
            )
        )
        return sale

    def reprice(self, quantity, amount_gained, quote, notes=None):
        """Replace quantity, amount and the cost snapshot with freshly priced figures."""
        from ledger.sale.events import SaleRevised

        amount = require_positive(amount_gained, "amount_gained")
        profit = _profit(amount, quote)

        self.quantity_sold = quantity
        self.amount_gained = money_text(amount)
        self.cost_breakdown = _breakdown_json(quote)
        self.total_cost = money_text(quote.total_cost)
        self.profit = money_text(profit) if profit is not None else None
        self.costing_method = quote.method
        if notes is not None:
            self.notes = notes
        self.updated_at = datetime.now(UTC)

        self.raise_(
            SaleRevised(
                sale_id=self.id,
                owner_id=self.owner_id,
                item_id=self.item_id,
                quantity_sold=quantity,
                amount_gained=self.amount_gained,
                total_cost=self.total_cost,
                profit=self.profit,
                costing_method=quote.method,
            )
        )

    @property
    def amount(self):
        return to_decimal(self.amount_gained, "amount_gained")

    @property
    def cost(self):
        return to_decimal(self.total_cost, "total_cost")

    @property
    def profit_amount(self):
        """Stored profit as ``Decimal``, or None when it is undefined."""
        if self.profit is None or self.profit == "":
            return None
        return to_decimal(self.profit, "profit")

    def breakdown(self) -> list[dict]:
        return json.loads(self.cost_breakdown) if self.cost_breakdown else []


def _profit(amount, quote):
    if not quote.currency_consistent:
        return None
    return amount - quote.total_cost


def _breakdown_json(quote):
    return json.dumps([allocation.as_dict() for allocation in quote.allocations])

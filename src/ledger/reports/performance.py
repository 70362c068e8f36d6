"""Per-item and per-category performance figures, kept apart per currency.

Cost of goods sold and profit come from the snapshots stored on each sale.
Currency units are never added together: every money figure sits in a row
for one unit. A sale with an undefined profit (its lots were bought in
another unit) counts toward revenue only; its cost is in a different unit,
so it stays out of that currency's cost and profit. Margin is profit over
the revenue of the sales that do have a profit.

Remaining stock is valued at the item's average cost only while all of its
lots share one currency. Items bought in several units are left unvalued.
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from protean.utils.globals import current_domain

from ledger.aggregation.lifetime import compute_totals
from ledger.category.category import Category
from ledger.category.management import ensure_default_category
from ledger.item.item import Item
from ledger.reports.low_stock import records_by_item
from ledger.shared.currency import CurrencyUnit
from ledger.shared.numbers import ZERO


@dataclass(frozen=True)
class CurrencyAmount:
    currency_unit: str
    amount: Decimal


@dataclass(frozen=True)
class CurrencyFigures:
    currency_unit: str
    revenue: Decimal
    cogs: Decimal
    profit: Decimal
    margin_pct: Decimal
    units_sold: int
    sales_count: int
    undefined_profit_sales: int = 0


@dataclass(frozen=True)
class ItemPerformance:
    item_id: str
    item_name: str
    category_id: str
    figures: tuple[CurrencyFigures, ...]
    units_sold: int
    remaining_qty: int
    remaining_value: Decimal | None  # None when lots span currencies
    value_currency: str | None
    undefined_profit_sales: int = 0

    def figures_for(self, currency_unit) -> CurrencyFigures | None:
        return next((f for f in self.figures if f.currency_unit == currency_unit), None)


@dataclass(frozen=True)
class CategoryPerformance:
    category_id: str
    category_name: str
    item_count: int
    figures: tuple[CurrencyFigures, ...]
    units_sold: int
    remaining_qty: int
    remaining_value: tuple[CurrencyAmount, ...]
    unvalued_items: int = 0

    def figures_for(self, currency_unit) -> CurrencyFigures | None:
        return next((f for f in self.figures if f.currency_unit == currency_unit), None)


def _margin(profit, revenue):
    return profit / revenue * 100 if revenue else ZERO


def _in_currency_order(grouped):
    return [c.value for c in CurrencyUnit if c.value in grouped]


def _figures(currency_unit, sales) -> CurrencyFigures:
    costed = [s for s in sales if s.profit_amount is not None]
    profit = sum((s.profit_amount for s in costed), ZERO)
    return CurrencyFigures(
        currency_unit=currency_unit,
        revenue=sum((s.amount for s in sales), ZERO),
        cogs=sum((s.cost for s in costed), ZERO),
        profit=profit,
        margin_pct=_margin(profit, sum((s.amount for s in costed), ZERO)),
        units_sold=sum(s.quantity_sold for s in sales),
        sales_count=len(sales),
        undefined_profit_sales=len(sales) - len(costed),
    )


def currency_figures(sales) -> tuple[CurrencyFigures, ...]:
    """One row per currency unit the sales were made in."""
    grouped = defaultdict(list)
    for sale in sales:
        grouped[sale.currency_unit].append(sale)
    return tuple(_figures(currency, grouped[currency]) for currency in _in_currency_order(grouped))


def amounts_by_currency(pairs) -> tuple[CurrencyAmount, ...]:
    """Sum ``(currency_unit, amount)`` pairs per unit."""
    totals = defaultdict(lambda: ZERO)
    for currency, amount in pairs:
        totals[currency] += amount
    return tuple(CurrencyAmount(currency, totals[currency]) for currency in _in_currency_order(totals))


def _remaining_value(totals, lots):
    currencies = {lot.currency_unit for lot in lots}
    if not currencies:
        return ZERO, None
    if len(currencies) > 1:
        return None, None
    return totals.avg_cost * totals.remaining_qty, currencies.pop()


def _item_row(item, lots, sales) -> ItemPerformance:
    key = str(item.id)
    totals = compute_totals(key, lots, sales)
    value, value_currency = _remaining_value(totals, lots)
    figures = currency_figures(sales)
    return ItemPerformance(
        item_id=key,
        item_name=item.name,
        category_id=str(item.default_category_id),
        figures=figures,
        units_sold=totals.sold_qty,
        remaining_qty=totals.remaining_qty,
        remaining_value=value,
        value_currency=value_currency,
        undefined_profit_sales=sum(f.undefined_profit_sales for f in figures),
    )


def _rows_with_sales(owner_id):
    lots, sales = records_by_item(owner_id)
    for item in current_domain.repository_for(Item).for_owner(owner_id):
        key = str(item.id)
        yield _item_row(item, lots[key], sales[key]), sales[key]


def item_performance(owner_id) -> list[ItemPerformance]:
    """Figures for every item, by name."""
    return [row for row, _ in _rows_with_sales(owner_id)]


def category_performance(owner_id) -> list[CategoryPerformance]:
    """Item figures grouped by each item's current category."""
    ensure_default_category(owner_id)
    categories = current_domain.repository_for(Category).for_owner(owner_id)
    by_category = {str(c.id): [] for c in categories}
    for row, sales in _rows_with_sales(owner_id):
        by_category.setdefault(row.category_id, []).append((row, sales))

    result = []
    for category in categories:
        members = by_category[str(category.id)]
        rows = [row for row, _ in members]
        result.append(
            CategoryPerformance(
                category_id=str(category.id),
                category_name=category.name,
                item_count=len(rows),
                figures=currency_figures([sale for _, sales in members for sale in sales]),
                units_sold=sum(r.units_sold for r in rows),
                remaining_qty=sum(r.remaining_qty for r in rows),
                remaining_value=amounts_by_currency(
                    (r.value_currency, r.remaining_value) for r in rows if r.value_currency is not None
                ),
                unvalued_items=sum(1 for r in rows if r.remaining_value is None and r.remaining_qty),
            )
        )
    return result

"""Owner-wide dashboard: stock value, sales figures, lot states and highlights.

Every money figure is reported per currency unit, as in the performance
reports. Stock value is the sum of the per-item remaining values, so it
follows the same stock figure as the stock check; items whose lots span
currencies are counted in ``unvalued_items`` instead.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from protean.utils.globals import current_domain

from ledger.item.item import Item
from ledger.lot.lot import InventoryEntry, LotStatus
from ledger.reports.performance import (
    CurrencyAmount,
    CurrencyFigures,
    amounts_by_currency,
    currency_figures,
    item_performance,
)
from ledger.sale.sale import Sale
from ledger.shared.currency import CurrencyUnit

TOP_ITEMS = 5
RECENT_SALES = 5


@dataclass(frozen=True)
class TopItem:
    item_id: str
    item_name: str
    currency_unit: str
    profit: Decimal
    units_sold: int


@dataclass(frozen=True)
class RecentSale:
    sale_id: str
    item_id: str
    item_name: str | None
    quantity_sold: int
    amount_gained: Decimal
    currency_unit: str
    profit: Decimal | None
    sold_at: datetime


@dataclass(frozen=True)
class DashboardSummary:
    inventory_value: tuple[CurrencyAmount, ...]
    unvalued_items: int
    figures: tuple[CurrencyFigures, ...]
    open_lots: int
    closed_lots: int
    top_items: tuple[TopItem, ...]  # Up to TOP_ITEMS per currency
    recent_sales: tuple[RecentSale, ...]


def _top_items(rows):
    by_currency = defaultdict(list)
    for row in rows:
        for figures in row.figures:
            if figures.sales_count > figures.undefined_profit_sales:
                by_currency[figures.currency_unit].append(
                    TopItem(
                        item_id=row.item_id,
                        item_name=row.item_name,
                        currency_unit=figures.currency_unit,
                        profit=figures.profit,
                        units_sold=figures.units_sold,
                    )
                )
    top = []
    for currency in CurrencyUnit:
        ranked = sorted(by_currency[currency.value], key=lambda t: (-t.profit, t.item_name.lower()))
        top.extend(ranked[:TOP_ITEMS])
    return tuple(top)


def _recent_sales(sales, names):
    return tuple(
        RecentSale(
            sale_id=str(sale.id),
            item_id=str(sale.item_id),
            item_name=names.get(str(sale.item_id)),
            quantity_sold=sale.quantity_sold,
            amount_gained=sale.amount,
            currency_unit=sale.currency_unit,
            profit=sale.profit_amount,
            sold_at=sale.sold_at,
        )
        for sale in sales[:RECENT_SALES]
    )


def dashboard_summary(owner_id) -> DashboardSummary:
    rows = item_performance(owner_id)
    sales = current_domain.repository_for(Sale).for_owner(owner_id)
    lots = current_domain.repository_for(InventoryEntry).for_owner(owner_id)
    names = {str(item.id): item.name for item in current_domain.repository_for(Item).for_owner(owner_id)}

    return DashboardSummary(
        inventory_value=amounts_by_currency(
            (r.value_currency, r.remaining_value) for r in rows if r.value_currency is not None
        ),
        unvalued_items=sum(1 for r in rows if r.remaining_value is None and r.remaining_qty),
        figures=currency_figures(sales),
        open_lots=sum(1 for lot in lots if lot.status == LotStatus.OPEN.value),
        closed_lots=sum(1 for lot in lots if lot.status == LotStatus.CLOSED.value),
        top_items=_top_items(rows),
        recent_sales=_recent_sales(sales, names),
    )

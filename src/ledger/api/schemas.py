"""Pydantic request/response schemas for the ledger API.

These are external contracts, separate from the internal Protean commands.
Money crosses the wire as decimal strings; quantities are whole numbers.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ledger.shared.currency import CurrencyUnit


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
class CategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class CategoryIdResponse(BaseModel):
    category_id: str


class CategoryResponse(BaseModel):
    category_id: str
    name: str
    is_protected: bool
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------
class CreateItemRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    category_id: str | None = None
    image_url: str | None = None
    low_stock_threshold: int | None = Field(default=None, ge=0)


class UpdateItemRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    category_id: str | None = None
    image_url: str | None = None
    low_stock_threshold: int | None = Field(default=None, ge=0)


class ItemIdResponse(BaseModel):
    item_id: str


class ItemResponse(BaseModel):
    item_id: str
    name: str
    default_category_id: str
    image_url: str | None = None
    low_stock_threshold: int | None = None
    created_at: datetime | None = None


class TotalsResponse(BaseModel):
    item_id: str
    purchased_qty: int
    purchased_cost: Decimal
    sold_qty: int
    remaining_qty: int
    avg_cost: Decimal
    currency: str | None = None


class ProfitSummaryResponse(BaseModel):
    item_id: str
    revenue: Decimal
    cost: Decimal
    profit: Decimal
    margin_pct: Decimal


class SimulationRequest(BaseModel):
    quantity: int = Field(ge=1)
    sell_unit_price: Decimal = Field(gt=0)


class SimulatedLotUseSchema(BaseModel):
    lot_id: str
    bought_at: datetime | None = None
    unit_cost: Decimal
    qty_used: int
    cost_contribution: Decimal


class SimulationResponse(BaseModel):
    available: int
    simulate_qty: int
    sell_unit_price: Decimal
    projected_revenue: Decimal
    simulated_cogs: Decimal
    projected_profit: Decimal
    insufficient: bool
    breakdown: list[SimulatedLotUseSchema] = []


# ---------------------------------------------------------------------------
# Lots
# ---------------------------------------------------------------------------
class AddLotRequest(BaseModel):
    item_id: str
    quantity: int = Field(ge=1)
    unit_cost: Decimal = Field(ge=0)
    currency_unit: CurrencyUnit = CurrencyUnit.WL
    bought_at: datetime | None = None
    notes: str | None = None


class UpdateLotRequest(BaseModel):
    quantity: int | None = Field(default=None, ge=1)
    unit_cost: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None
    bought_at: datetime | None = None


class LotIdResponse(BaseModel):
    lot_id: str


class LotResponse(BaseModel):
    lot_id: str
    item_id: str
    snapshot_name: str
    snapshot_category_id: str
    quantity_bought: int
    unit_cost: Decimal
    currency_unit: str
    bought_at: datetime
    remaining_qty: int
    status: str
    notes: str | None = None


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------
class RecordSaleRequest(BaseModel):
    item_id: str
    quantity: int = Field(ge=1)
    amount_gained: Decimal = Field(gt=0)
    currency_unit: CurrencyUnit = CurrencyUnit.WL
    sold_at: datetime | None = None
    notes: str | None = None


class UpdateSaleRequest(BaseModel):
    quantity: int | None = Field(default=None, ge=1)
    amount_gained: Decimal | None = Field(default=None, gt=0)
    notes: str | None = None


class SaleIdResponse(BaseModel):
    sale_id: str


class CostRowSchema(BaseModel):
    lot_id: str
    unit_cost: Decimal
    qty_used: int


class SaleResponse(BaseModel):
    sale_id: str
    item_id: str
    quantity_sold: int
    amount_gained: Decimal
    currency_unit: str
    cost_breakdown: list[CostRowSchema]
    total_cost: Decimal
    profit: Decimal | None = None  # None: lot and sale currencies differ
    costing_method: str
    sold_at: datetime
    notes: str | None = None


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
class LowStockRowSchema(BaseModel):
    item_id: str
    item_name: str
    category_id: str
    category_name: str | None = None
    remaining_qty: int
    threshold: int


class CurrencyAmountSchema(BaseModel):
    currency_unit: str
    amount: Decimal


class CurrencyFiguresSchema(BaseModel):
    currency_unit: str
    revenue: Decimal
    cogs: Decimal
    profit: Decimal
    margin_pct: Decimal
    units_sold: int
    sales_count: int
    undefined_profit_sales: int = 0


class ItemPerformanceSchema(BaseModel):
    item_id: str
    item_name: str
    category_id: str
    figures: list[CurrencyFiguresSchema]
    units_sold: int
    remaining_qty: int
    remaining_value: Decimal | None = None  # None: lots span currencies
    value_currency: str | None = None
    undefined_profit_sales: int = 0


class CategoryPerformanceSchema(BaseModel):
    category_id: str
    category_name: str
    item_count: int
    figures: list[CurrencyFiguresSchema]
    units_sold: int
    remaining_qty: int
    remaining_value: list[CurrencyAmountSchema]
    unvalued_items: int = 0


class TopItemSchema(BaseModel):
    item_id: str
    item_name: str
    currency_unit: str
    profit: Decimal
    units_sold: int


class RecentSaleSchema(BaseModel):
    sale_id: str
    item_id: str
    item_name: str | None = None
    quantity_sold: int
    amount_gained: Decimal
    currency_unit: str
    profit: Decimal | None = None
    sold_at: datetime


class DashboardSummaryResponse(BaseModel):
    inventory_value: list[CurrencyAmountSchema]
    unvalued_items: int
    figures: list[CurrencyFiguresSchema]
    open_lots: int
    closed_lots: int
    top_items: list[TopItemSchema]
    recent_sales: list[RecentSaleSchema]

# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------
class CsvImportRequest(BaseModel):
    content: str


class RowErrorSchema(BaseModel):
    row: int
    message: str


class ImportReportResponse(BaseModel):
    imported: int
    failed: int
    coerced_currencies: int
    errors: list[RowErrorSchema] = []

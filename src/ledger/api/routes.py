"""FastAPI routes for the ledger: catalogue, lots, sales, reports and CSV."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from ledger import gateway
from ledger.aggregation.lifetime import profit_summary_for_item, totals_for_item
from ledger.api.audit import audited
from ledger.api.deps import Caller, get_caller
from ledger.api.schemas import (
    AddLotRequest,
    CategoryIdResponse,
    CategoryPerformanceSchema,
    CategoryRequest,
    CategoryResponse,
    CostRowSchema,
    CreateItemRequest,
    CsvImportRequest,
    DashboardSummaryResponse,
    ImportReportResponse,
    ItemIdResponse,
    ItemPerformanceSchema,
    ItemResponse,
    LotIdResponse,
    LotResponse,
    LowStockRowSchema,
    ProfitSummaryResponse,
    RecordSaleRequest,
    RowErrorSchema,
    SaleIdResponse,
    SaleResponse,
    SimulatedLotUseSchema,
    SimulationRequest,
    SimulationResponse,
    StatusResponse,
    TotalsResponse,
    UpdateItemRequest,
    UpdateLotRequest,
    UpdateSaleRequest,
)
from ledger.bulk.exports import export_lots_csv, export_sales_csv
from ledger.bulk.imports import import_lots_csv, import_sales_csv
from ledger.bulk.templates import lots_csv_template, sales_csv_template
from ledger.category.management import list_categories
from ledger.item.item import Item
from ledger.item.management import list_items
from ledger.lot.queries import distinct_available_items, lots_for_item, open_lots_for_item
from ledger.reports.dashboard import dashboard_summary
from ledger.reports.low_stock import low_stock_items
from ledger.reports.performance import category_performance, item_performance
from ledger.sale.queries import list_sales
from ledger.sale.sale import Sale
from ledger.shared.ownership import load_owned
from ledger.simulation.simulator import simulate


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------
def _item_response(item) -> ItemResponse:
    return ItemResponse(
        item_id=str(item.id),
        name=item.name,
        default_category_id=str(item.default_category_id),
        image_url=item.image_url,
        low_stock_threshold=item.low_stock_threshold,
        created_at=item.created_at,
    )


def _lot_response(lot) -> LotResponse:
    return LotResponse(
        lot_id=str(lot.id),
        item_id=str(lot.item_id),
        snapshot_name=lot.snapshot_name,
        snapshot_category_id=str(lot.snapshot_category_id),
        quantity_bought=lot.quantity_bought,
        unit_cost=lot.unit_cost_amount,
        currency_unit=lot.currency_unit,
        bought_at=lot.bought_at,
        remaining_qty=lot.remaining_qty,
        status=lot.status,
        notes=lot.notes,
    )


def _sale_response(sale) -> SaleResponse:
    return SaleResponse(
        sale_id=str(sale.id),
        item_id=str(sale.item_id),
        quantity_sold=sale.quantity_sold,
        amount_gained=sale.amount,
        currency_unit=sale.currency_unit,
        cost_breakdown=[CostRowSchema(**row) for row in sale.breakdown()],
        total_cost=sale.cost,
        profit=sale.profit_amount,
        costing_method=sale.costing_method,
        sold_at=sale.sold_at,
        notes=sale.notes,
    )


def _import_response(report) -> ImportReportResponse:
    return ImportReportResponse(
        imported=report.imported,
        failed=report.failed,
        coerced_currencies=report.coerced_currencies,
        errors=[RowErrorSchema(row=e.row, message=e.message) for e in report.errors],
    )


# ---------------------------------------------------------------------------
# Category Router
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/categories", tags=["categories"])


@category_router.post("", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CategoryRequest, caller: Caller = Depends(get_caller)) -> CategoryIdResponse:
    result = audited(gateway.create_category, caller)(body.name)
    return CategoryIdResponse(category_id=result)


@category_router.get("", response_model=list[CategoryResponse])
async def get_categories(caller: Caller = Depends(get_caller)) -> list[CategoryResponse]:
    return [
        CategoryResponse(category_id=str(c.id), name=c.name, is_protected=c.is_protected, created_at=c.created_at)
        for c in list_categories(caller.owner_id)
    ]


@category_router.put("/{category_id}", response_model=StatusResponse)
async def rename_category(
    category_id: str, body: CategoryRequest, caller: Caller = Depends(get_caller)
) -> StatusResponse:
    audited(gateway.rename_category, caller)(category_id, body.name)
    return StatusResponse()


@category_router.delete("/{category_id}", response_model=StatusResponse)
async def delete_category(category_id: str, caller: Caller = Depends(get_caller)) -> StatusResponse:
    audited(gateway.delete_category, caller)(category_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Item Router
# ---------------------------------------------------------------------------
item_router = APIRouter(prefix="/items", tags=["items"])


@item_router.post("", status_code=201, response_model=ItemIdResponse)
async def create_item(body: CreateItemRequest, caller: Caller = Depends(get_caller)) -> ItemIdResponse:
    result = audited(gateway.create_item, caller)(
        body.name,
        category_id=body.category_id,
        image_url=body.image_url,
        low_stock_threshold=body.low_stock_threshold,
    )
    return ItemIdResponse(item_id=result)


@item_router.get("", response_model=list[ItemResponse])
async def get_items(caller: Caller = Depends(get_caller)) -> list[ItemResponse]:
    return [_item_response(item) for item in list_items(caller.owner_id)]


@item_router.get("/available", response_model=list[ItemResponse])
async def get_available_items(caller: Caller = Depends(get_caller)) -> list[ItemResponse]:
    """Items with at least one open lot."""
    return [_item_response(item) for item in distinct_available_items(caller.owner_id)]


@item_router.get("/{item_id}", response_model=ItemResponse)
async def get_item(item_id: str, caller: Caller = Depends(get_caller)) -> ItemResponse:
    return _item_response(load_owned(Item, item_id, caller.owner_id))


@item_router.put("/{item_id}", response_model=StatusResponse)
async def update_item(item_id: str, body: UpdateItemRequest, caller: Caller = Depends(get_caller)) -> StatusResponse:
    audited(gateway.update_item, caller)(
        item_id,
        name=body.name,
        category_id=body.category_id,
        image_url=body.image_url,
        low_stock_threshold=body.low_stock_threshold,
    )
    return StatusResponse()


@item_router.delete("/{item_id}", response_model=StatusResponse)
async def delete_item(item_id: str, caller: Caller = Depends(get_caller)) -> StatusResponse:
    audited(gateway.delete_item, caller)(item_id)
    return StatusResponse()


@item_router.get("/{item_id}/totals", response_model=TotalsResponse)
async def get_item_totals(item_id: str, caller: Caller = Depends(get_caller)) -> TotalsResponse:
    return TotalsResponse(**asdict(totals_for_item(caller.owner_id, item_id)))


@item_router.get("/{item_id}/profit-summary", response_model=ProfitSummaryResponse)
async def get_profit_summary(item_id: str, caller: Caller = Depends(get_caller)) -> ProfitSummaryResponse:
    return ProfitSummaryResponse(**asdict(profit_summary_for_item(caller.owner_id, item_id)))


@item_router.post("/{item_id}/simulation", response_model=SimulationResponse)
async def simulate_sale(
    item_id: str, body: SimulationRequest, caller: Caller = Depends(get_caller)
) -> SimulationResponse:
    """Project a FIFO sale without recording anything."""
    result = simulate(caller.owner_id, item_id, body.quantity, body.sell_unit_price)
    return SimulationResponse(
        available=result.available,
        simulate_qty=result.simulate_qty,
        sell_unit_price=result.sell_unit_price,
        projected_revenue=result.projected_revenue,
        simulated_cogs=result.simulated_cogs,
        projected_profit=result.projected_profit,
        insufficient=result.insufficient,
        breakdown=[SimulatedLotUseSchema(**asdict(row)) for row in result.breakdown],
    )


@item_router.get("/{item_id}/lots", response_model=list[LotResponse])
async def get_item_lots(item_id: str, open_only: bool = False, caller: Caller = Depends(get_caller)) -> list[LotResponse]:
    lots = open_lots_for_item if open_only else lots_for_item
    return [_lot_response(lot) for lot in lots(caller.owner_id, item_id)]


# ---------------------------------------------------------------------------
# Lot Router
# ---------------------------------------------------------------------------
lot_router = APIRouter(prefix="/lots", tags=["lots"])


@lot_router.post("", status_code=201, response_model=LotIdResponse)
async def add_lot(body: AddLotRequest, caller: Caller = Depends(get_caller)) -> LotIdResponse:
    result = audited(gateway.add_lot, caller)(
        body.item_id,
        quantity=body.quantity,
        unit_cost=body.unit_cost,
        currency_unit=body.currency_unit,
        bought_at=body.bought_at,
        notes=body.notes,
    )
    return LotIdResponse(lot_id=result)


@lot_router.put("/{lot_id}", response_model=StatusResponse)
async def update_lot(lot_id: str, body: UpdateLotRequest, caller: Caller = Depends(get_caller)) -> StatusResponse:
    audited(gateway.update_lot, caller)(
        lot_id,
        quantity=body.quantity,
        unit_cost=body.unit_cost,
        notes=body.notes,
        bought_at=body.bought_at,
    )
    return StatusResponse()


@lot_router.delete("/{lot_id}", response_model=StatusResponse)
async def delete_lot(lot_id: str, caller: Caller = Depends(get_caller)) -> StatusResponse:
    audited(gateway.delete_lot, caller)(lot_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Sale Router
# ---------------------------------------------------------------------------
sale_router = APIRouter(prefix="/sales", tags=["sales"])


@sale_router.post("", status_code=201, response_model=SaleIdResponse)
async def record_sale(body: RecordSaleRequest, caller: Caller = Depends(get_caller)) -> SaleIdResponse:
    result = audited(gateway.record_sale, caller)(
        body.item_id,
        quantity=body.quantity,
        amount_gained=body.amount_gained,
        currency_unit=body.currency_unit,
        sold_at=body.sold_at,
        notes=body.notes,
    )
    return SaleIdResponse(sale_id=result)


@sale_router.get("", response_model=list[SaleResponse])
async def get_sales(item_id: str | None = None, caller: Caller = Depends(get_caller)) -> list[SaleResponse]:
    return [_sale_response(sale) for sale in list_sales(caller.owner_id, item_id=item_id)]


@sale_router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(sale_id: str, caller: Caller = Depends(get_caller)) -> SaleResponse:
    return _sale_response(load_owned(Sale, sale_id, caller.owner_id))


@sale_router.put("/{sale_id}", response_model=StatusResponse)
async def update_sale(sale_id: str, body: UpdateSaleRequest, caller: Caller = Depends(get_caller)) -> StatusResponse:
    audited(gateway.update_sale, caller)(
        sale_id,
        quantity=body.quantity,
        amount_gained=body.amount_gained,
        notes=body.notes,
    )
    return StatusResponse()


@sale_router.delete("/{sale_id}", response_model=StatusResponse)
async def delete_sale(sale_id: str, caller: Caller = Depends(get_caller)) -> StatusResponse:
    audited(gateway.delete_sale, caller)(sale_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Report Router
# ---------------------------------------------------------------------------
report_router = APIRouter(prefix="/reports", tags=["reports"])


@report_router.get("/low-stock", response_model=list[LowStockRowSchema])
async def get_low_stock(caller: Caller = Depends(get_caller)) -> list[LowStockRowSchema]:
    return [LowStockRowSchema(**asdict(row)) for row in low_stock_items(caller.owner_id)]


@report_router.get("/items", response_model=list[ItemPerformanceSchema])
async def get_item_performance(caller: Caller = Depends(get_caller)) -> list[ItemPerformanceSchema]:
    return [ItemPerformanceSchema(**asdict(row)) for row in item_performance(caller.owner_id)]


@report_router.get("/categories", response_model=list[CategoryPerformanceSchema])
async def get_category_performance(caller: Caller = Depends(get_caller)) -> list[CategoryPerformanceSchema]:
    return [CategoryPerformanceSchema(**asdict(row)) for row in category_performance(caller.owner_id)]


@report_router.get("/summary", response_model=DashboardSummaryResponse)
async def get_dashboard_summary(caller: Caller = Depends(get_caller)) -> DashboardSummaryResponse:
    return DashboardSummaryResponse(**asdict(dashboard_summary(caller.owner_id)))


# ---------------------------------------------------------------------------
# CSV Router
# ---------------------------------------------------------------------------
csv_router = APIRouter(prefix="/csv", tags=["csv"])

_TEMPLATES = {"lots": lots_csv_template, "sales": sales_csv_template}


@csv_router.get("/lots", response_class=PlainTextResponse)
async def download_lots(caller: Caller = Depends(get_caller)) -> PlainTextResponse:
    return PlainTextResponse(export_lots_csv(caller.owner_id), media_type="text/csv")


@csv_router.get("/sales", response_class=PlainTextResponse)
async def download_sales(caller: Caller = Depends(get_caller)) -> PlainTextResponse:
    return PlainTextResponse(export_sales_csv(caller.owner_id), media_type="text/csv")


@csv_router.post("/lots", response_model=ImportReportResponse)
async def upload_lots(body: CsvImportRequest, caller: Caller = Depends(get_caller)) -> ImportReportResponse:
    return _import_response(audited(import_lots_csv, caller)(body.content))


@csv_router.post("/sales", response_model=ImportReportResponse)
async def upload_sales(body: CsvImportRequest, caller: Caller = Depends(get_caller)) -> ImportReportResponse:
    return _import_response(audited(import_sales_csv, caller)(body.content))


@csv_router.get("/templates/{kind}", response_class=PlainTextResponse)
async def download_template(kind: str, caller: Caller = Depends(get_caller)) -> PlainTextResponse:
    template = _TEMPLATES.get(kind)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Unknown template: {kind}")
    return PlainTextResponse(template(), media_type="text/csv")

from ledger.api.errors import register_exception_handlers
from ledger.api.routes import (
    category_router,
    csv_router,
    item_router,
    lot_router,
    report_router,
    sale_router,
)

routers = [category_router, item_router, lot_router, sale_router, report_router, csv_router]

__all__ = [
    "category_router",
    "csv_router",
    "item_router",
    "lot_router",
    "register_exception_handlers",
    "report_router",
    "routers",
    "sale_router",
]

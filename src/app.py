"""LockLedger FastAPI application.

Web server that processes ledger commands synchronously via HTTP. Each
request is wrapped in the ledger domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay (memory stores by default,
# PostgreSQL for "production").
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ledger.domain import ledger  # noqa: E402

ledger.init()

_DOMAIN_PREFIXES = ("/categories", "/items", "/lots", "/sales", "/reports", "/csv")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="LockLedger API",
    description="Inventory costing and profit ledger",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ledger domain context for each ledger request."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        with ledger.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error mapping
# ---------------------------------------------------------------------------
from ledger.api import register_exception_handlers, routers  # noqa: E402

for router in routers:
    app.include_router(router)

register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    from ledger.costing import get_costing_strategy

    with ledger.domain_context():
        strategy = get_costing_strategy().name
    return JSONResponse(content={"status": "ok", "domain": ledger.name, "costing_strategy": strategy})

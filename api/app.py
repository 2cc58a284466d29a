"""FastAPI application setup module."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from api.settings import settings
from api.database.database import create_all_tables
from api.exceptions.api_exception import StoreUnavailableError
from api.endpoints.dashboard import router as dashboard_router
from api.endpoints.inventory import router as inventory_router
from api.endpoints.ledger import router as ledger_router
from api.endpoints.payments import router as payments_router
from api.endpoints.print_status import router as print_status_router
from api.endpoints.transactions import router as transactions_router
from api.endpoints.vendors import router as vendors_router
from api.endpoints.wires import router as wires_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Wire Ledger API",
    description="Wire issue/return ledger with FIFO lot reconciliation and vendor payments",
    version="1.0.0",
    debug=settings.DEBUG,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(vendors_router)
app.include_router(wires_router)
app.include_router(transactions_router)
app.include_router(ledger_router)
app.include_router(inventory_router)
app.include_router(payments_router)
app.include_router(print_status_router)
app.include_router(dashboard_router)


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def store_unavailable_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    """Answer store failures with a short 503 instead of a stack trace."""
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc.orig)
    error = StoreUnavailableError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.on_event("startup")
async def create_tables_in_debug() -> None:
    if settings.DEBUG:
        await create_all_tables()
        logger.info("Created missing tables from ORM metadata")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}

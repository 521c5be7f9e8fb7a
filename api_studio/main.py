"""
API Studio - FastAPI Application Entry Point

The request templating and execution engine of an API-testing client:
environments, variable resolution, sending through the forwarding proxy,
per-tab send state and request history.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .database import SessionLocal, init_db
from .exceptions import register_exception_handlers
from .routers import curl, environments, execute, history, tabs
from .services.dynamic_variables import default_registry
from .services.execution_controller import ExecutionController
from .services.history_service import restore_ledger
from .services.proxy_client import ProxyClient


logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup: schema, generator table, history restored from storage
    init_db()
    registry = default_registry().validate()

    db = SessionLocal()
    try:
        ledger = restore_ledger(db, config.HISTORY_CAPACITY)
    finally:
        db.close()

    app.state.controller = ExecutionController(
        proxy=ProxyClient(config.PROXY_URL),
        ledger=ledger,
        registry=registry,
        record_transport_errors=config.RECORD_TRANSPORT_ERRORS,
    )
    logger.info("Loaded %d dynamic variables", len(registry.names))
    logger.info("Restored %d history records; proxy at %s", len(ledger), config.PROXY_URL)
    yield


app = FastAPI(
    title="API Studio",
    description="Request templating and execution engine for an API-testing client",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Allow all origins for development; restrict in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "API Studio",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(environments.router)
app.include_router(execute.router)
app.include_router(tabs.router)
app.include_router(history.router)
app.include_router(curl.router)

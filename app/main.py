"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import engine, Base, SessionLocal
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import AppError, app_error_handler, global_exception_handler

# Import all models so SQLAlchemy knows about them
from app.domain.models.category import Category  # noqa: F401
from app.domain.models.client import Client  # noqa: F401
from app.domain.models.import_job import ImportJob  # noqa: F401
from app.domain.models.product import Product  # noqa: F401
from app.domain.models.sale import Sale, SaleItem  # noqa: F401
from app.domain.models.user import User  # noqa: F401

from app.application.services.auth_service import seed_admin
from app.infrastructure.repositories.user_repository import SQLAlchemyIdentityStore

# Import routers
from app.interfaces.api.auth import router as auth_router
from app.interfaces.api.products import router as products_router
from app.interfaces.api.clients import router as clients_router
from app.interfaces.api.categories import router as categories_router
from app.interfaces.api.sales import router as sales_router
from app.interfaces.api.sale_items import router as sale_items_router
from app.interfaces.api.imports import router as imports_router
from app.interfaces.api.exports import router as exports_router
from app.interfaces.api.reports import router as reports_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting Firmeza backend...", env=settings.ENVIRONMENT)

    # Create DB tables (no migrations: the schema is created at start-up)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    db = SessionLocal()
    try:
        seed_admin(SQLAlchemyIdentityStore(db))
    finally:
        db.close()

    yield

    logger.info("Firmeza backend stopped")


app = FastAPI(
    title="Firmeza — Back-office API",
    description="Clients, products, sales, spreadsheet import and PDF receipts",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Exception Handling
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Added last so it runs first on the way in
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(clients_router)
app.include_router(categories_router)
app.include_router(sales_router)
app.include_router(sale_items_router)
app.include_router(imports_router)
app.include_router(exports_router)
app.include_router(reports_router)


@app.get("/")
def root():
    return {
        "name": "Firmeza Backend",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}

# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the OrderDesk API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    OrderDeskException,
    orderdesk_exception_handler,
    supabase_exception_handler,
    validation_exception_handler,
)
from app.routers import admin_backfill, admin_users, health, orders, products, tasks
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the runtime configuration on startup and shutdown.
    """
    logger.info(f"Starting OrderDesk API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Order mail mode: {settings.ORDER_MAIL_MODE}, "
        f"business timezone: {settings.ORDER_TIMEZONE}"
    )

    yield

    logger.info("Shutting down OrderDesk API")


# Create FastAPI application
app = FastAPI(
    title="OrderDesk API",
    description="""
## Strawberry Order Intake API

Agencies place orders; administrators review them, adjust pricing and
status, and manage user accounts.

### How It Works

1. **Sign in** with Supabase Auth and send the access token as a Bearer token
2. **Fetch the catalog** - products and pieces-per-sheet options
3. **Place an order** - validated, numbered (`ORD-YYYYMMDD-NNNN`), priced and emailed
4. **Review orders** - admins see all orders; agencies see their own

### Order Rules

| Rule | Value |
|------|-------|
| Sheets | Positive even number |
| Winter strawberries | Multiples of 4 sheets |
| Delivery date | At least 3 days out |

### Quick Start

```bash
# 1. Products
curl http://localhost:8000/api/v1/products

# 2. Place an order
curl -X POST http://localhost:8000/api/v1/orders \\
  -H "Authorization: Bearer $TOKEN" \\
  -H "Content-Type: application/json" \\
  -d '{"productId": "p1", "quantity": 4, "piecesPerSheet": 36, ...}'

# 3. List orders for a month
curl "http://localhost:8000/api/v1/orders?month=2025-03" \\
  -H "Authorization: Bearer $TOKEN"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Current user, role and landing page",
        },
        {
            "name": "Products",
            "description": "Product catalog and pieces-per-sheet options",
        },
        {
            "name": "Orders",
            "description": "Order intake, order tables and admin edits",
        },
        {
            "name": "Admin",
            "description": "User, agency and data maintenance (administrators)",
        },
        {
            "name": "Tasks",
            "description": "Track background email tasks",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(OrderDeskException)
async def handle_orderdesk_exception(request: Request, exc: OrderDeskException):
    """Handle custom OrderDesk exceptions."""
    return await orderdesk_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_exception(request: Request, exc: SupabaseClientError):
    """Handle database wrapper errors."""
    return await supabase_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body / query validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Product catalog
app.include_router(
    products.router,
    prefix="/api/v1/products",
    tags=["Products"]
)

# Orders
app.include_router(
    orders.router,
    prefix="/api/v1/orders",
    tags=["Orders"]
)

# Admin: users and agencies
app.include_router(
    admin_users.router,
    prefix="/api/v1/admin/users",
    tags=["Admin"]
)

# Admin: backfill
app.include_router(
    admin_backfill.router,
    prefix="/api/v1/admin/backfill",
    tags=["Admin"]
)

# Task status endpoints
app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "OrderDesk API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }

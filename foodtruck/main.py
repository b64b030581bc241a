"""
FastAPI Application Entry Point

Food Truck Orders API - order CRUD for the customer and kitchen pages.

Endpoints:
    - GET    /api/health (also /api and /): Health check
    - GET    /api/orders: List orders
    - GET    /api/orders/{id}: Get one order
    - POST   /api/orders: Place an order
    - PATCH  /api/orders/{id}: Update an order (status changes from the kitchen)
    - DELETE /api/orders/{id}: Delete an order
    - DELETE /api/orders: Clear all orders

Run locally:
    python -m foodtruck.main
"""

import logging
import secrets
from typing import Any, List, Optional
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from foodtruck.core.clock import utc_now_iso
from foodtruck.core.config import Settings, get_settings, setup_logging
from foodtruck.core.errors import OrderAPIError, UnauthorizedError
from foodtruck.schemas import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    OrderCreate,
    OrderResponse,
    OrderUpdate,
)
from foodtruck.services.orders import OrderService, get_order_service
from foodtruck.services.storage import get_order_store

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    store = get_order_store()

    # Startup
    logger.info("=" * 60)
    logger.info(f"🍔 Starting {settings.app_name}")
    logger.info(f"   Version:      {settings.app_version}")
    logger.info(f"   Environment:  {settings.env_mode.value}")
    logger.info(f"   Storage:      {store.display_name}")
    logger.info(f"   API Endpoint: http://localhost:{settings.api_port}/api/orders")
    logger.info("=" * 60)

    await store.startup()

    missing = settings.validate_production_config()
    if missing:
        logger.warning(f"⚠️ Missing storage config: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await store.close()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Order-taking backend for a food truck: customer ordering and kitchen board.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware; also answers OPTIONS preflight requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

async def require_admin_token(
    x_admin_token: Optional[str] = Header(None, alias="x-admin-token"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Check X-Admin-Token when ADMIN_TOKEN is configured."""
    if not settings.admin_token:
        return
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.admin_token):
        raise UnauthorizedError(message="A valid X-Admin-Token header is required")


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================

@app.get("/", response_model=HealthResponse, tags=["Health"], include_in_schema=False)
@app.get("/api", response_model=HealthResponse, tags=["Health"], include_in_schema=False)
@app.get(
    "/api/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    service: OrderService = Depends(get_order_service),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """Report the storage backend and whether it is configured and reachable."""
    store = service.store

    return HealthResponse(
        status="OK",
        timestamp=utc_now_iso(),
        storage=store.display_name,
        configured=store.is_configured,
        reachable=await store.health_check(),
        environment=settings.env_mode.value,
    )


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.get(
    "/api/orders",
    response_model=List[OrderResponse],
    response_model_exclude_none=True,
    tags=["Orders"],
    summary="List Orders",
)
async def list_orders(
    service: OrderService = Depends(get_order_service),
) -> List[dict[str, Any]]:
    """Every order, in the order they were placed."""
    return await service.list_orders()


@app.get(
    "/api/orders/{order_id:int}",
    response_model=OrderResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> dict[str, Any]:
    """Get a specific order by ID."""
    return await service.get_order(order_id)


@app.post(
    "/api/orders",
    response_model=OrderResponse,
    response_model_exclude_none=True,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Place Order",
)
async def create_order(
    order_data: Optional[OrderCreate] = None,
    service: OrderService = Depends(get_order_service),
) -> dict[str, Any]:
    """
    Place a new order from the customer page.

    The order starts in "pending" and gets a clock-based id. A request
    without a body places an order made of defaults.
    """
    return await service.create_order(order_data or OrderCreate())


@app.patch(
    "/api/orders/{order_id:int}",
    response_model=OrderResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Update Order",
)
async def update_order(
    order_id: int,
    updates: Optional[OrderUpdate] = None,
    service: OrderService = Depends(get_order_service),
) -> dict[str, Any]:
    """Change an order, typically its status from the kitchen board."""
    return await service.update_order(order_id, updates or OrderUpdate())


@app.delete(
    "/api/orders/{order_id:int}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def delete_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> MessageResponse:
    """Delete a single order."""
    await service.delete_order(order_id)
    return MessageResponse(message="Order deleted successfully")


@app.delete(
    "/api/orders",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Clear All Orders",
    dependencies=[Depends(require_admin_token)],
)
async def clear_orders(
    service: OrderService = Depends(get_order_service),
) -> MessageResponse:
    """Remove every order (end of day reset)."""
    await service.clear_orders()
    return MessageResponse(message="All orders cleared successfully")


# =============================================================================
# CORS
# =============================================================================

@app.options("/{path:path}", include_in_schema=False)
async def options_any(path: str) -> Response:
    """Plain OPTIONS requests (no preflight headers) get an empty 200."""
    return Response(status_code=200)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(OrderAPIError)
async def order_api_exception_handler(request: Request, exc: OrderAPIError) -> JSONResponse:
    """Render order errors as {"error": ..., "message": ...}."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown paths and methods share one 404 body that echoes the request."""
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not found",
                "path": request.url.path,
                "method": request.method,
            },
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "message": problems},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception in {request.method} {request.url.path}: {exc}")

    content = {"error": "Internal server error"}
    if not settings.is_production:
        content["message"] = str(exc)

    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    uvicorn.run(
        "foodtruck.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )

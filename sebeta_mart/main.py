from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from pathlib import Path
from sebeta_mart.config import settings
from sebeta_mart.api.v1 import (
    auth, products, sellers, orders, seller_orders, delivery, buyer, search, subcities, taxonomy, dashboard
)
from sebeta_mart.api.v1 import admin_users, admin_sellers, admin_delivery, admin_transactions
from sebeta_mart.middleware.security import SecurityHeadersMiddleware, TimingMiddleware
import logging

# Configure logging
if not settings.DEBUG:
    from sebeta_mart.utils.logging_config import root_logger
    logger = logging.getLogger(__name__)
else:
    logger = logging.getLogger(__name__)

# Determine docs URLs based on environment
docs_url = "/docs" if settings.DEBUG else None
redoc_url = "/redoc" if settings.DEBUG else None

app = FastAPI(
    title=settings.APP_NAME,
    description="Sebeta Mart multi-vendor marketplace API",
    version=settings.APP_VERSION,
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url="/openapi.json" if settings.DEBUG else None
)

# Security Middleware (add first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(TimingMiddleware)

# CORS Middleware
# The session lives in a cookie, so the browser needs explicit origins with credentials
origins = settings.allowed_origins
if not origins:
    logger.warning("No ALLOWED_ORIGINS set; cross-origin requests will be rejected")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time"],
)


def _error_body(message: str, code: str, details=None) -> dict:
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "details": details
        }
    }


ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


# Exception Handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Shape HTTPException into the response envelope"""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    details = None if isinstance(exc.detail, str) else exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message, ERROR_CODES.get(exc.status_code, "HTTP_ERROR"), details),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors"""
    # Convert errors to JSON-serializable format
    def sanitize_error(error):
        if isinstance(error, dict):
            return {k: sanitize_error(v) for k, v in error.items()}
        elif isinstance(error, (list, tuple)):
            return [sanitize_error(item) for item in error]
        elif isinstance(error, bytes):
            return error.decode('utf-8', errors='replace')
        elif isinstance(error, (str, int, float, bool, type(None))):
            return error
        else:
            return str(error)

    errors = sanitize_error(exc.errors())
    # Surface the first message so the client can show it as-is
    first = errors[0].get("msg") if errors else None
    message = first.replace("Value error, ", "") if first else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(message, "VALIDATION_ERROR", errors)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "Internal server error",
            "SERVER_ERROR",
            str(exc) if settings.DEBUG else "An error occurred"
        )
    )


# Include Routers (paths the storefront calls, no version prefix)
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(products.catalog_router, tags=["Products"])
app.include_router(sellers.router, prefix="/sellers", tags=["Sellers"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(orders.single_order_router, prefix="/singleOrder", tags=["Orders"])
app.include_router(orders.single_order_router, prefix="/singleorder", include_in_schema=False)
app.include_router(seller_orders.router, tags=["Seller Orders"])
app.include_router(delivery.router, prefix="/delivery", tags=["Delivery"])
app.include_router(delivery.persons_router, tags=["Delivery"])
app.include_router(buyer.router, prefix="/buyer", tags=["Buyer"])
app.include_router(search.router, prefix="/search", tags=["Search"])
app.include_router(subcities.router, prefix="/subcities", tags=["Subcities"])
app.include_router(taxonomy.categories_router, prefix="/categories", tags=["Catalog"])
app.include_router(taxonomy.subcategories_router, prefix="/subcategories", tags=["Catalog"])
app.include_router(taxonomy.brands_router, prefix="/brands", tags=["Catalog"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])

# Admin Routers
app.include_router(admin_users.router, prefix="/admin", tags=["Admin"])
app.include_router(admin_sellers.router, prefix="/admin/sellers", tags=["Admin Sellers"])
app.include_router(admin_delivery.router, prefix="/admin/delivery_profiles", tags=["Admin Delivery"])
app.include_router(admin_transactions.router, prefix="/admin/transactions", tags=["Admin Transactions"])

# Uploaded images
upload_dir = Path(settings.UPLOAD_DIR)
upload_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "docs": docs_url
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME
    }

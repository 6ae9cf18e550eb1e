"""
Commerce BFF - Main FastAPI Application

Single entry point for the mobile app API. Routers live in bff.routers;
this module wires middleware, error handlers and lifespan.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bff.config import get_settings, validate_env
from bff.db import get_redis_optional
from bff.errors import ERROR_INTERNAL, ERROR_VALIDATION_FAILED, AppError, ValidationError
from bff.logging import get_logger
from bff.middleware import AccessLogMiddleware, RateLimitMiddleware, SecurityHeadersMiddleware
from bff.payments import close_razorpay_service
from bff.routers import build_api_router
from bff.store.session import EXPOSED_HEADERS
from bff.upstream import UpstreamError, close_commerce_client

logger = get_logger(__name__)

settings = get_settings()
API_PREFIX = f"/api/{settings.api_version}"


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    validate_env()
    logger.info("BFF Server starting (environment: %s)", settings.environment)
    logger.info("API Base path: %s", API_PREFIX)
    yield
    # Shutdown
    await close_commerce_client()
    await close_razorpay_service()


app = FastAPI(
    title="Commerce BFF",
    description="Mobile backend-for-frontend for a WooCommerce store",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    RateLimitMiddleware,
    max_requests=settings.rate_limit_max_requests,
    window_seconds=settings.rate_limit_window_seconds,
    redis_client=get_redis_optional(),
    enabled=not settings.is_development,
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=[
        "Content-Type", "Authorization", "X-API-Key",
        "X-WC-Store-API-Nonce", "X-WC-Payment-Method", "Cart-Token",
    ],
    expose_headers=[h.strip() for h in EXPOSED_HEADERS.split(",")],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(AccessLogMiddleware)

app.include_router(build_api_router(settings.api_version))


# ==================== ERROR HANDLERS ====================

def _error_body(message: str, code: str) -> dict:
    return {"success": False, "message": message, "code": code}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("Error Handler: %s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    else:
        logger.warning("Error Handler: %s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)

    body = _error_body(exc.message, exc.code)
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    if isinstance(exc, UpstreamError) and exc.data is not None:
        body["woocommerce_error"] = exc.data
    if settings.is_development and exc.details is not None:
        body["details"] = exc.details

    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg"),
        }
        for err in exc.errors()
    ]
    body = _error_body(ERROR_VALIDATION_FAILED, "validation_error")
    body["errors"] = errors
    return JSONResponse(status_code=400, content=body)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        logger.warning("404 - %s %s", request.method, request.url.path)
        body = _error_body(f"Route not found: {request.method} {request.url.path}", "route_not_found")
        body["path"] = request.url.path
        body["method"] = request.method
        return JSONResponse(status_code=404, content=body)

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), "http_error"),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body(ERROR_INTERNAL, "internal_error"))


# ==================== ROOT ====================

@app.get("/")
async def root():
    """Service banner with endpoint map"""
    return {
        "success": True,
        "message": "WooCommerce BFF Server",
        "version": settings.api_version,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "products": f"{API_PREFIX}/products",
            "categories": f"{API_PREFIX}/categories",
            "tags": f"{API_PREFIX}/tags",
            "attributes": f"{API_PREFIX}/attributes",
            "customers": f"{API_PREFIX}/customers",
            "orders": f"{API_PREFIX}/orders",
            "cart": f"{API_PREFIX}/cart",
            "store": f"{API_PREFIX}/store",
            "payment": f"{API_PREFIX}/payment",
            "config": f"{API_PREFIX}/config",
        },
    }

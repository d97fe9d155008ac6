import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shopcatalog.api.v1 import products, shops
from shopcatalog.core.config import settings
from shopcatalog.core.database import build_engine, build_session_maker
from shopcatalog.core.exceptions import AppError, InternalError, field_errors
from shopcatalog.core.logging_config import setup_logging
from shopcatalog.core.redis import build_redis, close_redis
from shopcatalog.middleware.metrics import PrometheusMiddleware, metrics_endpoint
from shopcatalog.middleware.rate_limit import RateLimitMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build shared storage handles once and release them on shutdown."""
    setup_logging(settings)
    logger.info("Starting application...")

    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)

    app.state.redis = build_redis(settings) if settings.RATE_LIMIT_ENABLED else None

    yield

    logger.info("Shutting down, disposing connections")
    if app.state.redis is not None:
        await close_redis(app.state.redis)
    await engine.dispose()


app = FastAPI(
    title="Shop Catalog",
    version="1.0.0",
    description="Shop product catalog with filtered listing and owner-only mutations",
    lifespan=lifespan,
)

# Prometheus Metrics Middleware (must be first to capture all requests)
app.add_middleware(PrometheusMiddleware)

# Rate Limiting Middleware (must be before CORS)
app.add_middleware(
    RateLimitMiddleware,
    user_limit=settings.RATE_LIMIT_USER,
    ip_limit=settings.RATE_LIMIT_IP,
    user_header=settings.USER_ID_HEADER,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.__cause__!r}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "invalid request", "errors": field_errors(exc.errors())},
    )


# Include API routers
app.include_router(products.router, prefix="/api/v1/products", tags=["products"])
app.include_router(shops.router, prefix="/api/v1/shops", tags=["shops"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Prometheus metrics endpoint
app.add_route("/metrics", metrics_endpoint)

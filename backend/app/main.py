"""
Crypto Charts Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Live data: {settings.enable_live_data}")

    # Initialize Redis cache (klines proxy only)
    from app.services.cache.redis_client import init_redis, close_redis
    redis_client = None
    if settings.enable_live_data:
        redis_client = await init_redis()
    if redis_client:
        logger.info("Redis cache connected")
    else:
        logger.info("Redis unavailable or unused - using in-memory cache")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_redis()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Crypto Charts Dashboard API

    ## Architecture
    - **Series Generator**: Deterministic, seedable OHLCV random walk
    - **Klines Proxy**: Live candles from the Binance public API (cached)
    - **Indicator Engine**: SMA, EMA and RSI overlays (pure Python/NumPy)

    ## Core Principles
    - Every request recomputes from scratch
    - Same symbol, length and seed give the same bars
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow both frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Crypto Charts Backend API",
        "docs": "/docs",
        "health": "/health",
    }

"""
GAIA Cosmetics Backend
FastAPI application entry point

- Tables created and demo data seeded on startup
- Error sanitization middleware
- Every error answered as {"message": ...}
- Health endpoint with DB ping
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.api.routes import auth, users, products, categories, content, orders
from gaia.core.config import settings
from gaia.core.database import get_db, get_db_session, init_db
from gaia.core.error_handler import ErrorSanitizationMiddleware, register_exception_handlers
from gaia.db.seed import seed_database

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed demo data on startup."""
    await init_db()
    logger.info("Database tables ready")

    if settings.SEED_ON_STARTUP:
        async with get_db_session() as db:
            await seed_database(db)
    else:
        logger.info("Seeding DISABLED via config")

    yield

    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="Storefront API for GAIA Cosmetics: catalog, accounts, checkout and orders",
    version=settings.API_VERSION,
)

register_exception_handlers(app)

# Catch anything the exception handlers did not
app.add_middleware(ErrorSanitizationMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGIN,
    # Credentials cannot be combined with a wildcard origin
    allow_credentials="*" not in settings.CORS_ORIGIN,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(content.router, prefix="/api/content", tags=["Content"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])


@app.get("/api", tags=["Health"])
async def root():
    return {
        "message": "Welcome to GAIA Cosmetics API",
        "version": settings.API_VERSION,
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """Returns 503 if the database is unreachable."""
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {e}")
        health_status["database"] = f"error: {type(e).__name__}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status

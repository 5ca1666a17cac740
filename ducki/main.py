from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
import logging

from ducki.config import settings
from ducki.database import init_db, close_db, async_session_maker
from ducki.core.exceptions import DuckiError
from ducki.core.redis import init_redis, close_redis

# Import routers
from ducki.api import auth, items, outfits, profile

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Reduce SQLAlchemy log verbosity
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_PER_MINUTE])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info(f"Starting {settings.APP_NAME} API...")

    await init_db()
    await init_redis()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down...")
    await close_redis()
    await close_db()
    logger.info("Application shutdown complete")


async def ducki_error_handler(request: Request, exc: DuckiError) -> JSONResponse:
    """Upload, store, access and auth failures; the message is shown to the user verbatim"""
    logger.warning(f"{request.method} {request.url.path} failed: {exc.__class__.__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Ducki Closet API - catalog clothing items and compose outfits",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(DuckiError, ducki_error_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware - must be added BEFORE other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["Authentication"])
app.include_router(items.router, prefix=f"{settings.API_V1_PREFIX}/items", tags=["Closet"])
app.include_router(outfits.router, prefix=f"{settings.API_V1_PREFIX}/outfits", tags=["Outfits"])
app.include_router(profile.router, prefix=f"{settings.API_V1_PREFIX}/profile", tags=["Profile"])


@app.get("/")
async def root():
    response = {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }

    # Only show docs links in development
    if settings.DEBUG:
        response["docs"] = "/docs"

    return response


@app.get("/health")
async def health_check():
    """Health check endpoint with database connectivity check"""
    health_status = {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION
    }

    try:
        async with async_session_maker() as db:
            await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"] = f"disconnected: {str(e)}"
        logger.error(f"Health check failed: {e}")

    return health_status


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ducki.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )

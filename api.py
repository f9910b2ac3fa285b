"""
CourseHub FastAPI Application

Main entry point for the CourseHub API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import MongoDB, set_main_database, get_main_database
from common.utils import success_response

# App-specific imports
from coursehub.config import settings
from coursehub.handlers import register_exception_handlers

# Import routers
from coursehub.routers import (
    course_router,
    user_router,
    educator_router,
    webhooks_router,
)

# Import service initialization
from coursehub.dependencies import init_all_services, get_progress_service


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    print("Starting CourseHub API...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
    )
    set_main_database(main_db)
    print(f"Connected to database: {settings.MONGODB_DATABASE}")

    init_all_services(db=main_db.db, settings=settings)
    await get_progress_service().ensure_indexes()
    print("All services initialized successfully!")

    if not settings.IDENTITY_WEBHOOK_SECRET:
        logger.warning("IDENTITY_WEBHOOK_SECRET is not set; user provisioning events will be rejected")

    print("CourseHub API started successfully!")

    yield

    # Shutdown
    print("Shutting down CourseHub API...")
    await main_db.disconnect()
    print("CourseHub API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="CourseHub API",
    description="Course catalogue, enrollment, progress and ratings",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

register_exception_handlers(app)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
API_PREFIX = "/api"

app.include_router(course_router, prefix=API_PREFIX, tags=["Course"])
app.include_router(user_router, prefix=API_PREFIX, tags=["User"])
app.include_router(educator_router, prefix=API_PREFIX, tags=["Educator"])
app.include_router(webhooks_router, prefix=API_PREFIX, tags=["Webhooks"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Reports "degraded" while MongoDB does not answer a ping.
    """
    database_ok = await get_main_database().ping()
    return success_response(
        status="ok" if database_ok else "degraded",
        version="1.0.0",
        database=database_ok,
    )


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )

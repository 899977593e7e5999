import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Security, status
from fastapi.security import APIKeyHeader
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import db
from routes.location_routes import router as location_router
from routes.admin_routes import router as admin_router
from routes.import_routes import router as import_router
from routes.favorite_routes import router as favorite_router
from routes.note_routes import router as note_router
from routes.review_routes import router as review_router
from routes.report_routes import router as report_router
from routes.history_routes import router as history_router
from routes.utility_routes import router as utility_router

# Configure logging based on settings
Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.log_file),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# API Key Authentication
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)):
    """Verify API key for authentication.

    Args:
        api_key: The API key from the X-API-Key header

    Returns:
        True if authentication successful

    Raises:
        HTTPException: If API key is invalid or missing
    """
    if not settings.api_key:  # If no API key is set, allow all requests (dev mode)
        return True
    if not api_key or api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key"
        )
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown events."""
    logger.info("Starting Community Resource Map API...")
    if not db.verify_connectivity():
        logger.warning("Cannot connect to Neo4j database")
    else:
        logger.info("Successfully connected to Neo4j database")

    yield

    logger.info("Shutting down Community Resource Map API...")
    db.close()


tags_metadata = [
    {
        "name": "health",
        "description": "Health check endpoints for monitoring API status",
    },
    {
        "name": "locations",
        "description": "Browse, search, submit, edit and delete community resource locations",
    },
    {
        "name": "admin",
        "description": "Moderation queues: pending submissions, deletion requests and reports",
    },
    {
        "name": "import",
        "description": "Batch import of locations from JSON documents",
    },
    {
        "name": "favorites",
        "description": "A user's saved locations",
    },
    {
        "name": "notes",
        "description": "Private per-user notes on locations",
    },
    {
        "name": "reviews",
        "description": "Star ratings and comments on locations",
    },
    {
        "name": "reports",
        "description": "Reports of incorrect location information",
    },
    {
        "name": "history",
        "description": "Recently viewed locations",
    },
    {
        "name": "utilities",
        "description": "Hours conversion, distance and geocoding helpers",
    },
]

app = FastAPI(
    title=settings.app_name,
    description="""
    ## Overview
    Backend for a map of community resources: food banks, shelters, clinics
    and online-only services.

    ## Features
    - **Locations**: physical places with coordinates, or online-only services with a contact channel
    - **Moderation**: submissions and deletions from regular users wait for admin approval
    - **Batch Import**: validate, preview and import JSON documents of locations
    - **Engagement**: favorites, private notes, reviews and reports

    ## Authentication
    Use the `X-API-Key` header for authentication. The gateway forwards the
    signed-in user in `X-User-Id` and `X-User-Role`.
    """,
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint (no auth required)
@app.get("/health",
         tags=["health"],
         summary="Health Check",
         description="Check the health status of the API and database connectivity",
         response_description="Health status information")
async def health_check():
    """Check API and database health status.

    Returns:
        dict: Health status with API status, database status, and version
    """
    db_status = "healthy" if db.verify_connectivity() else "unhealthy"
    return {
        "status": "healthy",
        "database": db_status,
        "version": settings.app_version
    }


@app.get("/",
         summary="API Information",
         description="Get basic information about the Community Resource Map API",
         response_description="API metadata")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "documentation": "/docs"
    }


# Include routers with authentication
for router in [
    location_router,
    admin_router,
    import_router,
    favorite_router,
    note_router,
    review_router,
    report_router,
    history_router,
    utility_router,
]:
    app.include_router(router, dependencies=[Depends(verify_api_key)])


# Error handlers
@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Handle 404 Not Found errors.

    Args:
        request: The incoming request
        exc: The exception that was raised
    """
    # If it's an HTTPException with a detail, preserve it
    if hasattr(exc, 'detail'):
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail}
        )
    return JSONResponse(
        status_code=404,
        content={"error": "Resource not found", "path": str(request.url)}
    )


@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Handle 500 Internal Server errors."""
    logger.error(f"Internal server error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )

"""
Main application entry point
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.engine import get_engine
from .api.routes import router as api_router
from .core.config import settings
from .core.logging import setup_logging, get_logger

# Set up logging
setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Discovers public APIs, catalogs them and executes endpoints and flows against them",
    version="1.0.0"
)

# Get CORS origins from settings
cors_origins = settings.get_cors_origins()
logger.info("Configuring CORS", allowed_origins=cors_origins)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=f"{settings.API_V1_STR}/meta")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"ok": False, "detail": "Internal server error"}
    )


@app.on_event("startup")
async def startup_event():
    """Load the built-in catalog on startup"""
    logger.info("Starting application", environment=settings.ENVIRONMENT)
    if not settings.QUICK_INGEST_ON_STARTUP:
        return
    try:
        summary = await get_engine().initialize()
        logger.info("Catalog ready", total_apis=summary.get("totalApis"), flows=summary.get("flows"))
    except Exception as e:
        logger.error("Startup initialization failed", error=str(e))
        # The service still starts; POST /init retries


@app.on_event("shutdown")
async def shutdown_event():
    await get_engine().close()
    logger.info("Application stopped")


@app.get("/")
async def root():
    return {"message": "Meta-Adapter API Integration Engine"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from bson.errors import InvalidDocument
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.database import create_client, init_db
from app.core.logging_config import setup_logging
from app.api.endpoints import auth, bids, health, jobs

setup_logging(
    log_level=settings.LOG_LEVEL,
    json_logs=settings.JSON_LOGS,
    service=settings.PROJECT_NAME,
    environment=settings.ENVIRONMENT,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Owns the MongoDB client: opened here, handed to endpoints through
    app.state and get_db, closed on shutdown.
    """
    # Startup
    logger.info("Starting up Uplift Orbit API...")
    client = create_client()
    app.state.mongo_client = client
    app.state.db = client[settings.MONGO_DB_NAME]
    init_db(app.state.db)
    logger.info(f"Connected to database {settings.MONGO_DB_NAME}")

    yield

    # Shutdown
    logger.info("Shutting down Uplift Orbit API...")
    client.close()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Freelance job marketplace API: job postings, bids and cookie sessions",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    """Map store failures to an opaque 500."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(InvalidDocument)
@app.exception_handler(OverflowError)
async def unstorable_document_handler(request: Request, exc: Exception):
    """Map payloads BSON cannot encode to a 400."""
    logger.warning(f"Unstorable document on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": "Document contains values that cannot be stored"})


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(jobs.router)
app.include_router(bids.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=not settings.is_production,
        log_level=settings.LOG_LEVEL.lower()
    )

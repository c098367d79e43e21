import logging
from typing import Optional

from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.server_api import ServerApi

from app.core.config import settings

logger = logging.getLogger(__name__)

JOBS_COLLECTION = "jobs"
BIDS_COLLECTION = "bids"


def create_client(url: Optional[str] = None) -> MongoClient:
    """
    Create the MongoDB client shared by every request.

    The client is created once by the application lifespan and closed on
    shutdown; endpoints never construct their own.
    """
    return MongoClient(
        url or settings.MONGODB_URL,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
    )


def get_db(request: Request) -> Database:
    """
    Dependency function to get the application database.
    Used in FastAPI endpoints with Depends(get_db)
    """
    return request.app.state.db


def init_db(db: Database) -> None:
    """
    Initialize database.

    Pings the deployment and creates the indexes the handlers rely on.
    The (email, jobId) unique index backs the duplicate proposal check.
    """
    db.command("ping")
    logger.info("Pinged MongoDB deployment successfully")

    db[BIDS_COLLECTION].create_index(
        [("email", ASCENDING), ("jobId", ASCENDING)],
        unique=True,
        name="unique_bidder_per_job",
    )
    db[BIDS_COLLECTION].create_index("buyer.email")
    db[JOBS_COLLECTION].create_index("buyer.email")
    db[JOBS_COLLECTION].create_index("category")

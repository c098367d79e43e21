"""
CRUD operations for the bids collection.

Creating a bid also bumps the parent job's bid_count.
"""

import logging
from typing import List, Optional
from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.results import UpdateResult

from app.core.database import BIDS_COLLECTION
from app.crud import job as job_crud
from app.schemas.bid import BidCreateRequest, BidStatusUpdateRequest

logger = logging.getLogger(__name__)

# A bid keeps its bidder and job for life
IMMUTABLE_FIELDS = ("_id", "email", "jobId")


class DuplicateBidError(Exception):
    """The bidder already has a proposal on this job."""

    def __init__(self, email: str, job_id: str):
        self.email = email
        self.job_id = job_id
        super().__init__(f"{email} already bid on job {job_id}")


def get_by_bidder_and_job(db: Database, email: str, job_id: str) -> Optional[dict]:
    """Find the bid a bidder placed on a job, if any."""
    return db[BIDS_COLLECTION].find_one({"email": email, "jobId": job_id})


def create(db: Database, bid_data: BidCreateRequest) -> ObjectId:
    """
    Store a new bid and increment the parent job's bid_count.

    Flow:
    1. Reject if the (email, jobId) pair already has a bid
    2. Insert the bid (the unique index catches a concurrent twin)
    3. Increment bid_count on the job; on a store error the bid is removed again

    Args:
        db: Database handle
        bid_data: Validated bid data

    Returns:
        ID assigned to the new bid

    Raises:
        DuplicateBidError: If the bidder already has a proposal on the job
        PyMongoError: If the store fails
    """
    document = bid_data.model_dump(mode="json", by_alias=True, exclude_none=True)
    document.pop("_id", None)
    email, job_id = document["email"], document["jobId"]

    if get_by_bidder_and_job(db, email, job_id):
        raise DuplicateBidError(email, job_id)

    try:
        result = db[BIDS_COLLECTION].insert_one(document)
    except DuplicateKeyError:
        raise DuplicateBidError(email, job_id)

    try:
        counted = job_crud.increment_bid_count(db, ObjectId(job_id))
    except PyMongoError:
        logger.error(f"bid_count increment failed for job {job_id}, removing bid {result.inserted_id}")
        db[BIDS_COLLECTION].delete_one({"_id": result.inserted_id})
        raise

    if counted.matched_count == 0:
        logger.warning(f"Bid {result.inserted_id} references missing job {job_id}")

    return result.inserted_id


def get_by_bidder_email(db: Database, email: str) -> List[dict]:
    """Retrieve the bids a bidder has submitted."""
    return list(db[BIDS_COLLECTION].find({"email": email}))


def get_by_buyer_email(db: Database, email: str) -> List[dict]:
    """Retrieve the bids received on jobs owned by the given buyer."""
    return list(db[BIDS_COLLECTION].find({"buyer.email": email}))


def update_status(db: Database, bid_id: ObjectId, status_data: BidStatusUpdateRequest) -> Optional[UpdateResult]:
    """
    Merge the supplied fields (typically status) into a bid.

    Returns:
        UpdateResult, or None if the payload carries no writable fields
    """
    fields = status_data.model_dump(mode="json", exclude_unset=True)
    for field in IMMUTABLE_FIELDS:
        fields.pop(field, None)

    if not fields:
        return None

    return db[BIDS_COLLECTION].update_one({"_id": bid_id}, {"$set": fields})

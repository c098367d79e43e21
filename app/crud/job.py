"""
CRUD operations for the jobs collection.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

import re
from typing import Any, Dict, List, Optional
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.results import DeleteResult, UpdateResult

from app.core.database import JOBS_COLLECTION
from app.schemas.job import JobCreateRequest, JobUpdateRequest

# Fields the server maintains itself; never taken from client payloads
PROTECTED_FIELDS = ("_id", "bid_count")


def build_search_query(category: Optional[str] = None, search: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the filter shared by paginated listing and counting.

    Args:
        category: Optional exact category filter
        search: Optional case-insensitive substring matched against the title

    Returns:
        MongoDB filter document
    """
    query: Dict[str, Any] = {
        "title": {"$regex": re.escape(search or ""), "$options": "i"}
    }

    if category:
        query["category"] = category

    return query


def get_all(db: Database) -> List[dict]:
    """Retrieve every job, unfiltered."""
    return list(db[JOBS_COLLECTION].find())


def get_multi(
    db: Database,
    page: int = 1,
    size: int = 10,
    category: Optional[str] = None,
    sort: Optional[str] = None,
    search: Optional[str] = None
) -> List[dict]:
    """
    Retrieve one page of jobs matching the search filter.

    Args:
        db: Database handle
        page: 1-based page number
        size: Page size
        category: Optional category filter
        sort: "asc" for earliest deadline first, any other value for latest first
        search: Optional title substring

    Returns:
        List of job documents
    """
    cursor = db[JOBS_COLLECTION].find(build_search_query(category, search))

    if sort:
        direction = ASCENDING if sort == "asc" else DESCENDING
        # _id breaks ties so equal deadlines page deterministically
        cursor = cursor.sort([("deadline", direction), ("_id", direction)])

    return list(cursor.skip((page - 1) * size).limit(size))


def count(db: Database, category: Optional[str] = None, search: Optional[str] = None) -> int:
    """Count jobs matching the same filter as get_multi."""
    return db[JOBS_COLLECTION].count_documents(build_search_query(category, search))


def get_by_id(db: Database, job_id: ObjectId) -> Optional[dict]:
    """
    Retrieve a job by its ID.

    Returns:
        Job document if found, None otherwise
    """
    return db[JOBS_COLLECTION].find_one({"_id": job_id})


def get_by_buyer_email(db: Database, email: str) -> List[dict]:
    """Retrieve the jobs posted by the given buyer."""
    return list(db[JOBS_COLLECTION].find({"buyer.email": email}))


def create(db: Database, job_data: JobCreateRequest) -> ObjectId:
    """
    Create a new job in the database.

    Args:
        db: Database handle
        job_data: Validated job creation data

    Returns:
        ID assigned by the store
    """
    document = job_data.model_dump(mode="json", exclude_none=True)
    for field in PROTECTED_FIELDS:
        document.pop(field, None)
    document["bid_count"] = 0

    result = db[JOBS_COLLECTION].insert_one(document)
    return result.inserted_id


def update(db: Database, job_id: ObjectId, job_data: JobUpdateRequest) -> Optional[UpdateResult]:
    """
    Overwrite the supplied fields of a job, inserting it if missing.

    The upserted document may carry an ID other than `job_id`; callers
    should read `upserted_id` from the result.

    Returns:
        UpdateResult, or None if the payload carries no writable fields
    """
    fields = job_data.model_dump(mode="json", exclude_unset=True)
    for field in PROTECTED_FIELDS:
        fields.pop(field, None)

    if not fields:
        return None

    return db[JOBS_COLLECTION].update_one({"_id": job_id}, {"$set": fields}, upsert=True)


def delete(db: Database, job_id: ObjectId) -> DeleteResult:
    """
    Delete a job by ID.

    Bids placed on the job are left in place.
    """
    return db[JOBS_COLLECTION].delete_one({"_id": job_id})


def increment_bid_count(db: Database, job_id: ObjectId) -> UpdateResult:
    """Add one to the job's denormalized bid counter."""
    return db[JOBS_COLLECTION].update_one({"_id": job_id}, {"$inc": {"bid_count": 1}})

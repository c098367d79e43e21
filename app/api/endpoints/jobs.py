import logging
from typing import List, Optional
from bson import ObjectId
from fastapi import APIRouter, HTTPException, Depends, Query
from pymongo.database import Database

from app.core.database import get_db
from app.core.deps import parse_object_id, require_email_owner
from app.crud import job as job_crud
from app.schemas.common import DeleteResultResponse, InsertResultResponse, UpdateResultResponse
from app.schemas.job import JobCountResponse, JobCreateRequest, JobResponse, JobUpdateRequest
from app.schemas.session import Identity

router = APIRouter(tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.get("/jobs", response_model=List[JobResponse])
def list_all_jobs(db: Database = Depends(get_db)):
    """List every job posting, unfiltered."""
    return job_crud.get_all(db)


@router.get("/allJobs", response_model=List[JobResponse])
def list_jobs_paged(
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    filter: Optional[str] = None,
    sort: Optional[str] = None,
    search: Optional[str] = None,
    db: Database = Depends(get_db)
):
    """
    List one page of jobs.

    Args:
        page: 1-based page number
        size: Jobs per page (max: 100)
        filter: Optional category
        sort: "asc" sorts by deadline ascending, any other value descending
        search: Case-insensitive substring of the title
    """
    return job_crud.get_multi(db, page=page, size=size, category=filter, sort=sort, search=search)


@router.get("/jobsCount", response_model=JobCountResponse)
def count_jobs(
    filter: Optional[str] = None,
    search: Optional[str] = None,
    db: Database = Depends(get_db)
):
    """Count the jobs matching the /allJobs filter, for pagination."""
    return JobCountResponse(count=job_crud.count(db, category=filter, search=search))


@router.get("/job/{id}", response_model=Optional[JobResponse])
def get_job(job_id: ObjectId = Depends(parse_object_id), db: Database = Depends(get_db)):
    """
    Retrieve a job by ID.

    Returns null when no job has this ID.
    """
    return job_crud.get_by_id(db, job_id)


@router.get("/jobs/{email}", response_model=List[JobResponse])
def list_buyer_jobs(
    email: str,
    identity: Identity = Depends(require_email_owner),
    db: Database = Depends(get_db)
):
    """List the jobs posted by the signed-in buyer."""
    return job_crud.get_by_buyer_email(db, email)


@router.post("/job", response_model=InsertResultResponse)
def create_job(request: JobCreateRequest, db: Database = Depends(get_db)):
    """Create a new job posting."""
    job_id = job_crud.create(db, request)
    logger.info(f"Created job {job_id}: {request.title}")
    return InsertResultResponse(inserted_id=str(job_id))


@router.put("/job/{id}", response_model=UpdateResultResponse)
def update_job(
    request: JobUpdateRequest,
    job_id: ObjectId = Depends(parse_object_id),
    db: Database = Depends(get_db)
):
    """
    Update a job, creating it when the ID does not exist.

    When a job is created, its ID is reported as upsertedId.
    """
    result = job_crud.update(db, job_id, request)

    if result is None:
        raise HTTPException(status_code=400, detail="No fields to update")

    logger.info(f"Updated job {job_id} (matched={result.matched_count}, upserted={result.upserted_id})")
    return UpdateResultResponse.from_result(result)


@router.delete("/job/{id}", response_model=DeleteResultResponse)
def delete_job(job_id: ObjectId = Depends(parse_object_id), db: Database = Depends(get_db)):
    """
    Delete a job by ID.

    Deleting a missing job reports deletedCount 0.
    """
    result = job_crud.delete(db, job_id)
    logger.info(f"Deleted job {job_id} (deleted={result.deleted_count})")
    return DeleteResultResponse(acknowledged=result.acknowledged, deleted_count=result.deleted_count)

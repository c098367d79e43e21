import logging
from typing import List
from bson import ObjectId
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.responses import PlainTextResponse
from pymongo.database import Database

from app.core.database import get_db
from app.core.deps import parse_object_id, require_email_owner
from app.crud import bid as bid_crud
from app.schemas.bid import BidCreateRequest, BidResponse, BidStatusUpdateRequest
from app.schemas.common import InsertResultResponse, UpdateResultResponse
from app.schemas.session import Identity

router = APIRouter(tags=["Bids"])
logger = logging.getLogger(__name__)

DUPLICATE_BID_MESSAGE = "You have already made a proposal for this job!"


@router.post("/bid", response_model=InsertResultResponse)
def create_bid(request: BidCreateRequest, db: Database = Depends(get_db)):
    """
    Submit a proposal on a job.

    A bidder gets one proposal per job; a second one is rejected with a
    plain-text 400.
    The job's bid_count is incremented on success.
    """
    try:
        bid_id = bid_crud.create(db, request)
    except bid_crud.DuplicateBidError as e:
        logger.info(f"Rejected duplicate bid: {e}")
        return PlainTextResponse(DUPLICATE_BID_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)

    logger.info(f"Created bid {bid_id} by {request.email} on job {request.job_id}")
    return InsertResultResponse(inserted_id=str(bid_id))


@router.get("/mybids/{email}", response_model=List[BidResponse])
def list_my_bids(
    email: str,
    identity: Identity = Depends(require_email_owner),
    db: Database = Depends(get_db)
):
    """List the proposals submitted by the signed-in bidder."""
    return bid_crud.get_by_bidder_email(db, email)


@router.get("/bidRequests/{email}", response_model=List[BidResponse])
def list_bid_requests(
    email: str,
    identity: Identity = Depends(require_email_owner),
    db: Database = Depends(get_db)
):
    """List the proposals received on the signed-in buyer's jobs."""
    return bid_crud.get_by_buyer_email(db, email)


@router.patch("/bid/{id}", response_model=UpdateResultResponse)
def update_bid_status(
    request: BidStatusUpdateRequest,
    bid_id: ObjectId = Depends(parse_object_id),
    db: Database = Depends(get_db)
):
    """
    Update a bid's status (or other proposal fields).

    Status values are not restricted; the client uses
    Pending, In Progress, Rejected and Complete.
    """
    result = bid_crud.update_status(db, bid_id, request)

    if result is None:
        raise HTTPException(status_code=400, detail="No fields to update")

    logger.info(f"Updated bid {bid_id} (matched={result.matched_count})")
    return UpdateResultResponse.from_result(result)

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, Optional
from bson import ObjectId

from app.schemas.common import SubmittedEmail, check_bson_integers, stringify_object_id
from app.schemas.job import BuyerInfo


class BidCreateRequest(BaseModel):
    """
    Schema for submitting a proposal on a job.
    Proposal fields beyond the declared ones (deadline, comment, ...) are stored as submitted.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    email: SubmittedEmail
    job_id: str = Field(..., alias="jobId")
    buyer: BuyerInfo
    price: Optional[float] = Field(None, ge=0)
    status: str = "Pending"

    @field_validator("job_id")
    @classmethod
    def validate_job_id(cls, v: str) -> str:
        if not ObjectId.is_valid(v):
            raise ValueError("jobId must be a valid job id")
        return v

    @model_validator(mode="after")
    def check_extra_fields(self):
        check_bson_integers(self.model_extra or {})
        return self


class BidStatusUpdateRequest(BaseModel):
    """Fields merged into a bid, typically just the status"""
    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None

    @model_validator(mode="after")
    def check_extra_fields(self):
        check_bson_integers(self.model_extra or {})
        return self


class BidResponse(BaseModel):
    """Schema for bid response"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id")
    email: Optional[str] = None
    job_id: Optional[str] = Field(None, alias="jobId")
    buyer: Optional[Dict[str, Any]] = None
    price: Optional[float] = None
    status: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        return stringify_object_id(v)

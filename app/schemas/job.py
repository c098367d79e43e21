from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, Optional
from datetime import date, datetime

from app.schemas.common import SubmittedEmail, check_bson_integers, stringify_object_id


def truncate_to_date(value: Any) -> Any:
    """Reduce a date-time deadline (e.g. "2025-01-01T18:30:00.000Z") to its date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class BuyerInfo(BaseModel):
    """Job owner embedded in jobs and bids"""
    model_config = ConfigDict(extra="allow")

    email: SubmittedEmail
    name: Optional[str] = None
    photo: Optional[str] = None

    @model_validator(mode="after")
    def check_extra_fields(self):
        check_bson_integers(self.model_extra or {})
        return self


class JobCreateRequest(BaseModel):
    """
    Schema for posting a new job.
    Fields not declared here are stored as submitted.
    """
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[date] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    buyer: BuyerInfo

    @field_validator("deadline", mode="before")
    @classmethod
    def normalize_deadline(cls, v: Any) -> Any:
        return truncate_to_date(v)

    @model_validator(mode="after")
    def check_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise ValueError("max_price must be greater than or equal to min_price")
        return self

    @model_validator(mode="after")
    def check_extra_fields(self):
        check_bson_integers(self.model_extra or {})
        return self


class JobUpdateRequest(BaseModel):
    """Schema for editing a job; only the supplied fields are written"""
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[date] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    buyer: Optional[BuyerInfo] = None

    @field_validator("deadline", mode="before")
    @classmethod
    def normalize_deadline(cls, v: Any) -> Any:
        return truncate_to_date(v)

    @model_validator(mode="after")
    def check_extra_fields(self):
        check_bson_integers(self.model_extra or {})
        return self


class JobResponse(BaseModel):
    """Schema for job response"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    buyer: Optional[Dict[str, Any]] = None
    bid_count: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        return stringify_object_id(v)


class JobCountResponse(BaseModel):
    count: int

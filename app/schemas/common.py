"""
Field types, validators and write-result schemas shared by the job and bid endpoints.

Field names on the wire follow the MongoDB driver result shape
(insertedId, matchedCount, ...).
"""

from typing import Annotated, Any, Optional
from bson import ObjectId
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# BSON stores integers as signed 64-bit
BSON_INT_MIN = -(2 ** 63)
BSON_INT_MAX = 2 ** 63 - 1


def stringify_object_id(value: Any) -> Any:
    """Render ObjectId values as their 24-hex string."""
    if isinstance(value, ObjectId):
        return str(value)
    return value


def check_email_format(value: str) -> str:
    """
    Validate the address format but keep the submitted string.

    Owner checks compare the stored address with the raw `{email}` path
    parameter, so the address is never rewritten.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}")
    return value


SubmittedEmail = Annotated[str, AfterValidator(check_email_format)]


def check_bson_integers(value: Any, path: str = "") -> None:
    """Raise ValueError if a nested integer does not fit a BSON int64."""
    if isinstance(value, bool):
        return
    if isinstance(value, int):
        if not BSON_INT_MIN <= value <= BSON_INT_MAX:
            raise ValueError(f"{path or 'value'} is out of range for a 64-bit integer")
    elif isinstance(value, dict):
        for key, item in value.items():
            check_bson_integers(item, f"{path}.{key}" if path else str(key))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            check_bson_integers(item, f"{path}[{index}]")


class InsertResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    inserted_id: str = Field(..., alias="insertedId")


class UpdateResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    matched_count: int = Field(..., alias="matchedCount")
    modified_count: int = Field(..., alias="modifiedCount")
    upserted_count: int = Field(0, alias="upsertedCount")
    upserted_id: Optional[str] = Field(None, alias="upsertedId")

    @classmethod
    def from_result(cls, result) -> "UpdateResultResponse":
        """Build from a pymongo UpdateResult."""
        upserted_id = result.upserted_id
        return cls(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_count=0 if upserted_id is None else 1,
            upserted_id=stringify_object_id(upserted_id),
        )


class DeleteResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    deleted_count: int = Field(..., alias="deletedCount")

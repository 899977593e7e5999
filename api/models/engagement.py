from typing import Optional

from pydantic import BaseModel, Field, field_validator


REPORT_STATUSES = ["pending", "reviewed", "resolved", "dismissed"]


class LocationRef(BaseModel):
    """Reference to a location by id, used to favorite it or record a view."""
    location_id: str = Field(..., alias="locationId", description="Location id")

    class Config:
        populate_by_name = True


class NoteRequest(BaseModel):
    """Personal note text. One note per user and location."""
    note: str = Field(..., min_length=1, max_length=5000, description="Note text")


class ReviewCreate(BaseModel):
    """Review left by a user on a location."""
    rating: int = Field(..., ge=1, le=5, description="Star rating from 1 to 5", example=4)
    comment: Optional[str] = Field(None, max_length=2000, description="Review text")


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReportCreate(BaseModel):
    """Report of incorrect information about a location."""
    reason: str = Field(..., min_length=1, description="What is wrong", example="Wrong hours")
    details: Optional[str] = Field(None, max_length=2000, description="Additional details")


class ReportStatusUpdate(BaseModel):
    status: str = Field(..., description="pending, reviewed, resolved or dismissed")

    @field_validator('status')
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in REPORT_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(REPORT_STATUSES)}")
        return v

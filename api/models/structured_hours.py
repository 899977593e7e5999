from typing import Dict

from pydantic import BaseModel, Field, field_validator


WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class DayHours(BaseModel):
    """Opening window for a single weekday. Times are "HH:MM" or empty."""

    open: str = Field("", description="Opening time", example="09:00")
    close: str = Field("", description="Closing time", example="17:00")
    closed: bool = Field(False, description="Closed all day")


def _default_days() -> Dict[str, DayHours]:
    return {day: DayHours() for day in WEEKDAYS}


class StructuredHours(BaseModel):
    """Day-by-day editing form of a location's free-text ``hours`` string.

    Never persisted; it is collapsed back into the text form with
    ``format_hours_string``.
    """

    days: Dict[str, DayHours] = Field(default_factory=_default_days)
    special_hours: str = Field(
        "",
        alias="specialHours",
        description="Free-text override; when set it replaces the computed string"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "days": {
                    "monday": {"open": "09:00", "close": "17:00", "closed": False},
                    "saturday": {"open": "10:00", "close": "14:00", "closed": False},
                    "sunday": {"open": "", "close": "", "closed": True}
                },
                "specialHours": ""
            }
        }

    @field_validator('days')
    @classmethod
    def fill_missing_days(cls, v: Dict[str, DayHours]) -> Dict[str, DayHours]:
        """Accept partial input; unknown keys are rejected, missing days get defaults."""
        unknown = [day for day in v if day not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        return {day: v.get(day, DayHours()) for day in WEEKDAYS}

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


DEFAULT_ICON = "location_on"


class LocationBase(BaseModel):
    """Community resource location (food bank, shelter, clinic, online service).

    Serialized with camelCase keys (``zipCode``, ``onlineOnly``) to match the
    map frontend and the batch import file format.
    """

    name: str = Field(..., description="Display name of the resource", example="Downtown Food Bank")

    # Address
    address: Optional[str] = Field(None, description="Street address", example="123 Main St")
    city: Optional[str] = Field(None, description="City", example="San Diego")
    state: Optional[str] = Field(None, description="Two-letter state code", example="CA")
    zip_code: Optional[str] = Field(None, description="ZIP code", example="92101")

    # Coordinates
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude in degrees", example=32.7157)
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude in degrees", example=-117.1611)

    online_only: bool = Field(False, description="Service has no physical location")

    # Details
    description: Optional[str] = Field(None, description="Free-text description")
    phone: Optional[str] = Field(None, description="Phone number", example="(619) 555-1234")
    email: Optional[str] = Field(None, description="Contact email")
    website: Optional[str] = Field(None, description="Website URL")
    hours: Optional[str] = Field(None, description="Weekly hours", example="Mon-Fri 09:00-17:00")
    notes: Optional[str] = Field(None, description="Public notes")
    icon: str = Field(DEFAULT_ICON, description="Map marker icon name")

    # Tags
    categories: List[str] = Field(default_factory=list, description="Service categories")
    resources: List[str] = Field(default_factory=list, description="Resources offered")
    benefits: List[str] = Field(default_factory=list, description="Benefits such as 'Free' or 'No ID Required'")
    photos: List[str] = Field(default_factory=list, description="Photo URLs")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True

    @field_validator('state')
    @classmethod
    def normalize_state(cls, v: Optional[str]) -> Optional[str]:
        """Store state as an upper-case two-letter code."""
        if v:
            return v.strip().upper()[:2]
        return v


class LocationCreate(LocationBase):
    """Request model for submitting a new location.

    A location is either physical (address plus coordinates, where the
    coordinates may be geocoded later) or online-only (at least one contact
    channel). Never neither.
    """

    @model_validator(mode='after')
    def validate_location_kind(self):
        """Enforce the physical / online-only invariant."""
        if not self.name or not self.name.strip():
            raise ValueError("Missing required field: name")

        if self.online_only:
            if not (self.website or self.email or self.phone):
                raise ValueError(
                    "Online-only services must have at least one: website, email, or phone"
                )
            return self

        if not self.address or not self.address.strip():
            raise ValueError("Missing required field: address")

        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")

        return self

    @property
    def needs_geocoding(self) -> bool:
        return not self.online_only and (self.latitude is None or self.longitude is None)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Downtown Food Bank",
                "address": "123 Main St",
                "city": "San Diego",
                "state": "CA",
                "zipCode": "92101",
                "latitude": 32.7157,
                "longitude": -117.1611,
                "phone": "(619) 555-1234",
                "hours": "Mon-Fri 09:00-17:00, Sat 10:00-14:00",
                "categories": ["Food"],
                "resources": ["Food Pantry", "Hot Meals"],
                "benefits": ["Free", "No ID Required"],
                "icon": "restaurant_menu",
                "onlineOnly": False
            }
        }


class LocationUpdate(BaseModel):
    """Model for partial location updates. Edits overwrite in place."""

    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    online_only: Optional[bool] = None
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    hours: Optional[str] = None
    notes: Optional[str] = None
    icon: Optional[str] = None
    categories: Optional[List[str]] = None
    resources: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    photos: Optional[List[str]] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("name cannot be blank")
        return v

    @field_validator('state')
    @classmethod
    def normalize_state(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return v.strip().upper()[:2]
        return v

"""
Pydantic schemas for venue and venue configuration request/response validation.
"""

from typing import Optional
from pydantic import BaseModel, Field

from seating.schemas.base import PatchModel


class VenueCreate(BaseModel):
    owner_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    max_people: int = Field(..., gt=0)


class VenuePatch(PatchModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    max_people: Optional[int] = Field(None, gt=0)


class VenueUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    max_people: int = Field(..., gt=0)


class VenueResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    max_people: int

    model_config = {"from_attributes": True}


class VenueConfigurationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    max_people: int = Field(..., gt=0)


class VenueConfigurationPatch(PatchModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    max_people: Optional[int] = Field(None, gt=0)


class VenueConfigurationUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    max_people: int = Field(..., gt=0)


class AvailabilityUpdate(BaseModel):
    available: bool


class VenueConfigurationResponse(BaseModel):
    id: str
    venue_id: str
    name: str
    max_people: int
    available: bool

    model_config = {"from_attributes": True}

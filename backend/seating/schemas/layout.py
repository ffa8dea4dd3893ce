"""
Pydantic schemas for seats and tables of a venue configuration.
"""

from typing import Any, ClassVar, Optional
from pydantic import BaseModel, Field

from seating.domain.models import Seat, Table
from seating.schemas.base import PatchModel


class SeatCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    seat_class: str = Field(..., min_length=1, max_length=64)
    next_to: list[str] = Field(default_factory=list)
    table_id: Optional[str] = None
    geometry: Optional[dict[str, Any]] = None


class SeatPatch(PatchModel):
    NULLABLE: ClassVar[frozenset[str]] = frozenset({"next_to", "table_id", "geometry"})

    name: Optional[str] = Field(None, min_length=1, max_length=64)
    seat_class: Optional[str] = Field(None, min_length=1, max_length=64)
    next_to: Optional[list[str]] = None
    table_id: Optional[str] = None
    geometry: Optional[dict[str, Any]] = None


class SeatUpdate(BaseModel):
    """Complete replacement; omitted optional fields are reset."""

    name: str = Field(..., min_length=1, max_length=64)
    seat_class: str = Field(..., min_length=1, max_length=64)
    next_to: list[str] = Field(default_factory=list)
    table_id: Optional[str] = None
    geometry: dict[str, Any] = Field(default_factory=dict)


class SeatResponse(BaseModel):
    id: str
    name: str
    seat_class: str
    venue_config_id: str
    next_to: list[str]
    table_id: Optional[str]
    geometry: dict[str, Any]

    @classmethod
    def from_seat(cls, seat: Seat) -> "SeatResponse":
        return cls(
            id=seat.id,
            name=seat.name,
            seat_class=seat.seat_class,
            venue_config_id=seat.venue_config_id,
            next_to=sorted(seat.next_to),
            table_id=seat.table_id,
            geometry=dict(seat.geometry),
        )


class TableCreate(BaseModel):
    min_seats: int = Field(..., gt=0)
    max_seats: int = Field(..., gt=0)
    geometry: Optional[dict[str, Any]] = None


class TablePatch(PatchModel):
    NULLABLE: ClassVar[frozenset[str]] = frozenset({"geometry"})

    min_seats: Optional[int] = Field(None, gt=0)
    max_seats: Optional[int] = Field(None, gt=0)
    geometry: Optional[dict[str, Any]] = None


class TableUpdate(BaseModel):
    min_seats: int = Field(..., gt=0)
    max_seats: int = Field(..., gt=0)
    geometry: dict[str, Any] = Field(default_factory=dict)


class TableResponse(BaseModel):
    id: str
    venue_config_id: str
    min_seats: int
    max_seats: int
    geometry: dict[str, Any]

    @classmethod
    def from_table(cls, table: Table) -> "TableResponse":
        return cls(
            id=table.id,
            venue_config_id=table.venue_config_id,
            min_seats=table.min_seats,
            max_seats=table.max_seats,
            geometry=dict(table.geometry),
        )

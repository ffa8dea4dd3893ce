"""
Pydantic schemas for events, on-sale listings and seat maps.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, Field

from seating.domain.models import SeatAvailability, SeatStatus, TableAvailability
from seating.schemas.base import PatchModel
from seating.schemas.layout import SeatResponse, TableResponse


class EventCreate(BaseModel):
    owner_id: str = Field(..., min_length=1, max_length=64)
    venue_config_id: str
    max_people: int = Field(..., gt=0)
    on_sale: bool = False


class EventPatch(PatchModel):
    max_people: Optional[int] = Field(None, gt=0)
    on_sale: Optional[bool] = None


class EventUpdate(BaseModel):
    max_people: int = Field(..., gt=0)
    on_sale: bool = False


class EventResponse(BaseModel):
    id: str
    owner_id: str
    venue_config_id: str
    max_people: int
    on_sale: bool

    model_config = {"from_attributes": True}


class EventListResponse(BaseModel):
    events: list[EventResponse]
    page: int
    perpage: int
    cached: bool = False


class EventCancelResponse(BaseModel):
    event_id: str
    cancelled_orders: list[str]


class SeatMapSeat(BaseModel):
    kind: Literal["seat"] = "seat"
    seat: SeatResponse
    status: SeatStatus


class SeatMapTable(BaseModel):
    kind: Literal["table"] = "table"
    table: TableResponse
    seat_ids: list[str]
    free_seat_ids: list[str]


class SeatMapResponse(BaseModel):
    event_id: str
    items: list[Union[SeatMapSeat, SeatMapTable]]
    page: int
    perpage: int

    @staticmethod
    def entry(item: Union[SeatAvailability, TableAvailability]) -> Union[SeatMapSeat, SeatMapTable]:
        if isinstance(item, SeatAvailability):
            return SeatMapSeat(seat=SeatResponse.from_seat(item.seat), status=item.state.status)
        return SeatMapTable(
            table=TableResponse.from_table(item.table),
            seat_ids=item.seat_ids,
            free_seat_ids=item.free_seat_ids,
        )

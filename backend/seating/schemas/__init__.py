from seating.schemas.venue import (
    VenueCreate, VenuePatch, VenueUpdate, VenueResponse,
    VenueConfigurationCreate, VenueConfigurationPatch, VenueConfigurationUpdate,
    VenueConfigurationResponse, AvailabilityUpdate,
)
from seating.schemas.layout import (
    SeatCreate, SeatPatch, SeatUpdate, SeatResponse,
    TableCreate, TablePatch, TableUpdate, TableResponse,
)
from seating.schemas.event import (
    EventCreate, EventPatch, EventUpdate, EventResponse, EventListResponse,
    EventCancelResponse, SeatMapResponse,
)
from seating.schemas.order import (
    OrderCreate, OrderContinue, SeatHoldRequest, AutoSelectRequest,
    OrderResponse, OrderSummaryResponse, AutoSelectResponse, OrderListResponse,
)

__all__ = [
    "VenueCreate", "VenuePatch", "VenueUpdate", "VenueResponse",
    "VenueConfigurationCreate", "VenueConfigurationPatch", "VenueConfigurationUpdate",
    "VenueConfigurationResponse", "AvailabilityUpdate",
    "SeatCreate", "SeatPatch", "SeatUpdate", "SeatResponse",
    "TableCreate", "TablePatch", "TableUpdate", "TableResponse",
    "EventCreate", "EventPatch", "EventUpdate", "EventResponse", "EventListResponse",
    "EventCancelResponse", "SeatMapResponse",
    "OrderCreate", "OrderContinue", "SeatHoldRequest", "AutoSelectRequest",
    "OrderResponse", "OrderSummaryResponse", "AutoSelectResponse", "OrderListResponse",
]

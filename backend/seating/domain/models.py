"""
Domain models for venues, layouts, events and orders.

Catalog records (Venue, VenueConfiguration, Seat, Table, Event) are frozen:
the catalog replaces them wholesale on update. Orders are mutable and owned by
the OrderLedger; their fields change only under the order's lock.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Self


@dataclass(frozen=True)
class Venue:
    id: str
    owner_id: str
    name: str
    max_people: int


@dataclass(frozen=True)
class VenueConfiguration:
    """A named seating layout of a venue, reusable across events."""

    id: str
    venue_id: str
    name: str
    max_people: int
    available: bool = False


@dataclass(frozen=True)
class Seat:
    id: str
    name: str
    seat_class: str
    venue_config_id: str
    next_to: frozenset[str] = frozenset()
    table_id: Optional[str] = None
    geometry: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Table:
    """Seats sharing a table; a party should fit min_seats..max_seats."""

    id: str
    venue_config_id: str
    min_seats: int
    max_seats: int
    geometry: Mapping[str, Any] = field(default_factory=dict)

    def admits_party(self, party_size: int) -> bool:
        return self.min_seats <= party_size <= self.max_seats


@dataclass(frozen=True)
class Event:
    id: str
    owner_id: str
    venue_config_id: str
    max_people: int
    on_sale: bool = False


class OrderStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    CANCELLED = "cancelled"


@dataclass
class Order:
    id: str
    user_id: str
    event_id: str
    expires: float
    created_at: float
    status: OrderStatus = OrderStatus.ACTIVE
    held_seats: set[str] = field(default_factory=set)

    def is_expired(self, now: float) -> bool:
        return now > self.expires


class SeatStatus(str, Enum):
    FREE = "free"
    HELD = "held"
    RESERVED = "reserved"


@dataclass(frozen=True)
class SeatState:
    """Availability of one seat at one event."""

    status: SeatStatus = SeatStatus.FREE
    order_id: Optional[str] = None

    @classmethod
    def free(cls) -> Self:
        return cls()

    @classmethod
    def held(cls, order_id: str) -> Self:
        return cls(SeatStatus.HELD, order_id)

    @classmethod
    def reserved(cls, order_id: str) -> Self:
        return cls(SeatStatus.RESERVED, order_id)

    @property
    def is_free(self) -> bool:
        return self.status is SeatStatus.FREE

    def encode(self) -> str:
        if self.is_free:
            return SeatStatus.FREE.value
        return f"{self.status.value}:{self.order_id}"

    @classmethod
    def decode(cls, raw: Optional[str]) -> Self:
        if not raw or raw == SeatStatus.FREE.value:
            return cls.free()
        status, _, order_id = raw.partition(":")
        return cls(SeatStatus(status), order_id)


@dataclass(frozen=True)
class SeatAvailability:
    """A seat of an event's layout joined with its current state."""

    seat: Seat
    state: SeatState


@dataclass(frozen=True)
class TableAvailability:
    table: Table
    seat_ids: list[str]
    free_seat_ids: list[str]


@dataclass(frozen=True)
class OrderSummary:
    order: Order
    seats: list[Seat]

    @property
    def seat_count(self) -> int:
        return len(self.seats)

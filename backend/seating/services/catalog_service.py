"""
In-memory catalog of venues, layouts and events.

Precondition rules enforced here:
  - A configuration must be available to host a new or on-sale event,
    and cannot become unavailable while an on-sale event uses it.
  - Seats and tables can only be deleted while their configuration is
    unavailable.
  - A configuration can only be deleted when unavailable and unreferenced
    by any event; its seats and tables go with it.
  - A venue can only be deleted once it has no configurations.
  - An event can only be deleted once it is off sale.

Seat adjacency (`next_to`) is kept symmetric on every write.
"""

import dataclasses
import uuid
from typing import Any, Iterable, Mapping, Optional, Sequence

from seating.core.logging import get_logger
from seating.domain.errors import (
    EventNotFoundError,
    InvalidArgumentError,
    PreconditionFailedError,
    SeatNotFoundError,
    TableNotFoundError,
    VenueConfigurationNotFoundError,
    VenueNotFoundError,
)
from seating.domain.models import Event, Seat, Table, Venue, VenueConfiguration
from seating.services.interfaces.catalog import Catalog

logger = get_logger(__name__)

VENUE_FIELDS = {"name", "max_people"}
VENUE_CONFIGURATION_FIELDS = {"name", "max_people"}
SEAT_FIELDS = {"name", "seat_class", "next_to", "table_id", "geometry"}
TABLE_FIELDS = {"min_seats", "max_seats", "geometry"}
EVENT_FIELDS = {"max_people", "on_sale"}


def _new_id() -> str:
    return uuid.uuid4().hex


def _check_changes(changes: Mapping[str, Any], allowed: set[str]) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise InvalidArgumentError(f"Cannot update fields: {', '.join(sorted(unknown))}")


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        raise InvalidArgumentError(f"{name} must be positive")


def _check_geometry(geometry: Any) -> dict:
    if geometry is None:
        return {}
    if not isinstance(geometry, Mapping):
        raise InvalidArgumentError("geometry must be an object")
    return dict(geometry)


class InMemoryCatalog(Catalog):
    """Dict-backed catalog. Read-mostly; no method body awaits."""

    def __init__(self):
        self._venues: dict[str, Venue] = {}
        self._configurations: dict[str, VenueConfiguration] = {}
        self._seats: dict[str, Seat] = {}
        self._tables: dict[str, Table] = {}
        self._events: dict[str, Event] = {}

    # --- Venues ---

    async def create_venue(self, owner_id: str, name: str, max_people: int) -> Venue:
        _check_positive("max_people", max_people)
        venue = Venue(id=_new_id(), owner_id=owner_id, name=name, max_people=max_people)
        self._venues[venue.id] = venue
        logger.info("venue_created", venue_id=venue.id, owner_id=owner_id)
        return venue

    async def get_venue(self, venue_id: str) -> Venue:
        venue = self._venues.get(venue_id)
        if venue is None:
            raise VenueNotFoundError(venue_id)
        return venue

    async def update_venue(self, venue_id: str, changes: Mapping[str, Any]) -> Venue:
        venue = await self.get_venue(venue_id)
        _check_changes(changes, VENUE_FIELDS)
        updated = dataclasses.replace(venue, **changes)
        _check_positive("max_people", updated.max_people)
        for config in self._configurations_of(venue_id):
            if config.max_people > updated.max_people:
                raise InvalidArgumentError("max_people is below a configuration's capacity")
        self._venues[venue_id] = updated
        return updated

    async def delete_venue(self, venue_id: str) -> None:
        await self.get_venue(venue_id)
        if self._configurations_of(venue_id):
            raise PreconditionFailedError("Venue still has configurations")
        del self._venues[venue_id]
        logger.info("venue_deleted", venue_id=venue_id)

    async def venues_by_owner(self, owner_id: str) -> list[Venue]:
        return [venue for venue in self._venues.values() if venue.owner_id == owner_id]

    # --- Venue configurations ---

    async def create_venue_configuration(self, venue_id: str, name: str, max_people: int) -> VenueConfiguration:
        venue = await self.get_venue(venue_id)
        _check_positive("max_people", max_people)
        if max_people > venue.max_people:
            raise InvalidArgumentError("max_people exceeds the venue's capacity")
        config = VenueConfiguration(id=_new_id(), venue_id=venue_id, name=name, max_people=max_people)
        self._configurations[config.id] = config
        logger.info("venue_configuration_created", venue_config_id=config.id, venue_id=venue_id)
        return config

    async def get_venue_configuration(self, venue_config_id: str) -> VenueConfiguration:
        config = self._configurations.get(venue_config_id)
        if config is None:
            raise VenueConfigurationNotFoundError(venue_config_id)
        return config

    async def update_venue_configuration(
        self, venue_config_id: str, changes: Mapping[str, Any]
    ) -> VenueConfiguration:
        config = await self.get_venue_configuration(venue_config_id)
        _check_changes(changes, VENUE_CONFIGURATION_FIELDS)
        updated = dataclasses.replace(config, **changes)
        _check_positive("max_people", updated.max_people)
        if updated.max_people > self._venues[config.venue_id].max_people:
            raise InvalidArgumentError("max_people exceeds the venue's capacity")
        if any(event.max_people > updated.max_people for event in self._events_using(venue_config_id)):
            raise InvalidArgumentError("max_people is below an event's capacity")
        self._configurations[venue_config_id] = updated
        return updated

    async def set_venue_configuration_availability(
        self, venue_config_id: str, available: bool
    ) -> VenueConfiguration:
        config = await self.get_venue_configuration(venue_config_id)
        if not available and any(event.on_sale for event in self._events_using(venue_config_id)):
            raise PreconditionFailedError("Configuration is used by an event on sale")
        updated = dataclasses.replace(config, available=available)
        self._configurations[venue_config_id] = updated
        logger.info("venue_configuration_availability", venue_config_id=venue_config_id, available=available)
        return updated

    async def delete_venue_configuration(self, venue_config_id: str) -> None:
        config = await self.get_venue_configuration(venue_config_id)
        if config.available:
            raise PreconditionFailedError("Configuration must be unavailable before it is deleted")
        if self._events_using(venue_config_id):
            raise PreconditionFailedError("Configuration is referenced by events")
        for seat in self._seats_of(venue_config_id):
            del self._seats[seat.id]
        for table in self._tables_of(venue_config_id):
            del self._tables[table.id]
        del self._configurations[venue_config_id]
        logger.info("venue_configuration_deleted", venue_config_id=venue_config_id)

    async def venue_configurations(self, venue_id: str) -> list[VenueConfiguration]:
        await self.get_venue(venue_id)
        return self._configurations_of(venue_id)

    # --- Seats ---

    async def create_seat(
        self,
        name: str,
        seat_class: str,
        venue_config_id: str,
        next_to: Sequence[str] = (),
        table_id: Optional[str] = None,
        geometry: Optional[Mapping[str, Any]] = None,
    ) -> Seat:
        await self.get_venue_configuration(venue_config_id)
        seat = Seat(
            id=_new_id(),
            name=name,
            seat_class=seat_class,
            venue_config_id=venue_config_id,
            next_to=self._check_neighbors(venue_config_id, next_to),
            table_id=self._check_table(venue_config_id, table_id),
            geometry=_check_geometry(geometry),
        )
        self._seats[seat.id] = seat
        self._link(seat.id, seat.next_to)
        return seat

    async def get_seat(self, seat_id: str) -> Seat:
        seat = self._seats.get(seat_id)
        if seat is None:
            raise SeatNotFoundError(seat_id)
        return seat

    async def update_seat(self, seat_id: str, changes: Mapping[str, Any]) -> Seat:
        seat = await self.get_seat(seat_id)
        _check_changes(changes, SEAT_FIELDS)
        changes = dict(changes)
        if "next_to" in changes:
            changes["next_to"] = self._check_neighbors(seat.venue_config_id, changes["next_to"] or (), seat_id)
        if "table_id" in changes:
            changes["table_id"] = self._check_table(seat.venue_config_id, changes["table_id"])
        if "geometry" in changes:
            changes["geometry"] = _check_geometry(changes["geometry"])
        updated = dataclasses.replace(seat, **changes)
        self._seats[seat_id] = updated
        if updated.next_to != seat.next_to:
            self._unlink(seat_id, seat.next_to - updated.next_to)
            self._link(seat_id, updated.next_to - seat.next_to)
        return self._seats[seat_id]

    async def delete_seat(self, seat_id: str) -> None:
        seat = await self.get_seat(seat_id)
        self._require_unavailable(seat.venue_config_id)
        self._unlink(seat_id, seat.next_to)
        del self._seats[seat_id]

    async def seats_for_configuration(self, venue_config_id: str) -> list[Seat]:
        await self.get_venue_configuration(venue_config_id)
        return self._seats_of(venue_config_id)

    # --- Tables ---

    async def create_table(
        self,
        venue_config_id: str,
        min_seats: int,
        max_seats: int,
        geometry: Optional[Mapping[str, Any]] = None,
    ) -> Table:
        await self.get_venue_configuration(venue_config_id)
        table = Table(
            id=_new_id(),
            venue_config_id=venue_config_id,
            min_seats=min_seats,
            max_seats=max_seats,
            geometry=_check_geometry(geometry),
        )
        self._check_table_bounds(table)
        self._tables[table.id] = table
        return table

    async def get_table(self, table_id: str) -> Table:
        table = self._tables.get(table_id)
        if table is None:
            raise TableNotFoundError(table_id)
        return table

    async def update_table(self, table_id: str, changes: Mapping[str, Any]) -> Table:
        table = await self.get_table(table_id)
        _check_changes(changes, TABLE_FIELDS)
        changes = dict(changes)
        if "geometry" in changes:
            changes["geometry"] = _check_geometry(changes["geometry"])
        updated = dataclasses.replace(table, **changes)
        self._check_table_bounds(updated)
        self._tables[table_id] = updated
        return updated

    async def delete_table(self, table_id: str) -> None:
        table = await self.get_table(table_id)
        self._require_unavailable(table.venue_config_id)
        if any(seat.table_id == table_id for seat in self._seats.values()):
            raise PreconditionFailedError("Table still has seats")
        del self._tables[table_id]

    async def tables_for_configuration(self, venue_config_id: str) -> list[Table]:
        await self.get_venue_configuration(venue_config_id)
        return self._tables_of(venue_config_id)

    # --- Events ---

    async def create_event(
        self, owner_id: str, venue_config_id: str, max_people: int, on_sale: bool = False
    ) -> Event:
        config = await self.get_venue_configuration(venue_config_id)
        if not config.available:
            raise PreconditionFailedError("Configuration is not available")
        _check_positive("max_people", max_people)
        if max_people > config.max_people:
            raise InvalidArgumentError("max_people exceeds the configuration's capacity")
        event = Event(
            id=_new_id(),
            owner_id=owner_id,
            venue_config_id=venue_config_id,
            max_people=max_people,
            on_sale=on_sale,
        )
        self._events[event.id] = event
        logger.info("event_created", event_id=event.id, venue_config_id=venue_config_id, on_sale=on_sale)
        return event

    async def get_event(self, event_id: str) -> Event:
        event = self._events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def update_event(self, event_id: str, changes: Mapping[str, Any]) -> Event:
        event = await self.get_event(event_id)
        _check_changes(changes, EVENT_FIELDS)
        updated = dataclasses.replace(event, **changes)
        config = self._configurations[event.venue_config_id]
        _check_positive("max_people", updated.max_people)
        if updated.max_people > config.max_people:
            raise InvalidArgumentError("max_people exceeds the configuration's capacity")
        if updated.on_sale and not event.on_sale and not config.available:
            raise PreconditionFailedError("Configuration is not available")
        self._events[event_id] = updated
        return updated

    async def delete_event(self, event_id: str) -> None:
        event = await self.get_event(event_id)
        if event.on_sale:
            raise PreconditionFailedError("Event is on sale; cancel it first")
        del self._events[event_id]
        logger.info("event_deleted", event_id=event_id)

    async def events_on_sale(self) -> list[Event]:
        return [event for event in self._events.values() if event.on_sale]

    async def events_for_configuration(self, venue_config_id: str) -> list[Event]:
        await self.get_venue_configuration(venue_config_id)
        return self._events_using(venue_config_id)

    # --- Helpers ---

    def _configurations_of(self, venue_id: str) -> list[VenueConfiguration]:
        return [config for config in self._configurations.values() if config.venue_id == venue_id]

    def _seats_of(self, venue_config_id: str) -> list[Seat]:
        return sorted(
            (seat for seat in self._seats.values() if seat.venue_config_id == venue_config_id),
            key=lambda seat: seat.id,
        )

    def _tables_of(self, venue_config_id: str) -> list[Table]:
        return sorted(
            (table for table in self._tables.values() if table.venue_config_id == venue_config_id),
            key=lambda table: table.id,
        )

    def _events_using(self, venue_config_id: str) -> list[Event]:
        return [event for event in self._events.values() if event.venue_config_id == venue_config_id]

    def _require_unavailable(self, venue_config_id: str) -> None:
        if self._configurations[venue_config_id].available:
            raise PreconditionFailedError("Configuration must be unavailable first")

    def _check_neighbors(
        self, venue_config_id: str, next_to: Iterable[str], seat_id: Optional[str] = None
    ) -> frozenset[str]:
        neighbors = frozenset(next_to)
        if seat_id is not None and seat_id in neighbors:
            raise InvalidArgumentError("A seat cannot be next to itself")
        for neighbor_id in neighbors:
            neighbor = self._seats.get(neighbor_id)
            if neighbor is None or neighbor.venue_config_id != venue_config_id:
                raise InvalidArgumentError(f"next_to seat {neighbor_id} is not in this configuration")
        return neighbors

    def _check_table(self, venue_config_id: str, table_id: Optional[str]) -> Optional[str]:
        if table_id is None:
            return None
        table = self._tables.get(table_id)
        if table is None or table.venue_config_id != venue_config_id:
            raise InvalidArgumentError(f"Table {table_id} is not in this configuration")
        return table_id

    @staticmethod
    def _check_table_bounds(table: Table) -> None:
        _check_positive("min_seats", table.min_seats)
        if table.max_seats < table.min_seats:
            raise InvalidArgumentError("max_seats must be >= min_seats")

    def _link(self, seat_id: str, neighbor_ids: Iterable[str]) -> None:
        for neighbor_id in neighbor_ids:
            neighbor = self._seats[neighbor_id]
            self._seats[neighbor_id] = dataclasses.replace(neighbor, next_to=neighbor.next_to | {seat_id})

    def _unlink(self, seat_id: str, neighbor_ids: Iterable[str]) -> None:
        for neighbor_id in neighbor_ids:
            neighbor = self._seats.get(neighbor_id)
            if neighbor is not None:
                self._seats[neighbor_id] = dataclasses.replace(neighbor, next_to=neighbor.next_to - {seat_id})

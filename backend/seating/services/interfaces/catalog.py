"""
Catalog interface (repository pattern).

The catalog owns venue, layout and event master data. The reservation core
only reads from it (seat membership, classes, adjacency, tables) and treats
seat and table ids as immutable foreign keys. Stores must be swappable and
return domain models.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

from seating.domain.models import Event, Seat, Table, Venue, VenueConfiguration


class Catalog(ABC):
    """Interface for venue, layout and event persistence."""

    # --- Venues ---

    @abstractmethod
    async def create_venue(self, owner_id: str, name: str, max_people: int) -> Venue:
        ...

    @abstractmethod
    async def get_venue(self, venue_id: str) -> Venue:
        """Return a venue. Raises VenueNotFoundError."""
        ...

    @abstractmethod
    async def update_venue(self, venue_id: str, changes: Mapping[str, Any]) -> Venue:
        ...

    @abstractmethod
    async def delete_venue(self, venue_id: str) -> None:
        """Delete a venue that has no configurations left."""
        ...

    @abstractmethod
    async def venues_by_owner(self, owner_id: str) -> list[Venue]:
        ...

    # --- Venue configurations ---

    @abstractmethod
    async def create_venue_configuration(self, venue_id: str, name: str, max_people: int) -> VenueConfiguration:
        ...

    @abstractmethod
    async def get_venue_configuration(self, venue_config_id: str) -> VenueConfiguration:
        """Return a configuration. Raises VenueConfigurationNotFoundError."""
        ...

    @abstractmethod
    async def update_venue_configuration(
        self, venue_config_id: str, changes: Mapping[str, Any]
    ) -> VenueConfiguration:
        ...

    @abstractmethod
    async def set_venue_configuration_availability(
        self, venue_config_id: str, available: bool
    ) -> VenueConfiguration:
        """Toggle availability. Cannot go unavailable while an on-sale event uses it."""
        ...

    @abstractmethod
    async def delete_venue_configuration(self, venue_config_id: str) -> None:
        """Delete an unavailable, unreferenced configuration with its seats and tables."""
        ...

    @abstractmethod
    async def venue_configurations(self, venue_id: str) -> list[VenueConfiguration]:
        ...

    # --- Seats ---

    @abstractmethod
    async def create_seat(
        self,
        name: str,
        seat_class: str,
        venue_config_id: str,
        next_to: Sequence[str] = (),
        table_id: Optional[str] = None,
        geometry: Optional[Mapping[str, Any]] = None,
    ) -> Seat:
        ...

    @abstractmethod
    async def get_seat(self, seat_id: str) -> Seat:
        """Return a seat. Raises SeatNotFoundError."""
        ...

    @abstractmethod
    async def update_seat(self, seat_id: str, changes: Mapping[str, Any]) -> Seat:
        ...

    @abstractmethod
    async def delete_seat(self, seat_id: str) -> None:
        ...

    @abstractmethod
    async def seats_for_configuration(self, venue_config_id: str) -> list[Seat]:
        """All seats of a configuration ordered by id."""
        ...

    # --- Tables ---

    @abstractmethod
    async def create_table(
        self,
        venue_config_id: str,
        min_seats: int,
        max_seats: int,
        geometry: Optional[Mapping[str, Any]] = None,
    ) -> Table:
        ...

    @abstractmethod
    async def get_table(self, table_id: str) -> Table:
        """Return a table. Raises TableNotFoundError."""
        ...

    @abstractmethod
    async def update_table(self, table_id: str, changes: Mapping[str, Any]) -> Table:
        ...

    @abstractmethod
    async def delete_table(self, table_id: str) -> None:
        ...

    @abstractmethod
    async def tables_for_configuration(self, venue_config_id: str) -> list[Table]:
        """All tables of a configuration ordered by id."""
        ...

    # --- Events ---

    @abstractmethod
    async def create_event(
        self, owner_id: str, venue_config_id: str, max_people: int, on_sale: bool = False
    ) -> Event:
        ...

    @abstractmethod
    async def get_event(self, event_id: str) -> Event:
        """Return an event. Raises EventNotFoundError."""
        ...

    @abstractmethod
    async def update_event(self, event_id: str, changes: Mapping[str, Any]) -> Event:
        ...

    @abstractmethod
    async def delete_event(self, event_id: str) -> None:
        """Delete an event that is no longer on sale."""
        ...

    @abstractmethod
    async def events_on_sale(self) -> list[Event]:
        """Events marked on sale, in creation order."""
        ...

    @abstractmethod
    async def events_for_configuration(self, venue_config_id: str) -> list[Event]:
        """Events laid out on a configuration, in creation order."""
        ...

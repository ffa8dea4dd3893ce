"""
Pytest fixtures: isolated engines, a controllable clock, a sample layout
and an HTTP client.

Every test gets its own ReservationEngine with in-memory stores, so tests
never share seat state.
"""

from dataclasses import dataclass, field
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from seating.core.config import Settings
from seating.domain.models import Event, Seat, Table, VenueConfiguration
from seating.main import create_app
from seating.services.engine import ReservationEngine


class FakeClock:
    """Manually advanced clock in epoch seconds."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class Layout:
    """
    One available configuration with:
      VIP: v1 - v2 (adjacent)
      GA:  g1 - g2 - g3 (a row), g4 alone
      t1..t4 at a table for 2..4
    and one event on sale.
    """

    config: VenueConfiguration
    event: Event
    seats: dict[str, Seat] = field(default_factory=dict)
    table: Table = None

    def ids(self, *names: str) -> list[str]:
        return sorted(self.seats[name].id for name in names)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        REDIS_ENABLED=False,
        REAPER_ENABLED=False,
        SEAT_STATE_BACKEND="memory",
        ORDER_HOLD_SECONDS=600,
    )


@pytest.fixture
def engine(settings: Settings, clock: FakeClock) -> ReservationEngine:
    return ReservationEngine(settings, clock=clock)


async def build_layout(engine: ReservationEngine) -> Layout:
    catalog = engine.catalog
    venue = await catalog.create_venue("owner-1", "Main Hall", 500)
    config = await catalog.create_venue_configuration(venue.id, "Concert", 200)

    seats = {}
    seats["v1"] = await catalog.create_seat("V1", "VIP", config.id)
    seats["v2"] = await catalog.create_seat("V2", "VIP", config.id, next_to=[seats["v1"].id])
    seats["g1"] = await catalog.create_seat("G1", "GA", config.id)
    seats["g2"] = await catalog.create_seat("G2", "GA", config.id, next_to=[seats["g1"].id])
    seats["g3"] = await catalog.create_seat("G3", "GA", config.id, next_to=[seats["g2"].id])
    seats["g4"] = await catalog.create_seat("G4", "GA", config.id)

    table = await catalog.create_table(config.id, min_seats=2, max_seats=4)
    previous = None
    for name in ("t1", "t2", "t3", "t4"):
        next_to = [previous.id] if previous else []
        previous = seats[name] = await catalog.create_seat(
            name.upper(), "TABLE", config.id, next_to=next_to, table_id=table.id
        )

    config = await catalog.set_venue_configuration_availability(config.id, True)
    event = await catalog.create_event("owner-1", config.id, 150, on_sale=True)
    # Reload seats so next_to reflects the symmetric links
    seats = {name: await catalog.get_seat(seat.id) for name, seat in seats.items()}
    return Layout(config=config, event=event, seats=seats, table=table)


@pytest_asyncio.fixture
async def layout(engine: ReservationEngine) -> Layout:
    return await build_layout(engine)


@pytest_asyncio.fixture
async def client(engine: ReservationEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test engine."""
    app = create_app(engine=engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

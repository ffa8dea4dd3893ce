"""
Venue configuration endpoints, plus the seats and tables of a layout.
"""

from fastapi import APIRouter, Depends, status

from seating.api.deps import get_engine
from seating.schemas.layout import (
    SeatCreate,
    SeatPatch,
    SeatResponse,
    SeatUpdate,
    TableCreate,
    TablePatch,
    TableResponse,
    TableUpdate,
)
from seating.schemas.venue import (
    AvailabilityUpdate,
    VenueConfigurationPatch,
    VenueConfigurationResponse,
    VenueConfigurationUpdate,
)
from seating.services.engine import ReservationEngine

router = APIRouter(prefix="/configurations", tags=["Configurations"])
seats_router = APIRouter(prefix="/seats", tags=["Seats"])
tables_router = APIRouter(prefix="/tables", tags=["Tables"])


@router.get("/{config_id}", response_model=VenueConfigurationResponse)
async def get_configuration_endpoint(config_id: str, engine: ReservationEngine = Depends(get_engine)):
    return await engine.catalog.get_venue_configuration(config_id)


@router.patch("/{config_id}", response_model=VenueConfigurationResponse)
async def patch_configuration_endpoint(
    config_id: str,
    config_data: VenueConfigurationPatch,
    engine: ReservationEngine = Depends(get_engine),
):
    return await engine.catalog.update_venue_configuration(config_id, config_data.changes())


@router.put("/{config_id}", response_model=VenueConfigurationResponse)
async def replace_configuration_endpoint(
    config_id: str,
    config_data: VenueConfigurationUpdate,
    engine: ReservationEngine = Depends(get_engine),
):
    return await engine.catalog.update_venue_configuration(config_id, config_data.model_dump())


@router.put("/{config_id}/availability", response_model=VenueConfigurationResponse)
async def set_availability_endpoint(
    config_id: str,
    availability: AvailabilityUpdate,
    engine: ReservationEngine = Depends(get_engine),
):
    """Open a layout for events, or close it for editing."""
    return await engine.catalog.set_venue_configuration_availability(config_id, availability.available)


@router.delete("/{config_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_configuration_endpoint(config_id: str, engine: ReservationEngine = Depends(get_engine)):
    await engine.catalog.delete_venue_configuration(config_id)


@router.post("/{config_id}/seats", response_model=SeatResponse, status_code=status.HTTP_201_CREATED)
async def create_seat_endpoint(
    config_id: str,
    seat_data: SeatCreate,
    engine: ReservationEngine = Depends(get_engine),
):
    seat = await engine.catalog.create_seat(
        seat_data.name,
        seat_data.seat_class,
        config_id,
        next_to=seat_data.next_to,
        table_id=seat_data.table_id,
        geometry=seat_data.geometry,
    )
    return SeatResponse.from_seat(seat)


@router.get("/{config_id}/seats", response_model=list[SeatResponse])
async def list_seats_endpoint(config_id: str, engine: ReservationEngine = Depends(get_engine)):
    return [SeatResponse.from_seat(seat) for seat in await engine.catalog.seats_for_configuration(config_id)]


@router.post("/{config_id}/tables", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
async def create_table_endpoint(
    config_id: str,
    table_data: TableCreate,
    engine: ReservationEngine = Depends(get_engine),
):
    table = await engine.catalog.create_table(
        config_id,
        table_data.min_seats,
        table_data.max_seats,
        geometry=table_data.geometry,
    )
    return TableResponse.from_table(table)


@router.get("/{config_id}/tables", response_model=list[TableResponse])
async def list_tables_endpoint(config_id: str, engine: ReservationEngine = Depends(get_engine)):
    return [TableResponse.from_table(table) for table in await engine.catalog.tables_for_configuration(config_id)]


# --- Seats ---


@seats_router.get("/{seat_id}", response_model=SeatResponse)
async def get_seat_endpoint(seat_id: str, engine: ReservationEngine = Depends(get_engine)):
    return SeatResponse.from_seat(await engine.catalog.get_seat(seat_id))


@seats_router.patch("/{seat_id}", response_model=SeatResponse)
async def patch_seat_endpoint(
    seat_id: str,
    seat_data: SeatPatch,
    engine: ReservationEngine = Depends(get_engine),
):
    return SeatResponse.from_seat(await engine.catalog.update_seat(seat_id, seat_data.changes()))


@seats_router.put("/{seat_id}", response_model=SeatResponse)
async def replace_seat_endpoint(
    seat_id: str,
    seat_data: SeatUpdate,
    engine: ReservationEngine = Depends(get_engine),
):
    return SeatResponse.from_seat(await engine.catalog.update_seat(seat_id, seat_data.model_dump()))


@seats_router.delete("/{seat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_seat_endpoint(seat_id: str, engine: ReservationEngine = Depends(get_engine)):
    await engine.delete_seat(seat_id)


# --- Tables ---


@tables_router.get("/{table_id}", response_model=TableResponse)
async def get_table_endpoint(table_id: str, engine: ReservationEngine = Depends(get_engine)):
    return TableResponse.from_table(await engine.catalog.get_table(table_id))


@tables_router.patch("/{table_id}", response_model=TableResponse)
async def patch_table_endpoint(
    table_id: str,
    table_data: TablePatch,
    engine: ReservationEngine = Depends(get_engine),
):
    return TableResponse.from_table(await engine.catalog.update_table(table_id, table_data.changes()))


@tables_router.put("/{table_id}", response_model=TableResponse)
async def replace_table_endpoint(
    table_id: str,
    table_data: TableUpdate,
    engine: ReservationEngine = Depends(get_engine),
):
    return TableResponse.from_table(await engine.catalog.update_table(table_id, table_data.model_dump()))


@tables_router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_table_endpoint(table_id: str, engine: ReservationEngine = Depends(get_engine)):
    await engine.catalog.delete_table(table_id)

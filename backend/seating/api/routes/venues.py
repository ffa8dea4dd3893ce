"""
Venue endpoints and the configurations belonging to a venue.
"""

from fastapi import APIRouter, Depends, Query, status

from seating.api.deps import get_engine
from seating.schemas.venue import (
    VenueConfigurationCreate,
    VenueConfigurationResponse,
    VenueCreate,
    VenuePatch,
    VenueResponse,
    VenueUpdate,
)
from seating.services.engine import ReservationEngine

router = APIRouter(prefix="/venues", tags=["Venues"])


@router.post("/", response_model=VenueResponse, status_code=status.HTTP_201_CREATED)
async def create_venue_endpoint(
    venue_data: VenueCreate,
    engine: ReservationEngine = Depends(get_engine),
):
    return await engine.catalog.create_venue(venue_data.owner_id, venue_data.name, venue_data.max_people)


@router.get("/", response_model=list[VenueResponse])
async def list_venues_endpoint(
    owner_id: str = Query(..., min_length=1),
    engine: ReservationEngine = Depends(get_engine),
):
    """All venues owned by one owner."""
    return await engine.catalog.venues_by_owner(owner_id)


@router.get("/{venue_id}", response_model=VenueResponse)
async def get_venue_endpoint(venue_id: str, engine: ReservationEngine = Depends(get_engine)):
    return await engine.catalog.get_venue(venue_id)


@router.patch("/{venue_id}", response_model=VenueResponse)
async def patch_venue_endpoint(
    venue_id: str,
    venue_data: VenuePatch,
    engine: ReservationEngine = Depends(get_engine),
):
    return await engine.catalog.update_venue(venue_id, venue_data.changes())


@router.put("/{venue_id}", response_model=VenueResponse)
async def replace_venue_endpoint(
    venue_id: str,
    venue_data: VenueUpdate,
    engine: ReservationEngine = Depends(get_engine),
):
    return await engine.catalog.update_venue(venue_id, venue_data.model_dump())


@router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venue_endpoint(venue_id: str, engine: ReservationEngine = Depends(get_engine)):
    """Delete a venue. Its configurations must be deleted first."""
    await engine.catalog.delete_venue(venue_id)


@router.post(
    "/{venue_id}/configurations",
    response_model=VenueConfigurationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_configuration_endpoint(
    venue_id: str,
    config_data: VenueConfigurationCreate,
    engine: ReservationEngine = Depends(get_engine),
):
    """Create a seating layout. It starts unavailable while seats are added."""
    return await engine.catalog.create_venue_configuration(venue_id, config_data.name, config_data.max_people)


@router.get("/{venue_id}/configurations", response_model=list[VenueConfigurationResponse])
async def list_configurations_endpoint(venue_id: str, engine: ReservationEngine = Depends(get_engine)):
    return await engine.catalog.venue_configurations(venue_id)

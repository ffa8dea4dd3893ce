"""
Event endpoints with Redis caching on the on-sale listing.
"""

from fastapi import APIRouter, Depends, status

from seating.api.deps import PageParams, get_engine, get_page_params
from seating.core.logging import get_logger
from seating.schemas.event import (
    EventCancelResponse,
    EventCreate,
    EventListResponse,
    EventPatch,
    EventResponse,
    EventUpdate,
    SeatMapResponse,
)
from seating.services.engine import ReservationEngine

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    engine: ReservationEngine = Depends(get_engine),
):
    """Create an event on an available venue configuration."""
    event = await engine.catalog.create_event(
        event_data.owner_id,
        event_data.venue_config_id,
        event_data.max_people,
        on_sale=event_data.on_sale,
    )
    # Invalidate cache since the on-sale listing may have changed
    await engine.event_cache.invalidate()
    return event


@router.get("/", response_model=EventListResponse)
async def list_events_on_sale_endpoint(
    paging: PageParams = Depends(get_page_params),
    engine: ReservationEngine = Depends(get_engine),
):
    """
    List events currently on sale.
    Pages are cached in Redis; any event change invalidates them.
    """
    cached = await engine.event_cache.get(paging.page, paging.perpage)
    if cached is not None:
        logger.info("events_list_cache_hit", page=paging.page)
        return EventListResponse(events=cached, page=paging.page, perpage=paging.perpage, cached=True)

    events = await engine.get_all_events_on_sale(paging.page, paging.perpage)
    payload = [EventResponse.model_validate(event).model_dump() for event in events]
    await engine.event_cache.set(paging.page, paging.perpage, payload)

    return EventListResponse(events=payload, page=paging.page, perpage=paging.perpage)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(event_id: str, engine: ReservationEngine = Depends(get_engine)):
    return await engine.catalog.get_event(event_id)


@router.patch("/{event_id}", response_model=EventResponse)
async def patch_event_endpoint(
    event_id: str,
    event_data: EventPatch,
    engine: ReservationEngine = Depends(get_engine),
):
    event = await engine.catalog.update_event(event_id, event_data.changes())
    await engine.event_cache.invalidate()
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def replace_event_endpoint(
    event_id: str,
    event_data: EventUpdate,
    engine: ReservationEngine = Depends(get_engine),
):
    event = await engine.catalog.update_event(event_id, event_data.model_dump())
    await engine.event_cache.invalidate()
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(event_id: str, engine: ReservationEngine = Depends(get_engine)):
    """Delete an event that is off sale and has no reservations left."""
    await engine.delete_event(event_id)


@router.post("/{event_id}/cancel", response_model=EventCancelResponse)
async def cancel_event_endpoint(event_id: str, engine: ReservationEngine = Depends(get_engine)):
    """Take an event off sale and cancel every active or completed order."""
    cancelled = await engine.cancel_event(event_id)
    return EventCancelResponse(event_id=event_id, cancelled_orders=cancelled)


@router.get("/{event_id}/seats", response_model=SeatMapResponse)
async def seat_map_endpoint(
    event_id: str,
    paging: PageParams = Depends(get_page_params),
    engine: ReservationEngine = Depends(get_engine),
):
    """Seats then tables of the event's layout with live availability. Never cached."""
    items = await engine.get_seats_and_tables_for_event(event_id, paging.page, paging.perpage)
    return SeatMapResponse(
        event_id=event_id,
        items=[SeatMapResponse.entry(item) for item in items],
        page=paging.page,
        perpage=paging.perpage,
    )

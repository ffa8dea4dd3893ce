"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from seating.api.routes import configurations, events, orders, venues

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(venues.router)
api_router.include_router(configurations.router)
api_router.include_router(configurations.seats_router)
api_router.include_router(configurations.tables_router)
api_router.include_router(events.router)
api_router.include_router(orders.router)
api_router.include_router(orders.users_router)

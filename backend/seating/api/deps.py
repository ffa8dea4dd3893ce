"""
Request dependencies shared by the route modules.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Query, Request

from seating.services.engine import ReservationEngine


def get_engine(request: Request) -> ReservationEngine:
    """The engine built by the application lifespan."""
    return request.app.state.engine


@dataclass(frozen=True)
class PageParams:
    page: int
    perpage: int


def get_page_params(
    page: int = Query(1),
    perpage: Optional[int] = Query(None),
    engine: ReservationEngine = Depends(get_engine),
) -> PageParams:
    # Range checks happen in the engine so bad values map to InvalidArgument
    if perpage is None:
        perpage = engine.settings.DEFAULT_PER_PAGE
    return PageParams(page=page, perpage=perpage)

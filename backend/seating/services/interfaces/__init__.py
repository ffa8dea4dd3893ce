"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .seat_state import SeatStateStore
from .memory_seat_state import InMemorySeatStateStore
from .catalog import Catalog

__all__ = ['SeatStateStore', 'InMemorySeatStateStore', 'Catalog']

"""
Undirected seat adjacency for one venue configuration.

Seats list their neighbours in `next_to`; the graph symmetrises that relation
and drops references to seats outside the configuration. Group search is a
bounded greedy expansion, not an exhaustive clique search: callers fall back
to non-adjacent selection when it finds nothing.
"""

from collections import deque
from typing import Iterable, Optional

from seating.domain.models import Seat


class AdjacencyGraph:
    def __init__(self, edges: dict[str, set[str]]) -> None:
        self._edges = edges

    @classmethod
    def from_seats(cls, seats: Iterable[Seat]) -> "AdjacencyGraph":
        seats = list(seats)
        known = {seat.id for seat in seats}
        edges: dict[str, set[str]] = {seat_id: set() for seat_id in known}
        for seat in seats:
            for other in seat.next_to:
                if other in known and other != seat.id:
                    edges[seat.id].add(other)
                    edges[other].add(seat.id)
        return cls(edges)

    def neighbors(self, seat_id: str) -> set[str]:
        return self._edges.get(seat_id, set())

    def touches(self, seat_id: str, group: Iterable[str]) -> bool:
        """True if seat_id is adjacent to any seat in group."""
        neighbors = self.neighbors(seat_id)
        return any(member in neighbors for member in group)

    def grow_group(self, start: str, allowed: set[str], size: int) -> Optional[list[str]]:
        """
        Greedy BFS from `start` through `allowed` seats.
        Returns `size` connected seat ids, or None if the component is too small.
        """
        if start not in allowed:
            return None
        group = [start]
        seen = {start}
        frontier = deque([start])
        while frontier and len(group) < size:
            current = frontier.popleft()
            for neighbor in sorted(self.neighbors(current) & allowed):
                if neighbor in seen:
                    continue
                seen.add(neighbor)
                group.append(neighbor)
                frontier.append(neighbor)
                if len(group) == size:
                    break
        return group if len(group) == size else None

    def find_group(self, allowed: set[str], size: int, search_limit: int) -> Optional[list[str]]:
        """
        First connected group of `size` seats among `allowed`, trying start
        seats in ascending id order, at most `search_limit` of them.
        """
        if size <= 0 or len(allowed) < size:
            return None
        tried: set[str] = set()
        for attempts, start in enumerate(sorted(allowed)):
            if attempts >= search_limit:
                break
            # Seats already reached from an earlier start share its component
            if start in tried:
                continue
            group = self.grow_group(start, allowed, size)
            if group is not None:
                return group
            tried.update(self._component(start, allowed))
        return None

    def _component(self, start: str, allowed: set[str]) -> set[str]:
        seen = {start}
        frontier = deque([start])
        while frontier:
            current = frontier.popleft()
            for neighbor in self.neighbors(current) & allowed:
                if neighbor not in seen:
                    seen.add(neighbor)
                    frontier.append(neighbor)
        return seen

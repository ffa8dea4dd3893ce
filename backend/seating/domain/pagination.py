"""1-based page slicing shared by every list operation."""

from typing import Sequence, TypeVar

from seating.domain.errors import InvalidArgumentError

T = TypeVar("T")


def validate_page(page: int, perpage: int, max_per_page: int) -> None:
    if page < 1:
        raise InvalidArgumentError("page must be >= 1")
    if perpage < 1:
        raise InvalidArgumentError("perpage must be >= 1")
    if perpage > max_per_page:
        raise InvalidArgumentError(f"perpage must be <= {max_per_page}")


def paginate(items: Sequence[T], page: int, perpage: int, max_per_page: int) -> list[T]:
    """Slice an already stably ordered sequence."""
    validate_page(page, perpage, max_per_page)
    start = (page - 1) * perpage
    return list(items[start:start + perpage])

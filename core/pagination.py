import math
from dataclasses import dataclass

from pydantic import BaseModel

from core.validator import Validator, permitted_value

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100


@dataclass
class Filters:
    """Pagination and sorting requested by the client.

    ``sort`` is a column name, optionally prefixed with ``-`` for descending
    order, and must appear in ``sort_safelist``.
    """

    page: int = 1
    page_size: int = 20
    sort: str = "id"
    sort_safelist: tuple[str, ...] = ("id", "-id")

    def sort_column(self) -> str:
        # Guard against anything reaching ORDER BY that was not allow-listed
        if self.sort not in self.sort_safelist:
            raise ValueError(f"unsafe sort parameter: {self.sort}")
        return self.sort.lstrip("-")

    def sort_descending(self) -> bool:
        return self.sort.startswith("-")

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def sort_safelist(*columns: str) -> tuple[str, ...]:
    """Build a safelist allowing ascending and descending sort on each column."""
    return tuple(columns) + tuple(f"-{c}" for c in columns)


def validate_filters(v: Validator, filters: Filters) -> None:
    v.check(filters.page > 0, "page", "must be greater than zero")
    v.check(filters.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(filters.page_size > 0, "page_size", "must be greater than zero")
    v.check(filters.page_size <= MAX_PAGE_SIZE, "page_size", "must be a maximum of 100")
    v.check(permitted_value(filters.sort, filters.sort_safelist), "sort", "invalid sort value")


class Metadata(BaseModel):
    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )

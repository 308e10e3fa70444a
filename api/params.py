from typing import Callable, Optional

from fastapi import Header, Query

from core.errors import EditConflictError
from core.pagination import Filters, sort_safelist, validate_filters
from core.validator import Validator


def list_filters(*sort_columns: str) -> Callable[..., Filters]:
    """Build a dependency that reads and validates ?page=&page_size=&sort= for a list route."""
    safelist = sort_safelist(*sort_columns)

    def dependency(
        page: int = Query(1),
        page_size: int = Query(20),
        sort: str = Query("id"),
    ) -> Filters:
        filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=safelist)
        v = Validator()
        validate_filters(v, filters)
        v.raise_if_invalid()
        return filters

    return dependency


def expected_version(
    x_expected_version: Optional[str] = Header(None, alias="X-Expected-Version"),
) -> Optional[str]:
    return x_expected_version


def check_expected_version(expected: Optional[str], record) -> None:
    """A client that sent X-Expected-Version only writes over the version it saw."""
    if expected is not None and expected != str(record.version):
        raise EditConflictError()


def split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]

"""Field types shared by the request/response schemas."""
import re
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer

RUNTIME_RX = re.compile(r"^(-?\d+) mins$")


def parse_runtime(value):
    """Accept an integer or the "<n> mins" form and return the number of minutes."""
    if isinstance(value, bool):
        raise ValueError("invalid runtime format")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = RUNTIME_RX.match(value)
        if match is None:
            raise ValueError("invalid runtime format")
        return int(match.group(1))
    raise ValueError("invalid runtime format")


def format_runtime(value: int) -> str:
    return f"{value} mins"


# Minutes in storage, "<n> mins" on the wire
Runtime = Annotated[
    int,
    BeforeValidator(parse_runtime),
    PlainSerializer(format_runtime, return_type=str, when_used="json"),
]

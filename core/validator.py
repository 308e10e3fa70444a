"""
Field-level validation producing a structured field -> message map.

Usage:
    v = Validator()
    v.check(movie.title != "", "title", "must be provided")
    v.raise_if_invalid()
"""
import re
from typing import Any, Iterable

from core.errors import ValidationError

EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class Validator:
    def __init__(self):
        self.errors: dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        # First message for a field wins
        if key not in self.errors:
            self.errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)

    def raise_if_invalid(self) -> None:
        if not self.valid():
            raise ValidationError(self.errors)


def permitted_value(value: Any, permitted: Iterable[Any]) -> bool:
    return value in permitted


def matches(value: str, rx: re.Pattern) -> bool:
    return bool(rx.match(value))


def unique(values: Iterable[Any]) -> bool:
    values = list(values)
    return len(values) == len(set(values))


def byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_email(v: Validator, email: str) -> None:
    v.check(email != "", "email", "must be provided")
    v.check(matches(email, EMAIL_RX), "email", "must be a valid email address")


def validate_password_plaintext(v: Validator, password: str) -> None:
    v.check(password != "", "password", "must be provided")
    v.check(byte_length(password) >= 8, "password", "must be at least 8 bytes long")
    v.check(byte_length(password) <= 72, "password", "must not be more than 72 bytes long")

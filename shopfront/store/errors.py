# shopfront/store/errors.py
from __future__ import annotations


class AlreadyExists(Exception):
    """A record with the same unique key is already stored."""

    def __init__(self, field: str, value: str):
        super().__init__(f"{field} {value!r} already exists")
        self.field = field
        self.value = value

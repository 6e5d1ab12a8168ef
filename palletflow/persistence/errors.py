"""Exceptions raised by record store implementations."""

from __future__ import annotations

from typing import Optional


class StorageError(Exception):
    """A read or write against the record store failed.

    Raised for constraint violations (unknown foreign key, duplicate primary
    key, missing row on update) as well as driver level failures.
    """

    def __init__(self, message: str, *, table: Optional[str] = None, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.table = table
        self.key = key

"""
Error kinds raised by the data access layer.

Messages are safe to return to HTTP clients. Driver exceptions are chained
with `raise ... from exc` and logged, never put into the message.
"""

from __future__ import annotations


class ValidationError(ValueError):
    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class DatabaseError(RuntimeError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

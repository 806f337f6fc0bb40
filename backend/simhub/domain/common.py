"""
SimHub Backend — Shared Domain Primitives
=========================================

What:  Parse results (Valid / Invalid) and UTC time helpers used by every aggregate.
Why:   Value parsing returns an inspectable outcome instead of raising, so a
       caller decides whether an invalid value is a client error, a schema
       error, or tolerable drift (e.g. an unknown status read from the store).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Successful parse carrying the typed value."""
    value: T


@dataclass(frozen=True)
class Invalid:
    """Failed parse carrying a human-readable reason."""
    reason: str


ParseResult = Union[Valid[T], Invalid]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize an instant to timezone-aware UTC.

    Naive datetimes are taken to already be UTC. SQLite hands back naive
    values, and every comparison in the search engine needs aware ones.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

"""
SimHub Backend — Search Engine
==============================

What:  Turns filters + PaginationParams into a SearchResult, for simulation
       history and for the recent-projects list.
Why:   Both repository adapters must agree exactly on which rows match, in
       which order, and where page boundaries fall. Keeping the predicate as
       data (Condition triples) lets each backend translate it once while the
       matching rules live here.
How:
    1. build_predicate()   filters → tuple of Condition(field, operator, value)
    2. adapter applies it  in-process (matches()) or as SQL (repositories.sql)
    3. order               timestamp DESC, then id ASC for equal timestamps
                           (recent projects: last_opened_at DESC, then id ASC)
    4. paginate            offset = (page - 1) * per_page, limit = per_page
    5. build_search_result total, last_page = ceil(total / per_page)

Filter semantics (simulation history):
    project_path  case-insensitive substring       ICONTAINS
    status        exact equality                    EQ
    ttk_version   exact equality                    EQ
    date_from     timestamp >= date_from (inclusive) GTE
    date_to       timestamp <= date_to   (inclusive) LTE
    None or ""    no constraint

Filter semantics (recent projects):
    name          case-insensitive substring       ICONTAINS
    game_version  exact equality                    EQ

    ICONTAINS folds case with str.lower(), so "ação" matches "AÇÃO". SQL
    backends match against a companion <field>_search column written
    pre-lowered by the adapter, never against the database's own lower().

    date_from > date_to is not special-cased: nothing satisfies both bounds.
    per_page <= 0 is rejected by the input schema before reaching this module.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from simhub.domain.common import ensure_utc
from simhub.domain.simulation_history import SimulationHistoryEntry


class Operator(str, Enum):
    ICONTAINS = "icontains"
    EQ = "eq"
    GTE = "gte"
    LTE = "lte"


@dataclass(frozen=True)
class Condition:
    """One {field, operator, value} triple of the conjunctive predicate."""
    field: str
    operator: Operator
    value: Any


Predicate = Tuple[Condition, ...]


@dataclass(frozen=True)
class SimulationHistoryFilters:
    project_path: Optional[str] = None
    status: Optional[str] = None
    ttk_version: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


@dataclass(frozen=True)
class PaginationParams:
    """1-indexed page request. Bounds are enforced by the input schema."""
    page: int
    per_page: int


@dataclass(frozen=True)
class PaginationMeta:
    total: int
    page: int
    per_page: int
    last_page: int


@dataclass(frozen=True)
class RecentProjectFilters:
    name: Optional[str] = None
    game_version: Optional[str] = None


@dataclass(frozen=True)
class SearchResult:
    """One page of items plus the filters that produced it."""
    items: Tuple[Any, ...]
    filters: Any
    pagination: PaginationMeta


def _present(value: Any) -> bool:
    return value is not None and value != ""


def build_predicate(filters: SimulationHistoryFilters) -> Predicate:
    """Translate the present filter fields into Condition triples, in a stable order."""
    conditions: List[Condition] = []
    if _present(filters.project_path):
        conditions.append(Condition("project_path", Operator.ICONTAINS, filters.project_path))
    if _present(filters.status):
        conditions.append(Condition("status", Operator.EQ, filters.status))
    if _present(filters.ttk_version):
        conditions.append(Condition("ttk_version", Operator.EQ, filters.ttk_version))
    if filters.date_from is not None:
        conditions.append(Condition("timestamp", Operator.GTE, ensure_utc(filters.date_from)))
    if filters.date_to is not None:
        conditions.append(Condition("timestamp", Operator.LTE, ensure_utc(filters.date_to)))
    return tuple(conditions)


def build_recent_project_predicate(filters: RecentProjectFilters) -> Predicate:
    conditions: List[Condition] = []
    if _present(filters.name):
        conditions.append(Condition("name", Operator.ICONTAINS, filters.name))
    if _present(filters.game_version):
        conditions.append(Condition("game_version", Operator.EQ, filters.game_version))
    return tuple(conditions)


def _attribute(item: Any, field: str) -> Any:
    value = getattr(item, field)
    # Status compares by its stored string, same as the SQL column
    if isinstance(value, Enum):
        return value.value
    return value


def evaluate(condition: Condition, item: Any) -> bool:
    actual = _attribute(item, condition.field)
    if condition.operator is Operator.ICONTAINS:
        # str.lower() on both sides; the SQL adapter matches a column stored pre-lowered
        return str(condition.value).lower() in str(actual).lower()
    if condition.operator is Operator.EQ:
        return actual == condition.value
    if condition.operator is Operator.GTE:
        return actual >= condition.value
    if condition.operator is Operator.LTE:
        return actual <= condition.value
    raise ValueError(f"Unsupported operator: {condition.operator}")


def matches(item: Any, predicate: Predicate) -> bool:
    """Conjunction: an empty predicate matches everything."""
    return all(evaluate(condition, item) for condition in predicate)


def newest_first(items: Iterable[Any], attribute: str) -> List[Any]:
    """
    Descending by `attribute`; equal values fall back to ascending id.

    Two stable sorts instead of one composite key: datetimes cannot be negated
    and float timestamps lose microseconds.
    """
    ordered = sorted(items, key=lambda item: item.id)
    ordered.sort(key=lambda item: getattr(item, attribute), reverse=True)
    return ordered


def order_entries(entries: Iterable[SimulationHistoryEntry]) -> List[SimulationHistoryEntry]:
    """Newest timestamp first; equal timestamps fall back to ascending id."""
    return newest_first(entries, "timestamp")


def page_offset(pagination: PaginationParams) -> int:
    return (pagination.page - 1) * pagination.per_page


def compute_last_page(total: int, per_page: int) -> int:
    return math.ceil(total / per_page)


def build_search_result(
    items: Iterable[Any],
    total: int,
    filters: Any,
    pagination: PaginationParams,
) -> SearchResult:
    return SearchResult(
        items=tuple(items),
        filters=filters,
        pagination=PaginationMeta(
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
            last_page=compute_last_page(total, pagination.per_page),
        ),
    )


def _paginate(
    ordered: List[Any],
    filters: Any,
    pagination: PaginationParams,
) -> SearchResult:
    start = page_offset(pagination)
    return build_search_result(
        ordered[start:start + pagination.per_page],
        total=len(ordered),
        filters=filters,
        pagination=pagination,
    )


def search_in_memory(
    entries: Sequence[SimulationHistoryEntry],
    filters: SimulationHistoryFilters,
    pagination: PaginationParams,
) -> SearchResult:
    """
    Full search over an in-process collection.

    Used by the in-memory adapter; the SQL adapter reproduces the same steps
    with WHERE / ORDER BY / OFFSET / LIMIT and a COUNT query.
    """
    predicate = build_predicate(filters)
    matched = order_entries(e for e in entries if matches(e, predicate))
    return _paginate(matched, filters, pagination)


def search_recent_projects_in_memory(
    projects: Sequence[Any],
    filters: RecentProjectFilters,
    pagination: PaginationParams,
) -> SearchResult:
    """Most recently opened first, same paging rules as the history search."""
    predicate = build_recent_project_predicate(filters)
    matched = newest_first((p for p in projects if matches(p, predicate)), "last_opened_at")
    return _paginate(matched, filters, pagination)

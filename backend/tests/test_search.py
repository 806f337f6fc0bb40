"""
SimHub Backend — Search Engine Unit Tests
=========================================

What we test:
    ✅ Filters → Condition triples (absent, None and "" produce nothing)
    ✅ Predicate evaluation per operator
    ✅ Ordering: timestamp DESC, id ASC on ties
    ✅ Pagination arithmetic and pages past the end
"""

from datetime import datetime, timedelta, timezone

from simhub.domain.simulation_history import SimulationStatus
from simhub.search import (
    Condition,
    Operator,
    PaginationParams,
    SimulationHistoryFilters,
    build_predicate,
    compute_last_page,
    matches,
    order_entries,
    page_offset,
    search_in_memory,
)

from conftest import BASE_TIME


class TestBuildPredicate:
    def test_no_filters_is_empty_predicate(self):
        assert build_predicate(SimulationHistoryFilters()) == ()

    def test_empty_strings_are_absent(self):
        filters = SimulationHistoryFilters(project_path="", status="", ttk_version="")
        assert build_predicate(filters) == ()

    def test_every_filter_maps_to_its_operator(self):
        filters = SimulationHistoryFilters(
            project_path="rpg",
            status="COMPLETED",
            ttk_version="1.4.0",
            date_from=BASE_TIME,
            date_to=BASE_TIME + timedelta(days=1),
        )
        assert build_predicate(filters) == (
            Condition("project_path", Operator.ICONTAINS, "rpg"),
            Condition("status", Operator.EQ, "COMPLETED"),
            Condition("ttk_version", Operator.EQ, "1.4.0"),
            Condition("timestamp", Operator.GTE, BASE_TIME),
            Condition("timestamp", Operator.LTE, BASE_TIME + timedelta(days=1)),
        )

    def test_naive_dates_are_taken_as_utc(self):
        naive = datetime(2024, 3, 1, 8, 30)
        (condition,) = build_predicate(SimulationHistoryFilters(date_from=naive))
        assert condition.value == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)


class TestMatches:
    def test_project_path_is_case_insensitive_substring(self, entry_factory):
        entry = entry_factory(project_path="/Games/RPG-Alpha")
        assert matches(entry, build_predicate(SimulationHistoryFilters(project_path="rpg-alp")))
        assert not matches(entry, build_predicate(SimulationHistoryFilters(project_path="beta")))

    def test_status_and_version_are_exact(self, entry_factory):
        entry = entry_factory(status=SimulationStatus.COMPLETED, ttk_version="1.4.0")
        assert matches(entry, build_predicate(SimulationHistoryFilters(status="COMPLETED")))
        assert not matches(entry, build_predicate(SimulationHistoryFilters(status="completed")))
        assert not matches(entry, build_predicate(SimulationHistoryFilters(ttk_version="1.4")))

    def test_date_bounds_are_inclusive(self, entry_factory):
        entry = entry_factory(minutes=10)
        ts = entry.timestamp
        assert matches(entry, build_predicate(SimulationHistoryFilters(date_from=ts, date_to=ts)))
        assert not matches(
            entry,
            build_predicate(SimulationHistoryFilters(date_from=ts + timedelta(microseconds=1))),
        )

    def test_inverted_range_matches_nothing(self, entry_factory):
        entry = entry_factory(minutes=10)
        filters = SimulationHistoryFilters(
            date_from=BASE_TIME + timedelta(hours=1), date_to=BASE_TIME
        )
        assert not matches(entry, build_predicate(filters))


class TestOrdering:
    def test_newest_first_with_id_tie_break(self, entry_factory):
        old = entry_factory(minutes=0, id="a")
        tie_b = entry_factory(minutes=5, id="b")
        tie_a = entry_factory(minutes=5, id="a2")
        newest = entry_factory(minutes=9, id="z")

        ordered = order_entries([tie_b, old, newest, tie_a])

        assert [e.id for e in ordered] == ["z", "a2", "b", "a"]

    def test_microsecond_differences_are_respected(self, entry_factory):
        first = entry_factory(id="x", timestamp=BASE_TIME)
        second = entry_factory(id="y", timestamp=BASE_TIME + timedelta(microseconds=1))
        assert [e.id for e in order_entries([first, second])] == ["y", "x"]


class TestPagination:
    def test_offset(self):
        assert page_offset(PaginationParams(page=1, per_page=20)) == 0
        assert page_offset(PaginationParams(page=3, per_page=10)) == 20

    def test_last_page(self):
        assert compute_last_page(0, 20) == 0
        assert compute_last_page(12, 10) == 2
        assert compute_last_page(20, 10) == 2
        assert compute_last_page(21, 10) == 3

    def test_page_past_the_end_is_empty(self, entry_factory):
        entries = [entry_factory(minutes=i) for i in range(5)]
        result = search_in_memory(entries, SimulationHistoryFilters(), PaginationParams(3, 2))
        assert len(result.items) == 1

        result = search_in_memory(entries, SimulationHistoryFilters(), PaginationParams(4, 2))
        assert result.items == ()
        assert result.pagination.total == 5
        assert result.pagination.last_page == 3

    def test_result_echoes_filters(self, entry_factory):
        filters = SimulationHistoryFilters(status="PENDING")
        result = search_in_memory([entry_factory()], filters, PaginationParams(1, 20))
        assert result.filters is filters

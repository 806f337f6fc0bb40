"""
SimHub Backend — Simulation History Repository Tests
====================================================

What:  One suite, run against BOTH adapters (history_repository is
       parametrized over memory and sql in conftest.py).
Why:   The adapters must be observably identical; any divergence fails here
       for exactly one of the two parameter ids.

What we test:
    ✅ insert / find_by_id / update / delete / exists
    ✅ update of an unknown id raises, delete of an unknown id does not
    ✅ Stored state cannot be mutated through returned objects
    ✅ Filters, ordering, pagination and total on the same data
    ✅ project_path matching folds accented capitals (ÇÃÉ) on SQLite too
    ✅ The 25-entry scenario (12 COMPLETED, 10 per page)
    ✅ Concatenating every page reproduces the full ordered match list
"""

import logging
from datetime import timedelta

import pytest
from sqlalchemy import select

from simhub.domain.simulation_history import SimulationStatus
from simhub.exceptions import DomainError, RecordNotFoundError
from simhub.models.simulation_history import SimulationHistoryRecord
from simhub.repositories.sql import SqlSimulationHistoryRepository
from simhub.search import PaginationParams, SimulationHistoryFilters

from conftest import BASE_TIME

ALL = SimulationHistoryFilters()


async def seed(repository, entries):
    for entry in entries:
        await repository.insert(entry)
    return entries


class TestCrud:
    @pytest.mark.asyncio
    async def test_insert_then_find_returns_equal_entry(self, history_repository, entry_factory):
        entry = entry_factory(
            duration_ms=1200, battle_count=50, trecho_count=2, summary_json='{"win": 0.5}'
        )
        await history_repository.insert(entry)

        found = await history_repository.find_by_id(entry.id)

        assert found == entry
        assert found is not entry

    @pytest.mark.asyncio
    async def test_find_unknown_id_returns_none(self, history_repository):
        assert await history_repository.find_by_id("does-not-exist") is None

    @pytest.mark.asyncio
    async def test_exists(self, history_repository, entry_factory):
        entry = entry_factory()
        assert await history_repository.exists(entry.id) is False
        await history_repository.insert(entry)
        assert await history_repository.exists(entry.id) is True

    @pytest.mark.asyncio
    async def test_duplicate_insert_is_rejected(self, history_repository, entry_factory):
        entry = entry_factory()
        await history_repository.insert(entry)
        with pytest.raises(DomainError):
            await history_repository.insert(entry)

    @pytest.mark.asyncio
    async def test_update_replaces_stored_entry(self, history_repository, entry_factory):
        entry = entry_factory()
        await history_repository.insert(entry)

        entry.mark_running()
        entry.mark_completed('{"battles": 100, "winRate": 0.61}')
        entry.attach_report("/reports/run.html")
        await history_repository.update(entry)

        found = await history_repository.find_by_id(entry.id)
        assert found.status is SimulationStatus.COMPLETED
        assert found.summary_json == '{"battles": 100, "winRate": 0.61}'
        assert found.has_report is True
        assert found.report_file_path == "/reports/run.html"
        assert found.updated_at == entry.updated_at

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises(self, history_repository, entry_factory):
        with pytest.raises(RecordNotFoundError):
            await history_repository.update(entry_factory())

    @pytest.mark.asyncio
    async def test_delete_then_find_returns_none(self, history_repository, entry_factory):
        entry = entry_factory()
        await history_repository.insert(entry)

        await history_repository.delete(entry.id)

        assert await history_repository.find_by_id(entry.id) is None
        assert await history_repository.exists(entry.id) is False

    @pytest.mark.asyncio
    async def test_delete_unknown_id_is_a_noop(self, history_repository, entry_factory):
        kept = entry_factory()
        await history_repository.insert(kept)

        await history_repository.delete("never-existed")

        assert await history_repository.find_by_id("never-existed") is None
        assert await history_repository.exists(kept.id) is True

    @pytest.mark.asyncio
    async def test_returned_entries_do_not_alias_storage(self, history_repository, entry_factory):
        entry = entry_factory()
        await history_repository.insert(entry)

        entry.summary_json = '{"changed": "after insert"}'
        found = await history_repository.find_by_id(entry.id)
        found.summary_json = '{"changed": "after find"}'

        again = await history_repository.find_by_id(entry.id)
        assert again.summary_json == "{}"


class TestSearch:
    @pytest.mark.asyncio
    async def test_twenty_five_entry_scenario(self, history_repository, entry_factory):
        # Alternating PENDING / COMPLETED starting with PENDING → 12 COMPLETED
        entries = [
            entry_factory(
                minutes=i,
                status=SimulationStatus.PENDING if i % 2 == 0 else SimulationStatus.COMPLETED,
            )
            for i in range(25)
        ]
        await seed(history_repository, entries)
        filters = SimulationHistoryFilters(status="COMPLETED")

        first = await history_repository.search(filters, PaginationParams(page=1, per_page=10))
        second = await history_repository.search(filters, PaginationParams(page=2, per_page=10))

        assert len(first.items) == 10
        assert first.pagination.total == 12
        assert first.pagination.last_page == 2
        assert first.pagination.page == 1
        assert first.pagination.per_page == 10
        assert all(e.status is SimulationStatus.COMPLETED for e in first.items)
        assert first.items[0].timestamp == BASE_TIME + timedelta(minutes=23)
        timestamps = [e.timestamp for e in first.items + second.items]
        assert timestamps == sorted(timestamps, reverse=True)
        assert len(second.items) == 2

    @pytest.mark.asyncio
    async def test_pages_concatenate_to_full_ordered_list(self, history_repository, entry_factory):
        # Includes equal timestamps so the id tie-break decides page boundaries
        entries = [entry_factory(minutes=i // 3) for i in range(17)]
        await seed(history_repository, entries)

        everything = await history_repository.search(ALL, PaginationParams(page=1, per_page=100))
        expected_ids = [
            e.id for e in sorted(sorted(entries, key=lambda e: e.id), key=lambda e: e.timestamp, reverse=True)
        ]
        assert [e.id for e in everything.items] == expected_ids

        collected = []
        for page in range(1, 6):
            result = await history_repository.search(ALL, PaginationParams(page=page, per_page=4))
            assert result.pagination.last_page == 5
            collected.extend(result.items)

        assert [e.id for e in collected] == expected_ids

    @pytest.mark.asyncio
    async def test_page_beyond_last_is_empty(self, history_repository, entry_factory):
        await seed(history_repository, [entry_factory(minutes=i) for i in range(3)])

        result = await history_repository.search(ALL, PaginationParams(page=9, per_page=2))

        assert result.items == ()
        assert result.pagination.total == 3
        assert result.pagination.last_page == 2

    @pytest.mark.asyncio
    async def test_empty_store(self, history_repository):
        result = await history_repository.search(ALL, PaginationParams(page=1, per_page=20))
        assert result.items == ()
        assert result.pagination.total == 0
        assert result.pagination.last_page == 0

    @pytest.mark.asyncio
    async def test_project_path_filter_is_case_insensitive(self, history_repository, entry_factory):
        await seed(history_repository, [
            entry_factory(minutes=1, project_path="/Games/RPG-Alpha"),
            entry_factory(minutes=2, project_path="/games/rpg-beta"),
            entry_factory(minutes=3, project_path="/games/shooter"),
        ])

        result = await history_repository.search(
            SimulationHistoryFilters(project_path="RPG"), PaginationParams(1, 20)
        )

        assert sorted(e.project_path for e in result.items) == ["/Games/RPG-Alpha", "/games/rpg-beta"]

    @pytest.mark.asyncio
    async def test_project_path_wildcards_are_literal(self, history_repository, entry_factory):
        await seed(history_repository, [
            entry_factory(minutes=1, project_path="/games/100%_done"),
            entry_factory(minutes=2, project_path="/games/100-done"),
        ])

        percent = await history_repository.search(
            SimulationHistoryFilters(project_path="%"), PaginationParams(1, 20)
        )
        underscore = await history_repository.search(
            SimulationHistoryFilters(project_path="0_d"), PaginationParams(1, 20)
        )

        assert [e.project_path for e in percent.items] == ["/games/100%_done"]
        assert underscore.items == ()

    @pytest.mark.asyncio
    async def test_project_path_filter_folds_accented_letters(self, history_repository, entry_factory):
        await seed(history_repository, [
            entry_factory(minutes=1, project_path="/jogos/AÇÃO-Épico"),
            entry_factory(minutes=2, project_path="/jogos/acao-simples"),
        ])

        lower = await history_repository.search(
            SimulationHistoryFilters(project_path="ação"), PaginationParams(1, 20)
        )
        upper = await history_repository.search(
            SimulationHistoryFilters(project_path="ÉPICO"), PaginationParams(1, 20)
        )

        assert lower.pagination.total == 1
        assert lower.items[0].project_path == "/jogos/AÇÃO-Épico"
        assert upper.pagination.total == 1

    @pytest.mark.asyncio
    async def test_status_version_and_date_filters_combine(self, history_repository, entry_factory):
        await seed(history_repository, [
            entry_factory(minutes=0, status=SimulationStatus.COMPLETED, ttk_version="1.4.0"),
            entry_factory(minutes=10, status=SimulationStatus.COMPLETED, ttk_version="1.4.0"),
            entry_factory(minutes=20, status=SimulationStatus.COMPLETED, ttk_version="1.5.0"),
            entry_factory(minutes=30, status=SimulationStatus.FAILED, ttk_version="1.4.0"),
            entry_factory(minutes=40, status=SimulationStatus.COMPLETED, ttk_version="1.4.0"),
        ])
        filters = SimulationHistoryFilters(
            status="COMPLETED",
            ttk_version="1.4.0",
            date_from=BASE_TIME + timedelta(minutes=10),
            date_to=BASE_TIME + timedelta(minutes=40),
        )

        result = await history_repository.search(filters, PaginationParams(1, 20))

        # Both bounds inclusive
        assert [e.timestamp for e in result.items] == [
            BASE_TIME + timedelta(minutes=40),
            BASE_TIME + timedelta(minutes=10),
        ]
        assert result.pagination.total == 2
        assert result.filters == filters

    @pytest.mark.asyncio
    async def test_inverted_date_range_matches_nothing(self, history_repository, entry_factory):
        await seed(history_repository, [entry_factory(minutes=i) for i in range(3)])
        filters = SimulationHistoryFilters(
            date_from=BASE_TIME + timedelta(minutes=2), date_to=BASE_TIME
        )

        result = await history_repository.search(filters, PaginationParams(1, 20))

        assert result.items == ()
        assert result.pagination.total == 0

    @pytest.mark.asyncio
    async def test_empty_string_filters_are_ignored(self, history_repository, entry_factory):
        await seed(history_repository, [entry_factory(minutes=i) for i in range(3)])
        filters = SimulationHistoryFilters(project_path="", status="", ttk_version="")

        result = await history_repository.search(filters, PaginationParams(1, 20))

        assert result.pagination.total == 3


class TestSqlSchemaDrift:
    @pytest.mark.asyncio
    async def test_unknown_status_reads_back_as_pending(self, db_session, entry_factory, caplog):
        repository = SqlSimulationHistoryRepository(db_session)
        entry = entry_factory(status=SimulationStatus.RUNNING)
        await repository.insert(entry)

        record = (
            await db_session.execute(
                select(SimulationHistoryRecord).where(SimulationHistoryRecord.id == entry.id)
            )
        ).scalar_one()
        record.status = "CANCELLED"
        await db_session.flush()

        with caplog.at_level(logging.WARNING, logger="simhub.repositories.sql"):
            found = await repository.find_by_id(entry.id)

        assert found.status is SimulationStatus.PENDING
        assert "CANCELLED" in caplog.text

    @pytest.mark.asyncio
    async def test_status_filter_compares_the_stored_string(self, db_session, entry_factory):
        repository = SqlSimulationHistoryRepository(db_session)
        drifted = entry_factory(minutes=1, status=SimulationStatus.RUNNING)
        pending = entry_factory(minutes=2)
        await repository.insert(drifted)
        await repository.insert(pending)

        record = await db_session.get(SimulationHistoryRecord, drifted.id)
        record.status = "CANCELLED"
        await db_session.flush()

        result = await repository.search(
            SimulationHistoryFilters(status="PENDING"), PaginationParams(1, 20)
        )

        # Read as PENDING, but the WHERE clause sees "CANCELLED"
        assert [e.id for e in result.items] == [pending.id]
        assert (await repository.find_by_id(drifted.id)).status is SimulationStatus.PENDING

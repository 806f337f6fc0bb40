"""
SimHub Backend — Recent Projects Repository and Service Tests
=============================================================

What:  The repository suite runs against BOTH adapters
       (recent_projects_repository is parametrized in conftest.py).

What we test:
    ✅ insert / find by path and id / update / upsert / delete / count
    ✅ upsert keeps the stored id and created_at of an existing path
    ✅ Most recently opened first, id as tie-break, name and version filters
    ✅ Name matching folds accented capitals on SQLite too
    ✅ record_opened refreshes an existing entry and keeps omitted metadata
    ✅ list defaults to 10 per page; removing an unknown path is a 404
"""

from datetime import timedelta

import pytest

from simhub.domain.recent_project import RecentProject
from simhub.exceptions import DomainError, InputValidationError, NotFoundError, RecordNotFoundError
from simhub.search import PaginationParams, RecentProjectFilters
from simhub.services.recent_projects_service import RecentProjectsService

from conftest import BASE_TIME

ALL = RecentProjectFilters()


def recent(minutes: int = 0, **overrides) -> RecentProject:
    fields = {
        "path": f"/games/project-{minutes:02d}",
        "name": f"Project {minutes:02d}",
        "last_opened_at": BASE_TIME + timedelta(minutes=minutes),
    }
    fields.update(overrides)
    return RecentProject(**fields)


async def seed(repository, projects):
    for project in projects:
        await repository.insert(project)
    return projects


@pytest.fixture
def service(recent_projects_repository) -> RecentProjectsService:
    return RecentProjectsService(recent_projects_repository)


class TestRecentProjectsRepository:
    @pytest.mark.asyncio
    async def test_insert_and_find(self, recent_projects_repository):
        project = recent(game_version="1.2.0", trecho_count=3)
        await recent_projects_repository.insert(project)

        assert await recent_projects_repository.find_by_path(project.path) == project
        assert await recent_projects_repository.find_by_id(project.id) == project
        assert await recent_projects_repository.exists_by_path(project.path) is True
        assert await recent_projects_repository.find_by_path("/games/other") is None
        assert await recent_projects_repository.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_path_is_rejected(self, recent_projects_repository):
        await recent_projects_repository.insert(recent())
        with pytest.raises(DomainError):
            await recent_projects_repository.insert(recent(name="Another"))

    @pytest.mark.asyncio
    async def test_update_and_update_unknown(self, recent_projects_repository):
        project = recent()
        await recent_projects_repository.insert(project)

        project.update_metadata(game_version="2.0.0")
        await recent_projects_repository.update(project)
        stored = await recent_projects_repository.find_by_path(project.path)
        assert stored.game_version == "2.0.0"

        with pytest.raises(RecordNotFoundError):
            await recent_projects_repository.update(recent(path="/games/missing"))

    @pytest.mark.asyncio
    async def test_upsert_keeps_identity_of_existing_path(self, recent_projects_repository):
        first = await recent_projects_repository.upsert(recent(name="Old Name"))
        replacement = recent(name="New Name", last_opened_at=BASE_TIME + timedelta(hours=1))

        stored = await recent_projects_repository.upsert(replacement)

        assert stored.id == first.id
        assert stored.created_at == first.created_at
        assert stored.name == "New Name"
        assert stored.last_opened_at == BASE_TIME + timedelta(hours=1)
        assert await recent_projects_repository.count(ALL) == 1

    @pytest.mark.asyncio
    async def test_delete_is_a_noop_for_unknown_path(self, recent_projects_repository):
        project = recent()
        await recent_projects_repository.insert(project)

        await recent_projects_repository.delete(project.path)
        await recent_projects_repository.delete(project.path)

        assert await recent_projects_repository.exists_by_path(project.path) is False

    @pytest.mark.asyncio
    async def test_most_recently_opened_first_with_id_tie_break(self, recent_projects_repository):
        await seed(recent_projects_repository, [
            recent(1, id="b"),
            recent(5, id="c"),
            recent(3, id="z", path="/games/tie-z"),
            recent(3, id="a", path="/games/tie-a"),
        ])

        result = await recent_projects_repository.search(ALL, PaginationParams(1, 10))

        assert [p.id for p in result.items] == ["c", "a", "z", "b"]

    @pytest.mark.asyncio
    async def test_pagination_and_total(self, recent_projects_repository):
        await seed(recent_projects_repository, [recent(i) for i in range(12)])

        second = await recent_projects_repository.search(ALL, PaginationParams(2, 10))

        assert [p.name for p in second.items] == ["Project 01", "Project 00"]
        assert second.pagination.total == 12
        assert second.pagination.last_page == 2

    @pytest.mark.asyncio
    async def test_name_and_version_filters(self, recent_projects_repository):
        await seed(recent_projects_repository, [
            recent(1, name="AÇÃO Épica", game_version="1.0.0"),
            recent(2, name="ação simples", game_version="2.0.0"),
            recent(3, name="Shooter", game_version="1.0.0"),
        ])

        by_name = await recent_projects_repository.search(
            RecentProjectFilters(name="AÇÃO"), PaginationParams(1, 10)
        )
        both = RecentProjectFilters(name="ação", game_version="1.0.0")
        narrowed = await recent_projects_repository.search(both, PaginationParams(1, 10))

        assert [p.name for p in by_name.items] == ["ação simples", "AÇÃO Épica"]
        assert [p.name for p in narrowed.items] == ["AÇÃO Épica"]
        assert await recent_projects_repository.count(both) == 1
        assert narrowed.filters == both

    @pytest.mark.asyncio
    async def test_name_wildcards_are_literal(self, recent_projects_repository):
        await seed(recent_projects_repository, [
            recent(1, name="100% done"),
            recent(2, name="100 done"),
        ])

        result = await recent_projects_repository.search(
            RecentProjectFilters(name="%"), PaginationParams(1, 10)
        )

        assert [p.name for p in result.items] == ["100% done"]


class TestRecordOpened:
    @pytest.mark.asyncio
    async def test_first_open_adds_entry(self, service, recent_projects_repository):
        output = await service.record_opened(
            {"path": "C:\\Games\\RPG", "name": "RPG", "gameVersion": "v1.2.0", "trechoCount": 5}
        )

        assert output.path == "C:/Games/RPG"
        assert output.game_version == "v1.2.0"
        assert output.has_trecho_data is True
        assert output.has_screenshot is False
        assert await recent_projects_repository.exists_by_path("C:/Games/RPG")

    @pytest.mark.asyncio
    async def test_reopen_refreshes_and_keeps_omitted_fields(self, service):
        first = await service.record_opened(
            {"path": "/games/rpg", "name": "RPG", "screenshotPath": "/shots/rpg.png"}
        )

        second = await service.record_opened(
            {"path": " /games/rpg ", "name": "RPG Alpha", "trechoCount": 7}
        )

        assert second.id == first.id
        assert second.name == "RPG Alpha"
        assert second.screenshot_path == "/shots/rpg.png"
        assert second.trecho_count == 7
        assert second.last_opened_at >= first.last_opened_at

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, field",
        [
            ({"path": "/games/rpg", "name": "RPG", "gameVersion": "1.2"}, "gameVersion"),
            ({"path": "/games/rpg", "name": "Bad\x07Name"}, "name"),
            ({"path": "   ", "name": "RPG"}, "path"),
            ({"path": "/games/rpg", "name": "RPG", "trechoCount": -1}, "trechoCount"),
        ],
    )
    async def test_invalid_input_is_itemized(self, service, body, field):
        with pytest.raises(InputValidationError) as exc_info:
            await service.record_opened(body)
        assert [e.field for e in exc_info.value.errors] == [field]


class TestListAndRemove:
    @pytest.mark.asyncio
    async def test_defaults_to_ten_per_page(self, service, recent_projects_repository):
        await seed(recent_projects_repository, [recent(i) for i in range(12)])

        result = await service.list_recent({})

        assert len(result.items) == 10
        assert result.items[0].name == "Project 11"
        assert result.pagination.per_page == 10
        assert result.pagination.last_page == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query, field", [({"perPage": "101"}, "perPage"), ({"page": "0"}, "page")])
    async def test_bad_query_is_itemized(self, service, query, field):
        with pytest.raises(InputValidationError) as exc_info:
            await service.list_recent(query)
        assert [e.field for e in exc_info.value.errors] == [field]
        assert exc_info.value.errors[0].source == "query"

    @pytest.mark.asyncio
    async def test_remove(self, service, recent_projects_repository):
        await seed(recent_projects_repository, [recent(1, path="C:/Games/RPG")])

        await service.remove({"path": "C:\\Games\\RPG"})

        assert await recent_projects_repository.count(ALL) == 0
        with pytest.raises(NotFoundError):
            await service.remove({"path": "C:/Games/RPG"})

    @pytest.mark.asyncio
    async def test_remove_without_path_is_input_error(self, service):
        with pytest.raises(InputValidationError) as exc_info:
            await service.remove({})
        assert exc_info.value.errors[0].field == "path"

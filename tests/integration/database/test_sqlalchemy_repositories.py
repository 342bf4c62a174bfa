"""Integration tests for the SQLAlchemy repositories and Unit of Work."""

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from domain.entities.task import Task
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

NOW = datetime(2026, 3, 10, 14, 0)

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


async def _save(uow_factory: UowFactory, *tasks: Task) -> None:
    async with uow_factory() as uow:
        for task in tasks:
            await uow.tasks.create(task)
        await uow.commit()


class TestTaskRepository:
    @pytest.mark.asyncio
    async def test_round_trip_keeps_every_field(self, uow_factory: UowFactory) -> None:
        task = Task(
            title="Renew insurance",
            description="Compare three quotes",
            due_date=datetime(2026, 3, 20, 23, 59),
            created_at=NOW,
        )
        await _save(uow_factory, task)

        async with uow_factory() as uow:
            loaded = await uow.tasks.get(task.id)

        assert loaded == task

    @pytest.mark.asyncio
    async def test_get_all_is_in_creation_order(self, uow_factory: UowFactory) -> None:
        later = Task(title="second", created_at=NOW + timedelta(minutes=5))
        earlier = Task(title="first", created_at=NOW)
        await _save(uow_factory, later, earlier)

        async with uow_factory() as uow:
            tasks = await uow.tasks.get_all()

        assert [t.title for t in tasks] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_get_overdue_skips_completed_future_and_undated(
        self, uow_factory: UowFactory
    ) -> None:
        overdue = Task(title="overdue", due_date=NOW - timedelta(hours=1), created_at=NOW)
        done = Task(
            title="done", due_date=NOW - timedelta(hours=1), is_completed=True, created_at=NOW
        )
        future = Task(title="future", due_date=NOW + timedelta(hours=1), created_at=NOW)
        undated = Task(title="undated", created_at=NOW)
        await _save(uow_factory, overdue, done, future, undated)

        async with uow_factory() as uow:
            result = await uow.tasks.get_overdue(NOW)

        assert [t.title for t in result] == ["overdue"]

    @pytest.mark.asyncio
    async def test_update_persists_completion(self, uow_factory: UowFactory) -> None:
        task = Task(title="Finish", due_date=NOW + timedelta(days=1), created_at=NOW)
        await _save(uow_factory, task)

        task.complete(NOW + timedelta(hours=1))
        async with uow_factory() as uow:
            await uow.tasks.update(task)
            await uow.commit()

        async with uow_factory() as uow:
            loaded = await uow.tasks.get(task.id)

        assert loaded is not None
        assert loaded.is_completed
        assert loaded.completed_at == NOW + timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_delete(self, uow_factory: UowFactory) -> None:
        task = Task(title="Temporary", created_at=NOW)
        await _save(uow_factory, task)

        async with uow_factory() as uow:
            assert await uow.tasks.delete(task.id) is True
            assert await uow.tasks.delete(uuid4()) is False
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.tasks.get(task.id) is None


class TestSettingsRepository:
    @pytest.mark.asyncio
    async def test_set_then_overwrite(self, uow_factory: UowFactory) -> None:
        async with uow_factory() as uow:
            await uow.settings.set("selected_theme", "dark")
            await uow.commit()
        async with uow_factory() as uow:
            await uow.settings.set("selected_theme", "default")
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.settings.get("selected_theme") == "default"
            assert await uow.settings.get("selected_filter") is None

    @pytest.mark.asyncio
    async def test_get_many_returns_only_stored_keys(self, uow_factory: UowFactory) -> None:
        async with uow_factory() as uow:
            await uow.settings.set("selected_filter", "active")
            await uow.commit()

        async with uow_factory() as uow:
            values = await uow.settings.get_many(["selected_filter", "selected_theme"])

        assert values == {"selected_filter": "active"}


class TestUnitOfWork:
    @pytest.mark.asyncio
    async def test_exception_rolls_back(self, uow_factory: UowFactory) -> None:
        task = Task(title="Never saved", created_at=NOW)

        with pytest.raises(RuntimeError):
            async with uow_factory() as uow:
                await uow.tasks.create(task)
                raise RuntimeError("abort")

        async with uow_factory() as uow:
            assert await uow.tasks.get(task.id) is None

    @pytest.mark.asyncio
    async def test_repositories_require_context(self, uow_factory: UowFactory) -> None:
        with pytest.raises(RuntimeError):
            uow_factory().tasks

"""Shared fixtures: environment, in-memory repositories and an app client with fakes bound."""

import os

# Settings are cached on first import, so the environment must be ready first
os.environ.setdefault("SUPABASE_URL", "https://garden.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_FORMAT"] = "text"

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from gardenhub.main import create_application
from gardenhub.modules.task_board.application.board_service import (
    BoardSessionRegistry,
    get_board_registry,
    get_clock,
)
from gardenhub.modules.task_board.domain.models import Task, TaskStatus
from gardenhub.modules.task_board.domain.repositories.task_repository import TaskRepository
from gardenhub.shared.core.dependencies import CurrentUser, get_current_user

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)

MEMBER_ID = "user-member"
OTHER_ID = "user-other"
ADMIN_ID = "user-admin"


def make_task(task_id: str, status: TaskStatus = TaskStatus.OPEN, assigned_to: Optional[str] = None, **extra) -> Task:
    return Task.model_validate({
        "id": task_id,
        "title": extra.pop("title", f"Task {task_id}"),
        "status": status,
        "assigned_to": assigned_to,
        **extra,
    })


def network_error() -> Exception:
    return httpx.ConnectError("Network unreachable")


class FakeTaskRepository(TaskRepository):
    """
    Tasks held in memory. ``fail_update`` / ``fail_list`` make the next calls raise.
    Every partial update is recorded in ``updates``.
    """

    def __init__(self, tasks: Optional[List[Task]] = None):
        self.tasks: Dict[str, Task] = {t.id: t for t in tasks or []}
        self.updates: List[Dict[str, Any]] = []
        self.created: List[Dict[str, Any]] = []
        self.list_calls = 0
        self.fail_update: Optional[Exception] = None
        self.fail_list: Optional[Exception] = None

    async def list_tasks(self) -> List[Task]:
        self.list_calls += 1
        if self.fail_list is not None:
            raise self.fail_list
        return list(self.tasks.values())

    async def get_task(self, task_id: str) -> Optional[Task]:
        return self.tasks.get(task_id)

    async def update_task(self, task_id: str, fields: Dict[str, Any], match: Optional[Dict[str, Any]] = None) -> None:
        self.updates.append({"task_id": task_id, "fields": dict(fields), "match": match})
        if self.fail_update is not None:
            raise self.fail_update
        task = self.tasks.get(task_id)
        if task is None:
            return
        if match and any(getattr(task, column) != value for column, value in match.items()):
            return
        self.tasks[task_id] = Task.model_validate({**task.model_dump(), **fields})

    async def create_task(self, fields: Dict[str, Any]) -> None:
        self.created.append(dict(fields))
        task_id = f"new-{len(self.created)}"
        self.tasks[task_id] = Task.model_validate({"id": task_id, **fields})

    async def delete_task(self, task_id: str) -> None:
        self.tasks.pop(task_id, None)


@pytest.fixture
def member() -> CurrentUser:
    return CurrentUser(user_id=MEMBER_ID, username="fern", role="ruser")


@pytest.fixture
def other_member() -> CurrentUser:
    return CurrentUser(user_id=OTHER_ID, username="basil", role="ruser")


@pytest.fixture
def admin() -> CurrentUser:
    return CurrentUser(user_id=ADMIN_ID, username="sage", role="admin")


@pytest.fixture
def task_repository() -> FakeTaskRepository:
    return FakeTaskRepository([
        make_task("t1", TaskStatus.OPEN),
        make_task("t2", TaskStatus.ASSIGNED, assigned_to=MEMBER_ID, assigned_by=MEMBER_ID),
        make_task("t3", TaskStatus.OPEN),
    ])


@pytest.fixture
def registry() -> BoardSessionRegistry:
    return BoardSessionRegistry()


@pytest.fixture
def app(task_repository, registry, member):
    application = create_application()
    application.dependency_overrides[TaskRepository] = lambda: task_repository
    application.dependency_overrides[get_board_registry] = lambda: registry
    application.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)
    application.dependency_overrides[get_current_user] = lambda: member
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

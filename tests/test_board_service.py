"""
Tests for task board use cases: drags, buttons, permissions, sorting.
"""
import pytest

from gardenhub.modules.task_board.application.board_service import (
    BoardService,
    SortOption,
    sort_and_filter,
)
from gardenhub.modules.task_board.application.dto import TaskDraftDTO
from gardenhub.modules.task_board.domain.models import PlotRef, ProfileSummary, TaskStatus
from gardenhub.shared.config.settings import get_settings
from gardenhub.shared.core.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    NotFoundError,
    ValidationError,
)

from conftest import FIXED_NOW, MEMBER_ID, OTHER_ID, FakeTaskRepository, make_task, network_error


@pytest.fixture
def service(task_repository, registry) -> BoardService:
    return BoardService(repository=task_repository, registry=registry, clock=lambda: FIXED_NOW)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Drag and drop
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


async def test_same_lane_drop_makes_no_network_call(service, task_repository, member):
    await service.load_board(member)
    await service.start_drag(member, "t1")
    await service.drag_over(member, "t3")
    calls_before = task_repository.list_calls

    result = await service.end_drag(member, "open")

    assert result.success
    assert task_repository.updates == []
    assert task_repository.list_calls == calls_before
    assert result.state.find_task("t1").status == TaskStatus.OPEN


async def test_cross_lane_drop_commits_and_saves_state(service, task_repository, registry, member):
    await service.start_drag(member, "t1")
    result = await service.end_drag(member, "assigned")

    assert result.success
    assert task_repository.tasks["t1"].assigned_to == MEMBER_ID
    assert registry.get(MEMBER_ID).find_task("t1").status == TaskStatus.ASSIGNED


async def test_start_drag_unknown_task_raises(service, member):
    with pytest.raises(NotFoundError):
        await service.start_drag(member, "missing")


async def test_drag_permission_enforced_when_enabled(service, task_repository, other_member, monkeypatch):
    monkeypatch.setattr(get_settings(), "BOARD_ENFORCE_DRAG_PERMISSIONS", True)
    await service.start_drag(other_member, "t2")

    with pytest.raises(AuthorizationError):
        await service.end_drag(other_member, "completed")
    assert task_repository.updates == []


async def test_drag_permission_off_by_default(service, task_repository, other_member):
    await service.start_drag(other_member, "t2")
    result = await service.end_drag(other_member, "completed")
    assert result.success
    assert task_repository.tasks["t2"].status == TaskStatus.COMPLETED


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Buttons
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


async def test_volunteer_assigns_current_user(service, task_repository, member):
    result = await service.volunteer(member, "t1")
    assert result.success
    task = task_repository.tasks["t1"]
    assert task.status == TaskStatus.ASSIGNED
    assert task.assigned_to == MEMBER_ID
    assert task.assigned_by == MEMBER_ID


async def test_volunteer_requires_open_task(service, member):
    with pytest.raises(BusinessRuleViolationError):
        await service.volunteer(member, "t2")


async def test_complete_only_by_assignee(service, other_member):
    with pytest.raises(AuthorizationError):
        await service.complete(other_member, "t2")


async def test_complete_matches_on_assignee(service, task_repository, member):
    result = await service.complete(member, "t2")
    assert result.success
    assert task_repository.updates[-1]["match"] == {"assigned_to": MEMBER_ID}
    assert task_repository.tasks["t2"].status == TaskStatus.COMPLETED
    assert task_repository.tasks["t2"].assigned_to == MEMBER_ID


async def test_complete_failure_returns_banner(service, task_repository, member):
    task_repository.fail_update = network_error()
    result = await service.complete(member, "t2")
    assert not result.success
    assert result.error == "Failed to complete task. Please try again."
    assert result.state.find_task("t2").status == TaskStatus.ASSIGNED


async def test_reopen_is_privileged(service, member, admin, task_repository):
    task_repository.tasks["t4"] = make_task("t4", TaskStatus.COMPLETED, assigned_to=MEMBER_ID)
    with pytest.raises(AuthorizationError):
        await service.reopen(member, "t4")

    result = await service.reopen(admin, "t4")
    assert result.success
    assert task_repository.tasks["t4"].status == TaskStatus.OPEN
    assert task_repository.tasks["t4"].assigned_to is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Create / edit / delete
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


async def test_create_task_with_assignee_is_assigned(service, task_repository, admin):
    draft = TaskDraftDTO(title="  Mulch beds ", assignee_id=OTHER_ID, due_date="")
    result = await service.create_task(admin, draft)

    assert result.success
    created = task_repository.created[-1]
    assert created["title"] == "Mulch beds"
    assert created["status"] == "assigned"
    assert created["assigned_to"] == OTHER_ID
    assert "due_date" not in created


async def test_create_task_requires_privilege(service, member):
    with pytest.raises(AuthorizationError):
        await service.create_task(member, TaskDraftDTO(title="Water"))


async def test_create_default_task(service, task_repository, admin):
    await service.create_default_task(admin, 0)
    assert task_repository.created[-1]["title"] == "Site Cleanup"
    assert task_repository.created[-1]["status"] == "open"

    with pytest.raises(ValidationError):
        await service.create_default_task(admin, 99)


async def test_edit_completed_task_keeps_completed(service, task_repository, admin):
    task_repository.tasks["t4"] = make_task("t4", TaskStatus.COMPLETED, assigned_to=MEMBER_ID)
    result = await service.update_task(admin, "t4", TaskDraftDTO(title="Done", assignee_id=MEMBER_ID))
    assert result.success
    assert task_repository.tasks["t4"].status == TaskStatus.COMPLETED


async def test_edit_without_assignee_reopens(service, task_repository, admin):
    await service.update_task(admin, "t2", TaskDraftDTO(title="Unassigned now"))
    task = task_repository.tasks["t2"]
    assert task.status == TaskStatus.OPEN
    assert task.assigned_to is None


async def test_delete_task(service, task_repository, admin):
    result = await service.delete_task(admin, "t1")
    assert result.success
    assert result.state.find_task("t1") is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Sort and filter
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_sort_by_plot_puts_missing_last():
    tasks = [
        make_task("a"),
        make_task("b", plot_id="p2", plot=PlotRef(id="p2", number="B2")),
        make_task("c", plot_id="p1", plot=PlotRef(id="p1", number="A1")),
    ]
    assert [t.id for t in sort_and_filter(tasks, SortOption.PLOT)] == ["c", "b", "a"]


def test_sort_by_assignee_and_filter():
    tasks = [
        make_task("a", TaskStatus.ASSIGNED, assigned_to="u2", assignee=ProfileSummary(id="u2", username="zinnia")),
        make_task("b", TaskStatus.ASSIGNED, assigned_to="u1", assignee=ProfileSummary(id="u1", username="aster")),
        make_task("c"),
    ]
    assert [t.id for t in sort_and_filter(tasks, SortOption.ASSIGNEE)] == ["b", "a", "c"]
    assert [t.id for t in sort_and_filter(tasks, assignee_id="u2")] == ["a"]


async def test_lanes_view_applies_filters(service, member):
    repository = FakeTaskRepository([make_task("x", plot_id="p1"), make_task("y", plot_id="p2")])
    service = BoardService(repository=repository, registry=service.registry, clock=lambda: FIXED_NOW)
    state = await service.load_board(member)
    lanes = service.lanes(state, plot_id="p1")
    assert [t.id for t in lanes["open"]] == ["x"]

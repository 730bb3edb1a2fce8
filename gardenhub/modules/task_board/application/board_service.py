# 📄 File: gardenhub/modules/task_board/application/board_service.py
# 🧭 Purpose (Layman Explanation):
# Everything a member can do on the volunteer task board: drag cards between columns,
# volunteer, mark done, reopen, and (for admins and moderators) create, edit and delete tasks.
# 🧪 Purpose (Technical Summary):
# Application service holding one BoardState per member in a process-local registry,
# driving the pure drag transitions and routing every mutation through the Reconciler.
# Also provides the sorted and filtered lane view.
# 🔗 Dependencies:
# FastAPI Depends, task_board.domain, task_board.application.reconciler,
# gardenhub.shared.core (CurrentUser, exceptions), gardenhub.shared.config.settings
# 🔄 Connected Modules / Calls From:
# task_board.presentation.api.v1.tasks

from datetime import datetime, timezone
from enum import Enum
from functools import lru_cache
from typing import Callable, Dict, List, Optional

from fastapi import Depends

from gardenhub.shared.config.settings import get_settings
from gardenhub.shared.core.dependencies import CurrentUser
from gardenhub.shared.core.error_classification import handle_error
from gardenhub.shared.core.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    NotFoundError,
    ValidationError,
)
from gardenhub.shared.utils.logging import get_logger

from ..domain import board
from ..domain.assignment import assignment_fields_for
from ..domain.board import BoardState
from ..domain.models.lane import LANES
from ..domain.models.task import DEFAULT_GARDEN_TASKS, Task, TaskStatus
from ..domain.repositories.task_repository import TaskRepository
from .dto import TaskDraftDTO
from .reconciler import CommitResult, Reconciler

logger = get_logger(__name__)

VOLUNTEER_FAILED_MESSAGE = "Failed to volunteer for task. Please try again."
COMPLETE_FAILED_MESSAGE = "Failed to complete task. Please try again."
REOPEN_FAILED_MESSAGE = "Failed to reopen task. Please try again."
UPDATE_FAILED_MESSAGE = "Failed to update task. Please try again."
DELETE_FAILED_MESSAGE = "Failed to delete task. Please try again."
CREATE_FAILED_MESSAGE = "Failed to create task. Please try again."


class SortOption(str, Enum):
    NONE = "none"
    PLOT = "plot"
    ASSIGNEE = "assignee"


class BoardSessionRegistry:
    """
    Board state per member, kept in process memory.

    Each member has exactly one board and therefore at most one drag session.
    """

    def __init__(self):
        self._states: Dict[str, BoardState] = {}

    def get(self, user_id: str) -> BoardState:
        return self._states.get(user_id) or BoardState()

    def save(self, user_id: str, state: BoardState) -> BoardState:
        self._states[user_id] = state
        return state


@lru_cache()
def get_board_registry() -> BoardSessionRegistry:
    return BoardSessionRegistry()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Callable[[], datetime]:
    return utc_now


def sort_and_filter(
    tasks: List[Task],
    sort_by: SortOption = SortOption.NONE,
    plot_id: Optional[str] = None,
    assignee_id: Optional[str] = None,
) -> List[Task]:
    """Order tasks inside a lane; tasks missing the sort key go last."""
    result = list(tasks)

    if sort_by == SortOption.PLOT:
        result.sort(key=lambda t: (t.plot is None, t.plot.number if t.plot else ""))
    elif sort_by == SortOption.ASSIGNEE:
        result.sort(key=lambda t: (
            t.assignee is None,
            (t.assignee.username or "") if t.assignee else "",
        ))

    if plot_id:
        result = [t for t in result if t.plot_id == plot_id]
    if assignee_id:
        result = [t for t in result if t.assigned_to == assignee_id]

    return result


class BoardService:
    """
    Task board use cases for the authenticated member.
    """

    def __init__(
        self,
        repository: TaskRepository = Depends(),
        registry: BoardSessionRegistry = Depends(get_board_registry),
        clock: Callable[[], datetime] = Depends(get_clock),
    ):
        self.repository = repository
        self.registry = registry
        self.clock = clock
        self.reconciler = Reconciler(repository)

    # =========================================================================
    # BOARD
    # =========================================================================

    async def load_board(self, user: CurrentUser) -> BoardState:
        state = await self.reconciler.refresh(self.registry.get(user.user_id))
        return self.registry.save(user.user_id, state)

    def lanes(
        self,
        state: BoardState,
        sort_by: SortOption = SortOption.NONE,
        plot_id: Optional[str] = None,
        assignee_id: Optional[str] = None,
    ) -> Dict[str, List[Task]]:
        partitioned = state.lanes()
        return {
            lane.id: sort_and_filter(partitioned[lane.id], sort_by, plot_id, assignee_id)
            for lane in LANES
        }

    # =========================================================================
    # DRAG AND DROP
    # =========================================================================

    async def start_drag(self, user: CurrentUser, task_id: str) -> BoardState:
        state = self.registry.get(user.user_id)
        if state.find_task(task_id) is None:
            state = await self.reconciler.refresh(state)
        if state.find_task(task_id) is None:
            raise NotFoundError("Task not found", resource_type="task", resource_id=task_id)
        return self.registry.save(user.user_id, board.start_drag(state, task_id))

    async def drag_over(self, user: CurrentUser, over_id: Optional[str]) -> BoardState:
        state = board.drag_over(self.registry.get(user.user_id), over_id)
        return self.registry.save(user.user_id, state)

    async def end_drag(self, user: CurrentUser, over_id: Optional[str]) -> CommitResult:
        """
        Finish the member's drag. A cross-lane drop is committed and the board
        refetched; any other drop only restores the local state.
        """
        state = self.registry.get(user.user_id)
        dragged = state.find_task(state.drag.task_id) if state.drag else None
        state = board.end_drag(state, over_id, user.user_id, self.clock())

        if state.pending is None:
            self.registry.save(user.user_id, state)
            return CommitResult(success=True, state=state)

        if get_settings().BOARD_ENFORCE_DRAG_PERMISSIONS and dragged is not None:
            self._check_drag_permission(user, dragged, state)

        result = await self.reconciler.commit_pending(state)
        self.registry.save(user.user_id, result.state)
        logger.log_user_action(
            "drag_task",
            user.user_id,
            resource=f"task:{state.pending.task_id}",
            result="success" if result.success else "failed",
            extra={"to_status": state.pending.new_status.value},
        )
        return result

    async def cancel_drag(self, user: CurrentUser) -> BoardState:
        return self.registry.save(user.user_id, board.cancel_drag(self.registry.get(user.user_id)))

    def _check_drag_permission(self, user: CurrentUser, task: Task, state: BoardState) -> None:
        if user.is_privileged():
            return
        if task.assigned_to is None or task.assigned_to == user.user_id:
            return
        self.registry.save(user.user_id, board.revert(state, state.pending))
        raise AuthorizationError(
            "Only admins and moderators can move tasks assigned to other members",
            resource_type="task",
            resource_id=task.id,
            user_id=user.user_id,
        )

    # =========================================================================
    # BUTTON ACTIONS
    # =========================================================================

    async def _require_task(self, task_id: str) -> Task:
        task = await self.repository.get_task(task_id)
        if task is None:
            raise NotFoundError("Task not found", resource_type="task", resource_id=task_id)
        return task

    def _require_privileged(self, user: CurrentUser, action: str) -> None:
        if not user.is_privileged():
            raise AuthorizationError(
                f"Only admins and moderators can {action} tasks",
                required_permission="privileged",
                user_id=user.user_id,
            )

    async def _transition(
        self,
        user: CurrentUser,
        task_id: str,
        new_status: TaskStatus,
        failure_message: str,
        match: Optional[Dict[str, str]] = None,
        fields: Optional[Dict[str, object]] = None,
    ) -> CommitResult:
        if fields is None:
            fields = assignment_fields_for(new_status, user.user_id, self.clock())
        fields = {k: v for k, v in fields.items() if k != "status"}
        result = await self.reconciler.commit_transition(
            self.registry.get(user.user_id),
            task_id,
            new_status,
            fields,
            match=match,
            failure_message=failure_message,
        )
        self.registry.save(user.user_id, result.state)
        return result

    async def volunteer(self, user: CurrentUser, task_id: str) -> CommitResult:
        task = await self._require_task(task_id)
        if task.status != TaskStatus.OPEN:
            raise BusinessRuleViolationError(
                "Only open tasks can be volunteered for", rule="volunteer_requires_open"
            )
        result = await self._transition(user, task_id, TaskStatus.ASSIGNED, VOLUNTEER_FAILED_MESSAGE)
        logger.log_user_action("volunteer", user.user_id, resource=f"task:{task_id}")
        return result

    async def complete(self, user: CurrentUser, task_id: str) -> CommitResult:
        task = await self._require_task(task_id)
        if task.status != TaskStatus.ASSIGNED:
            raise BusinessRuleViolationError(
                "Only tasks in progress can be completed", rule="complete_requires_assigned"
            )
        if not task.is_assigned_to(user.user_id):
            raise AuthorizationError(
                "Only the assigned member can complete this task",
                resource_type="task",
                resource_id=task_id,
                user_id=user.user_id,
            )
        return await self._transition(
            user, task_id, TaskStatus.COMPLETED, COMPLETE_FAILED_MESSAGE,
            match={"assigned_to": user.user_id},
        )

    async def reopen(self, user: CurrentUser, task_id: str) -> CommitResult:
        self._require_privileged(user, "reopen")
        task = await self._require_task(task_id)
        if task.status != TaskStatus.COMPLETED:
            raise BusinessRuleViolationError(
                "Only completed tasks can be reopened", rule="reopen_requires_completed"
            )
        return await self._transition(user, task_id, TaskStatus.OPEN, REOPEN_FAILED_MESSAGE)

    async def update_task(self, user: CurrentUser, task_id: str, draft: TaskDraftDTO) -> CommitResult:
        self._require_privileged(user, "edit")
        task = await self._require_task(task_id)
        new_status = draft.status_for(task.status)
        return await self._transition(
            user, task_id, new_status, UPDATE_FAILED_MESSAGE,
            fields=draft.to_update_fields(user.user_id, self.clock()),
        )

    async def delete_task(self, user: CurrentUser, task_id: str) -> CommitResult:
        self._require_privileged(user, "delete")
        error = None
        try:
            await self.repository.delete_task(task_id)
            logger.log_user_action("delete_task", user.user_id, resource=f"task:{task_id}")
        except Exception as e:
            app_error = handle_error(e, operation="delete_task", table="tasks")
            logger.error(f"Error deleting task: {app_error.message}", extra={"task_id": task_id})
            error = DELETE_FAILED_MESSAGE
        return await self._refresh_after(user, error)

    async def create_task(self, user: CurrentUser, draft: TaskDraftDTO) -> CommitResult:
        self._require_privileged(user, "create")
        return await self._insert(user, draft.to_create_fields(user.user_id, self.clock()))

    async def create_default_task(self, user: CurrentUser, index: int) -> CommitResult:
        self._require_privileged(user, "create")
        if not 0 <= index < len(DEFAULT_GARDEN_TASKS):
            raise ValidationError(
                "Unknown default task",
                field="index",
                value=index,
                constraint=f"0 <= index < {len(DEFAULT_GARDEN_TASKS)}",
            )
        template = DEFAULT_GARDEN_TASKS[index]
        return await self._insert(user, {
            "title": template.title,
            "description": template.description,
            "priority": template.priority.value,
            "created_by": user.user_id,
            "status": TaskStatus.OPEN.value,
        })

    async def _insert(self, user: CurrentUser, fields: Dict[str, object]) -> CommitResult:
        error = None
        try:
            await self.repository.create_task(fields)
            logger.log_user_action("create_task", user.user_id, resource=f"task:{fields['title']}")
        except Exception as e:
            app_error = handle_error(e, operation="create_task", table="tasks")
            logger.error(f"Error creating task: {app_error.message}")
            error = CREATE_FAILED_MESSAGE
        return await self._refresh_after(user, error)

    async def _refresh_after(self, user: CurrentUser, error: Optional[str]) -> CommitResult:
        state = await self.reconciler.refresh(self.registry.get(user.user_id), error=error)
        self.registry.save(user.user_id, state)
        return CommitResult(success=error is None and state.error is None, state=state, error=state.error)

# 📄 File: gardenhub/modules/task_board/application/reconciler.py
# 🧭 Purpose (Layman Explanation):
# After a card is moved, saves the change to the database and then reloads every task,
# so the board always ends up showing what the database really holds.
# 🧪 Purpose (Technical Summary):
# Bridges optimistic board state and the gateway: performs the partial update, then
# unconditionally refetches the full snapshot. Update failures become a retryable banner;
# when the refetch fails the move is kept if the update landed and reverted if it did not.
# 🔗 Dependencies:
# task_board.domain (board, repository), gardenhub.shared.core.error_classification,
# gardenhub.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# task_board.application.board_service

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from gardenhub.shared.core.error_classification import handle_error
from gardenhub.shared.core.exceptions import ErrorType
from gardenhub.shared.utils.logging import get_logger

from ..domain.board import BoardState, PendingCommit, apply_snapshot, revert, settle
from ..domain.models.task import Task, TaskStatus
from ..domain.repositories.task_repository import TaskRepository

logger = get_logger(__name__)

UPDATE_FAILED_MESSAGE = "Failed to update task status. Please try again."
REFRESH_FAILED_MESSAGE = "Failed to refresh tasks. Please try again."


class CommitResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    state: BoardState
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None


class Reconciler:
    """
    Commits board transitions and resynchronizes from the gateway.

    There is no locking or version check. Whatever the gateway returns on
    the refetch after a commit is what the board shows.
    """

    def __init__(self, repository: TaskRepository):
        self._repository = repository

    async def refresh(self, state: BoardState, error: Optional[str] = None) -> BoardState:
        """
        Replace the board's tasks with a fresh snapshot.

        On failure the current tasks are kept and the refresh banner is set.
        """
        try:
            tasks = await self._repository.list_tasks()
        except Exception as e:
            app_error = handle_error(e, operation="list_tasks", table="tasks")
            logger.error(
                f"Error fetching tasks: {app_error.message}",
                extra={"error_type": app_error.error_type.value}
            )
            return state.model_copy(update={"error": REFRESH_FAILED_MESSAGE})
        return apply_snapshot(state, _checked(tasks), error=error)

    async def commit_transition(
        self,
        state: BoardState,
        task_id: str,
        new_status: TaskStatus,
        assignment_fields: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None,
        failure_message: str = UPDATE_FAILED_MESSAGE,
    ) -> CommitResult:
        """
        Update one task, then refetch every task regardless of the outcome.

        Args:
            state: Board state, possibly holding an optimistic move
            task_id: Task being transitioned
            new_status: Destination status
            assignment_fields: Assignee/assigner/timestamp columns to write
            match: Extra equality filters for the update
            failure_message: Banner shown when the update fails

        Returns:
            CommitResult: outcome plus the reconciled board state
        """
        pending = state.pending
        if pending is None or pending.task_id != task_id:
            current = state.find_task(task_id)
            pending = PendingCommit(
                task_id=task_id,
                origin_status=current.status if current else new_status,
                new_status=new_status,
                fields=assignment_fields,
            )

        fields = {**assignment_fields, "status": new_status.value}
        error: Optional[str] = None
        error_type: Optional[ErrorType] = None

        try:
            await self._repository.update_task(task_id, fields, match=match)
            logger.log_business_event(
                "task_status_changed",
                f"Task {task_id} moved to {new_status.value}",
                entity_id=task_id,
                entity_type="task",
                extra={"from_status": pending.origin_status.value, "to_status": new_status.value},
            )
        except Exception as e:
            app_error = handle_error(e, operation="update_task", table="tasks")
            error = failure_message
            error_type = app_error.error_type
            logger.error(
                f"Error updating task status: {app_error.message}",
                extra={"task_id": task_id, "error_type": error_type.value}
            )

        try:
            tasks = await self._repository.list_tasks()
        except Exception as e:
            app_error = handle_error(e, operation="list_tasks", table="tasks")
            logger.error(
                f"Error refreshing tasks after commit: {app_error.message}",
                extra={"task_id": task_id, "error_type": app_error.error_type.value}
            )
            if error is None:
                # The gateway holds the new status; only the snapshot is missing
                local = settle(state, pending, error=REFRESH_FAILED_MESSAGE)
            else:
                local = revert(state, pending, error=REFRESH_FAILED_MESSAGE)
            return CommitResult(
                success=False,
                state=local,
                error=REFRESH_FAILED_MESSAGE,
                error_type=error_type or app_error.error_type,
            )

        return CommitResult(
            success=error is None,
            state=apply_snapshot(state, _checked(tasks), error=error),
            error=error,
            error_type=error_type,
        )

    async def commit_pending(self, state: BoardState) -> CommitResult:
        """Commit the transition recorded by a cross-lane drop."""
        pending = state.pending
        if pending is None:
            return CommitResult(success=True, state=state)
        return await self.commit_transition(
            state,
            pending.task_id,
            pending.new_status,
            {k: v for k, v in pending.fields.items() if k != "status"},
        )


def _checked(tasks: List[Task]) -> List[Task]:
    """Warn about snapshot rows whose assignee disagrees with their status."""
    for task in tasks:
        if not task.satisfies_assignment_invariant():
            logger.warning(
                f"Task {task.id} is {task.status.value} with assignee {task.assigned_to!r}",
                extra={"task_id": task.id, "status": task.status.value}
            )
    return tasks

# 📄 File: gardenhub/modules/task_board/domain/board.py
# 🧭 Purpose (Layman Explanation):
# Keeps track of a member dragging a task card between the "open", "in progress" and
# "completed" columns, moving the card right away and working out what must be saved.
# 🧪 Purpose (Technical Summary):
# Immutable board state plus pure transition functions for the drag lifecycle
# (idle -> dragging -> hovering -> dropped -> idle). A cross-lane drop yields a
# PendingCommit for the reconciler; same-lane or outside drops restore the origin status.
# 🔗 Dependencies:
# pydantic, task_board.domain.models, task_board.domain.assignment
# 🔄 Connected Modules / Calls From:
# task_board.application.board_service, task_board.application.reconciler

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .assignment import assignment_fields_for
from .models.lane import Lane, get_lane, lane_for_status, partition
from .models.task import Task, TaskStatus


class BoardPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    HOVERING = "hovering"
    DROPPED = "dropped"


class DragSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    task_id: str
    origin_status: TaskStatus
    hovered_lane: Optional[str] = None


class PendingCommit(BaseModel):
    """Authoritative update owed to the gateway after a cross-lane drop."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    origin_status: TaskStatus
    new_status: TaskStatus
    fields: Dict[str, Any] = Field(default_factory=dict)


class BoardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    tasks: Tuple[Task, ...] = ()
    phase: BoardPhase = BoardPhase.IDLE
    drag: Optional[DragSession] = None
    pending: Optional[PendingCommit] = None
    error: Optional[str] = None

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def lanes(self) -> Dict[str, List[Task]]:
        return partition(self.tasks)


def _with_task_status(tasks: Sequence[Task], task_id: str, status: TaskStatus) -> Tuple[Task, ...]:
    return tuple(
        task.with_status(status) if task.id == task_id and task.status != status else task
        for task in tasks
    )


def resolve_container(state: BoardState, over_id: Optional[str]) -> Optional[Lane]:
    """
    A drop target is either a lane id or the id of a task card.
    A task id resolves to the lane of that task's current status.
    """
    if not over_id:
        return None
    lane = get_lane(over_id)
    if lane is not None:
        return lane
    task = state.find_task(over_id)
    if task is None:
        return None
    return lane_for_status(task.status)


def start_drag(state: BoardState, task_id: str) -> BoardState:
    """Capture the dragged task and its origin status. Unknown ids are ignored."""
    task = state.find_task(task_id)
    if task is None:
        return state

    # A second drag start abandons the speculative move of the first.
    if state.drag is not None and state.phase in (BoardPhase.DRAGGING, BoardPhase.HOVERING):
        state = cancel_drag(state)
        task = state.find_task(task_id)

    return state.model_copy(update={
        "phase": BoardPhase.DRAGGING,
        "drag": DragSession(task_id=task_id, origin_status=task.status),
        "error": None,
    })


def drag_over(state: BoardState, over_id: Optional[str]) -> BoardState:
    """Speculatively move the dragged task into the hovered lane."""
    if state.drag is None:
        return state

    lane = resolve_container(state, over_id)
    task = state.find_task(state.drag.task_id)
    if lane is None or task is None:
        return state

    tasks = state.tasks
    if lane.status != task.status:
        tasks = _with_task_status(tasks, task.id, lane.status)

    return state.model_copy(update={
        "tasks": tasks,
        "phase": BoardPhase.HOVERING,
        "drag": state.drag.model_copy(update={"hovered_lane": lane.id}),
    })


def cancel_drag(state: BoardState) -> BoardState:
    """End a drag without committing, restoring the origin status."""
    if state.drag is None:
        return state
    return state.model_copy(update={
        "tasks": _with_task_status(state.tasks, state.drag.task_id, state.drag.origin_status),
        "phase": BoardPhase.IDLE,
        "drag": None,
    })


def end_drag(
    state: BoardState,
    over_id: Optional[str],
    acting_user_id: str,
    now: datetime,
) -> BoardState:
    """
    Finish the drag.

    Dropping outside any lane, or back onto the origin lane, makes no commit.
    Dropping onto another lane leaves the optimistic status in place and
    records a PendingCommit with the assignment fields for the destination.
    """
    if state.drag is None:
        return state

    lane = resolve_container(state, over_id)
    origin = state.drag.origin_status
    if lane is None or lane.status == origin:
        return cancel_drag(state)

    task_id = state.drag.task_id
    pending = PendingCommit(
        task_id=task_id,
        origin_status=origin,
        new_status=lane.status,
        fields=assignment_fields_for(lane.status, acting_user_id, now),
    )
    return state.model_copy(update={
        "tasks": _with_task_status(state.tasks, task_id, lane.status),
        "phase": BoardPhase.DROPPED,
        "drag": None,
        "pending": pending,
    })


def apply_snapshot(state: BoardState, tasks: Sequence[Task], error: Optional[str] = None) -> BoardState:
    """Replace local tasks with the gateway's snapshot, discarding any drift."""
    return state.model_copy(update={
        "tasks": tuple(tasks),
        "phase": BoardPhase.IDLE if state.drag is None else state.phase,
        "pending": None,
        "error": error,
    })


def revert(state: BoardState, pending: PendingCommit, error: Optional[str] = None) -> BoardState:
    """Undo an optimistic move locally when no fresh snapshot is available."""
    return state.model_copy(update={
        "tasks": _with_task_status(state.tasks, pending.task_id, pending.origin_status),
        "phase": BoardPhase.IDLE if state.drag is None else state.phase,
        "pending": None,
        "error": error,
    })


def settle(state: BoardState, pending: PendingCommit, error: Optional[str] = None) -> BoardState:
    """
    Keep a committed move locally when no fresh snapshot is available.

    The gateway accepted the update, so the task takes the new status and
    the assignment fields that were written.
    """
    fields = {k: v for k, v in pending.fields.items() if k != "status"}
    if "assigned_to" in fields:
        # Embedded profiles describe the previous assignee
        fields.update({"assignee": None, "assigner": None})
    tasks = tuple(
        Task.model_validate({**task.model_dump(), **fields, "status": pending.new_status})
        if task.id == pending.task_id else task
        for task in state.tasks
    )
    return state.model_copy(update={
        "tasks": tasks,
        "phase": BoardPhase.IDLE if state.drag is None else state.phase,
        "pending": None,
        "error": error,
    })

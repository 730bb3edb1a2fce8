# 📄 File: gardenhub/modules/task_board/presentation/api/schemas.py
# 🧭 Purpose (Layman Explanation):
# The exact shape of what the task board web page sends and gets back.
# 🧪 Purpose (Technical Summary):
# Request and response schemas for the task board endpoints: drag events, lane view,
# board snapshot with banner and phase, and the default task catalogue.
# 🔗 Dependencies:
# pydantic, task_board.domain, task_board.application.reconciler
# 🔄 Connected Modules / Calls From:
# task_board.presentation.api.v1.tasks

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...application.reconciler import CommitResult
from ...domain.board import BoardPhase, BoardState
from ...domain.models.lane import LANES
from ...domain.models.task import DEFAULT_GARDEN_TASKS, Task, TaskPriority, TaskStatus


class DragStartRequest(BaseModel):
    task_id: str = Field(..., description="Task being dragged")


class DragTargetRequest(BaseModel):
    over_id: Optional[str] = Field(
        None, description="Lane id or task id under the pointer; null when outside every lane"
    )


class LaneResponse(BaseModel):
    id: str
    title: str
    status: TaskStatus
    tasks: List[Task]


class DragSessionResponse(BaseModel):
    task_id: str
    origin_status: TaskStatus
    hovered_lane: Optional[str] = None


class BoardResponse(BaseModel):
    phase: BoardPhase
    lanes: List[LaneResponse]
    drag: Optional[DragSessionResponse] = None
    error: Optional[str] = Field(None, description="Banner message after a failed operation")

    @classmethod
    def from_lanes(cls, state: BoardState, lanes: Dict[str, List[Task]]) -> "BoardResponse":
        return cls(
            phase=state.phase,
            lanes=[
                LaneResponse(id=lane.id, title=lane.title, status=lane.status, tasks=lanes[lane.id])
                for lane in LANES
            ],
            drag=DragSessionResponse(**state.drag.model_dump()) if state.drag else None,
            error=state.error,
        )


class CommitResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    error_type: Optional[str] = None
    board: BoardResponse

    @classmethod
    def from_result(cls, result: CommitResult, lanes: Dict[str, List[Task]]) -> "CommitResponse":
        return cls(
            success=result.success,
            error=result.error,
            error_type=result.error_type.value if result.error_type else None,
            board=BoardResponse.from_lanes(result.state, lanes),
        )


class DefaultTaskResponse(BaseModel):
    index: int
    title: str
    description: str
    priority: TaskPriority


def default_task_catalogue() -> List[DefaultTaskResponse]:
    return [
        DefaultTaskResponse(index=i, **template.model_dump())
        for i, template in enumerate(DEFAULT_GARDEN_TASKS)
    ]

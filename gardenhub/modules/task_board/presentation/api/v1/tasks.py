# 📄 File: gardenhub/modules/task_board/presentation/api/v1/tasks.py
# 🧭 Purpose (Layman Explanation):
# The web addresses the task board page calls: load the board, report drag events,
# and press the volunteer / complete / reopen / edit / delete buttons.
# 🧪 Purpose (Technical Summary):
# FastAPI router for the task board. Drag endpoints drive the per-member board state
# machine; mutation endpoints return the reconciled board plus any banner message.
# 🔗 Dependencies:
# FastAPI, task_board.application (BoardService, TaskDraftDTO), gardenhub.shared.core.dependencies
# 🔄 Connected Modules / Calls From:
# gardenhub.api.v1.router

"""
Task Board API Endpoints

Endpoints:
- GET /board: Reconciled board with sorting and filtering
- POST /board/drag/start, /board/drag/over, /board/drag/end, /board/drag/cancel
- POST /{task_id}/volunteer, /{task_id}/complete, /{task_id}/reopen
- POST /: Create task (admin/mod)
- GET /defaults, POST /defaults/{index}: Built-in garden tasks (admin/mod)
- PUT /{task_id}: Edit task (admin/mod)
- DELETE /{task_id}: Delete task (admin/mod)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from gardenhub.shared.core.dependencies import CurrentUser, get_current_user

from ....application.board_service import BoardService, SortOption
from ....application.dto import TaskDraftDTO
from ....application.reconciler import CommitResult
from ..schemas import (
    BoardResponse,
    CommitResponse,
    DefaultTaskResponse,
    DragStartRequest,
    DragTargetRequest,
    default_task_catalogue,
)

tasks_router = APIRouter()


def _commit_response(service: BoardService, result: CommitResult) -> CommitResponse:
    return CommitResponse.from_result(result, service.lanes(result.state))


@tasks_router.get(
    "/board",
    response_model=BoardResponse,
    summary="Get the task board",
    responses={
        200: {"description": "Tasks partitioned into lanes"},
        401: {"description": "Authentication required"},
    }
)
async def get_board(
    sort_by: SortOption = Query(SortOption.NONE),
    plot_id: Optional[str] = Query(None),
    assignee_id: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> BoardResponse:
    """
    Refetch all tasks and return them as lanes.

    A failed refetch keeps the previous snapshot and sets the banner.
    """
    state = await service.load_board(current_user)
    return BoardResponse.from_lanes(state, service.lanes(state, sort_by, plot_id, assignee_id))


@tasks_router.post("/board/drag/start", response_model=BoardResponse, summary="Start dragging a task")
async def drag_start(
    request: DragStartRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> BoardResponse:
    state = await service.start_drag(current_user, request.task_id)
    return BoardResponse.from_lanes(state, service.lanes(state))


@tasks_router.post("/board/drag/over", response_model=BoardResponse, summary="Hover a lane or card")
async def drag_over(
    request: DragTargetRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> BoardResponse:
    state = await service.drag_over(current_user, request.over_id)
    return BoardResponse.from_lanes(state, service.lanes(state))


@tasks_router.post(
    "/board/drag/end",
    response_model=CommitResponse,
    summary="Drop the dragged task",
    responses={
        200: {"description": "Drop handled; success is false when the update or refetch failed"},
        403: {"description": "Move not allowed for this member"},
    }
)
async def drag_end(
    request: DragTargetRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    """
    Cross-lane drops are committed and followed by a full refetch.
    Drops onto the origin lane or outside every lane make no update.
    """
    result = await service.end_drag(current_user, request.over_id)
    return _commit_response(service, result)


@tasks_router.post("/board/drag/cancel", response_model=BoardResponse, summary="Abort the drag")
async def drag_cancel(
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> BoardResponse:
    state = await service.cancel_drag(current_user)
    return BoardResponse.from_lanes(state, service.lanes(state))


@tasks_router.post("/{task_id}/volunteer", response_model=CommitResponse, summary="Volunteer for an open task")
async def volunteer(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    return _commit_response(service, await service.volunteer(current_user, task_id))


@tasks_router.post("/{task_id}/complete", response_model=CommitResponse, summary="Complete your task")
async def complete(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    return _commit_response(service, await service.complete(current_user, task_id))


@tasks_router.post("/{task_id}/reopen", response_model=CommitResponse, summary="Reopen a completed task")
async def reopen(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    return _commit_response(service, await service.reopen(current_user, task_id))


@tasks_router.post(
    "/",
    response_model=CommitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    draft: TaskDraftDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    return _commit_response(service, await service.create_task(current_user, draft))


@tasks_router.get("/defaults", response_model=list[DefaultTaskResponse], summary="Built-in garden tasks")
async def list_default_tasks() -> list[DefaultTaskResponse]:
    return default_task_catalogue()


@tasks_router.post(
    "/defaults/{index}",
    response_model=CommitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a built-in garden task",
)
async def create_default_task(
    index: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    return _commit_response(service, await service.create_default_task(current_user, index))


@tasks_router.put("/{task_id}", response_model=CommitResponse, summary="Edit a task")
async def update_task(
    task_id: str,
    draft: TaskDraftDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    return _commit_response(service, await service.update_task(current_user, task_id, draft))


@tasks_router.delete("/{task_id}", response_model=CommitResponse, summary="Delete a task")
async def delete_task(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(),
) -> CommitResponse:
    return _commit_response(service, await service.delete_task(current_user, task_id))

"""
Tests for the drag-and-drop board state machine.
"""
from gardenhub.modules.task_board.domain import board
from gardenhub.modules.task_board.domain.assignment import assignment_fields_for
from gardenhub.modules.task_board.domain.board import BoardPhase, BoardState
from gardenhub.modules.task_board.domain.models import TaskStatus
from gardenhub.modules.task_board.domain.models.lane import partition

from conftest import FIXED_NOW, MEMBER_ID, make_task


def _state() -> BoardState:
    return BoardState(tasks=(
        make_task("t1", TaskStatus.OPEN),
        make_task("t2", TaskStatus.ASSIGNED, assigned_to=MEMBER_ID),
        make_task("t4", TaskStatus.COMPLETED, assigned_to=MEMBER_ID),
    ))


def _status(state: BoardState, task_id: str) -> TaskStatus:
    return state.find_task(task_id).status


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Lanes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_partition_keeps_order_within_lane():
    tasks = [make_task("a"), make_task("b", TaskStatus.COMPLETED), make_task("c")]
    lanes = partition(tasks)
    assert [t.id for t in lanes["open"]] == ["a", "c"]
    assert [t.id for t in lanes["completed"]] == ["b"]
    assert lanes["assigned"] == []


def test_resolve_container_accepts_lane_or_task_id():
    state = _state()
    assert board.resolve_container(state, "completed").status == TaskStatus.COMPLETED
    assert board.resolve_container(state, "t2").status == TaskStatus.ASSIGNED
    assert board.resolve_container(state, "nowhere") is None
    assert board.resolve_container(state, None) is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Drag lifecycle
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_start_drag_records_origin():
    state = board.start_drag(_state(), "t1")
    assert state.phase == BoardPhase.DRAGGING
    assert state.drag.task_id == "t1"
    assert state.drag.origin_status == TaskStatus.OPEN


def test_start_drag_unknown_task_is_ignored():
    state = _state()
    assert board.start_drag(state, "missing") is state


def test_drag_over_moves_task_speculatively():
    state = board.start_drag(_state(), "t1")
    state = board.drag_over(state, "assigned")
    assert state.phase == BoardPhase.HOVERING
    assert _status(state, "t1") == TaskStatus.ASSIGNED
    assert state.drag.hovered_lane == "assigned"
    assert state.drag.origin_status == TaskStatus.OPEN


def test_drag_over_task_card_uses_its_lane():
    state = board.start_drag(_state(), "t1")
    state = board.drag_over(state, "t4")
    assert _status(state, "t1") == TaskStatus.COMPLETED


def test_drag_over_outside_lanes_changes_nothing():
    state = board.start_drag(_state(), "t1")
    assert board.drag_over(state, None) is state


def test_second_drag_start_cancels_first():
    state = board.start_drag(_state(), "t1")
    state = board.drag_over(state, "completed")
    state = board.start_drag(state, "t2")
    assert _status(state, "t1") == TaskStatus.OPEN
    assert state.drag.task_id == "t2"


def test_drop_on_origin_lane_is_noop():
    state = board.start_drag(_state(), "t1")
    state = board.drag_over(state, "assigned")
    state = board.drag_over(state, "open")
    state = board.end_drag(state, "open", MEMBER_ID, FIXED_NOW)
    assert state.pending is None
    assert state.phase == BoardPhase.IDLE
    assert _status(state, "t1") == TaskStatus.OPEN


def test_drop_outside_restores_origin():
    state = board.start_drag(_state(), "t1")
    state = board.drag_over(state, "completed")
    state = board.end_drag(state, None, MEMBER_ID, FIXED_NOW)
    assert state.pending is None
    assert _status(state, "t1") == TaskStatus.OPEN


def test_cross_lane_drop_open_to_in_progress():
    state = board.start_drag(_state(), "t1")
    state = board.drag_over(state, "assigned")
    state = board.end_drag(state, "assigned", MEMBER_ID, FIXED_NOW)

    assert state.phase == BoardPhase.DROPPED
    assert state.pending.new_status == TaskStatus.ASSIGNED
    assert state.pending.fields == {
        "status": "assigned",
        "assigned_to": MEMBER_ID,
        "assigned_by": MEMBER_ID,
        "assigned_at": FIXED_NOW.isoformat(),
    }
    assert _status(state, "t1") == TaskStatus.ASSIGNED


def test_cross_lane_drop_to_completed_keeps_assignee():
    state = board.start_drag(_state(), "t2")
    state = board.end_drag(state, "completed", MEMBER_ID, FIXED_NOW)
    assert state.pending.fields == {"status": "completed"}


def test_drop_back_to_open_clears_assignment():
    fields = assignment_fields_for(TaskStatus.OPEN, MEMBER_ID, FIXED_NOW)
    assert fields == {"status": "open", "assigned_to": None, "assigned_by": None, "assigned_at": None}


def test_cancel_drag_restores_origin():
    state = board.start_drag(_state(), "t2")
    state = board.drag_over(state, "open")
    state = board.cancel_drag(state)
    assert state.phase == BoardPhase.IDLE
    assert state.drag is None
    assert _status(state, "t2") == TaskStatus.ASSIGNED


def test_revert_undoes_optimistic_move():
    state = board.start_drag(_state(), "t1")
    state = board.end_drag(state, "completed", MEMBER_ID, FIXED_NOW)
    state = board.revert(state, state.pending, error="boom")
    assert _status(state, "t1") == TaskStatus.OPEN
    assert state.pending is None
    assert state.error == "boom"

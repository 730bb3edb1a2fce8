"""
The three fixed task lanes. Lanes are never stored; a lane's tasks are the
tasks whose status matches the lane's bound status.
"""

from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from .task import Task, TaskStatus


class Lane(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    status: TaskStatus


LANES: List[Lane] = [
    Lane(id="open", title="OPEN TASKS", status=TaskStatus.OPEN),
    Lane(id="assigned", title="IN PROGRESS", status=TaskStatus.ASSIGNED),
    Lane(id="completed", title="COMPLETED", status=TaskStatus.COMPLETED),
]

LANES_BY_ID: Dict[str, Lane] = {lane.id: lane for lane in LANES}


def lane_for_status(status: TaskStatus) -> Lane:
    return next(lane for lane in LANES if lane.status == status)


def get_lane(lane_id: str) -> Optional[Lane]:
    return LANES_BY_ID.get(lane_id)


def partition(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """Split tasks into lanes, keeping the incoming order inside each lane."""
    lanes: Dict[str, List[Task]] = {lane.id: [] for lane in LANES}
    for task in tasks:
        lanes[lane_for_status(task.status).id].append(task)
    return lanes

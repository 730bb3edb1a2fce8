"""
Assignment field rules shared by drag-and-drop and the task buttons.
"""

from datetime import datetime
from typing import Any, Dict

from .models.task import TaskStatus


def assignment_fields_for(status: TaskStatus, user_id: str, now: datetime) -> Dict[str, Any]:
    """
    Build the partial update for moving a task into ``status``.

    - assigned: the acting user becomes assignee and assigner, stamped ``now``
    - open: assignee, assigner and timestamp are cleared
    - completed: status only, the prior assignee stays
    """
    fields: Dict[str, Any] = {"status": status.value}

    if status == TaskStatus.ASSIGNED:
        fields.update({
            "assigned_to": user_id,
            "assigned_by": user_id,
            "assigned_at": now.isoformat(),
        })
    elif status == TaskStatus.OPEN:
        fields.update({
            "assigned_to": None,
            "assigned_by": None,
            "assigned_at": None,
        })

    return fields
# 📄 File: gardenhub/modules/task_board/application/dto.py
# 🧭 Purpose (Layman Explanation):
# The shape of the "new task" and "edit task" forms, and how their answers are tidied up
# before being saved.
# 🧪 Purpose (Technical Summary):
# Input DTOs for task creation and editing. Normalizes form values (trimmed text,
# empty plot to null, empty due date omitted) and derives status plus assignment columns
# from the chosen assignee.
# 🔗 Dependencies:
# pydantic, task_board.domain.models.task
# 🔄 Connected Modules / Calls From:
# task_board.application.board_service, task API router

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..domain.models.task import TaskPriority, TaskStatus


class TaskDraftDTO(BaseModel):
    """Values entered in the task create or edit form."""

    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    plot_id: Optional[str] = None
    assignee_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date(cls, v):
        return v or None

    def _content_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "title": self.title.strip(),
            "description": (self.description or "").strip() or None,
            "priority": self.priority.value,
            "plot_id": self.plot_id or None,
        }
        if self.due_date:
            fields["due_date"] = self.due_date.isoformat()
        return fields

    def _assignment(self, editor_id: str, now: datetime) -> Dict[str, Any]:
        if self.assignee_id:
            return {
                "assigned_to": self.assignee_id,
                "assigned_by": editor_id,
                "assigned_at": now.isoformat(),
            }
        return {"assigned_to": None, "assigned_by": None, "assigned_at": None}

    def status_for(self, current_status: Optional[TaskStatus] = None) -> TaskStatus:
        if not self.assignee_id:
            return TaskStatus.OPEN
        if current_status == TaskStatus.COMPLETED:
            return TaskStatus.COMPLETED
        return TaskStatus.ASSIGNED

    def to_create_fields(self, creator_id: str, now: datetime) -> Dict[str, Any]:
        return {
            **self._content_fields(),
            **self._assignment(creator_id, now),
            "created_by": creator_id,
            "status": self.status_for().value,
        }

    def to_update_fields(self, editor_id: str, now: datetime) -> Dict[str, Any]:
        """Content and assignment columns; status is decided by the caller."""
        return {**self._content_fields(), **self._assignment(editor_id, now)}

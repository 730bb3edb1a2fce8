# 📄 File: gardenhub/modules/task_board/domain/models/task.py
# 🧭 Purpose (Layman Explanation):
# Describes a volunteer task in the garden: what needs doing, how urgent it is,
# which plot it belongs to and who (if anyone) has taken it on.
# 🧪 Purpose (Technical Summary):
# Pydantic domain model for rows of the ``tasks`` table with embedded profile and plot
# summaries, the status/priority enums, the assignment invariant and the built-in
# catalogue of default garden tasks.
# 🔗 Dependencies:
# pydantic, datetime, enum
# 🔄 Connected Modules / Calls From:
# task_board.domain.board, task_board.infrastructure.supabase_task_repository,
# task_board.application services, task API schemas

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    OPEN = "open"
    ASSIGNED = "assigned"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProfileSummary(BaseModel):
    """Embedded profile (creator, assignee or assigner) on a task row."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    username: Optional[str] = None


class PlotRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    number: str


class Task(BaseModel):
    """
    Volunteer task as stored by the gateway.

    Invariant (for committed rows):
    - ``assigned`` requires ``assigned_to``
    - ``open`` requires ``assigned_to`` to be empty
    - ``completed`` may keep the assignee it had before completion
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=False)

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.OPEN
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    plot_id: Optional[str] = None
    created_by: Optional[str] = None
    assigned_to: Optional[str] = None
    assigned_by: Optional[str] = None
    assigned_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    plot: Optional[PlotRef] = None
    creator: Optional[ProfileSummary] = None
    assignee: Optional[ProfileSummary] = None
    assigner: Optional[ProfileSummary] = None

    def satisfies_assignment_invariant(self) -> bool:
        if self.status == TaskStatus.ASSIGNED:
            return self.assigned_to is not None
        if self.status == TaskStatus.OPEN:
            return self.assigned_to is None
        return True

    def is_assigned_to(self, user_id: str) -> bool:
        return self.assigned_to is not None and self.assigned_to == user_id

    def with_status(self, status: TaskStatus) -> "Task":
        return self.model_copy(update={"status": status})


class DefaultTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    priority: TaskPriority


DEFAULT_GARDEN_TASKS: List[DefaultTask] = [
    DefaultTask(
        title="Site Cleanup",
        description="Remove debris, trash, and unwanted materials from the garden area.",
        priority=TaskPriority.MEDIUM,
    ),
    DefaultTask(
        title="Weed Control",
        description="Clear existing weeds and overgrown vegetation from garden plots and common areas.",
        priority=TaskPriority.HIGH,
    ),
    DefaultTask(
        title="Soil Testing",
        description="Check soil quality including pH levels and nutrient content across garden plots.",
        priority=TaskPriority.MEDIUM,
    ),
    DefaultTask(
        title="Soil Amendment",
        description="Add compost, fertilizer, or other amendments based on soil test results.",
        priority=TaskPriority.MEDIUM,
    ),
    DefaultTask(
        title="Irrigation Inspection",
        description="Check for leaks or blockages in the irrigation system and perform necessary repairs.",
        priority=TaskPriority.HIGH,
    ),
    DefaultTask(
        title="Tool Inventory",
        description="Conduct an inventory check of all garden tools and equipment.",
        priority=TaskPriority.LOW,
    ),
    DefaultTask(
        title="Tool Maintenance",
        description="Organize, clean, repair, or replace damaged garden tools.",
        priority=TaskPriority.LOW,
    ),
    DefaultTask(
        title="Infrastructure Inspection",
        description="Inspect and repair walkways, borders, and pathways throughout the garden.",
        priority=TaskPriority.MEDIUM,
    ),
    DefaultTask(
        title="Pest & Disease Monitoring",
        description="Regularly monitor garden plots and plants for signs of pests and diseases.",
        priority=TaskPriority.HIGH,
    ),
    DefaultTask(
        title="Harvest Readiness",
        description="Identify and mark produce that is ripe and ready for harvest.",
        priority=TaskPriority.MEDIUM,
    ),
]


# Columns fetched for every board snapshot
TASK_SELECT = (
    "*, "
    "creator:created_by(id, email, username), "
    "assignee:assigned_to(id, email, username), "
    "assigner:assigned_by(id, email, username), "
    "plot:plot_id(id, number)"
)

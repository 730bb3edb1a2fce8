# 📄 File: gardenhub/modules/task_board/domain/repositories/task_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists what the task board needs from the database: read all tasks, change one,
# add one, remove one.
# 🧪 Purpose (Technical Summary):
# Repository interface for the tasks table. Implementations must return full
# snapshots with embedded profiles and plot, newest first.
# 🔗 Dependencies:
# abc, typing, task_board.domain.models.task
# 🔄 Connected Modules / Calls From:
# task_board.application (reconciler, board service), SupabaseTaskRepository, test fakes

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models.task import Task


class TaskRepository(ABC):
    """
    Repository interface for Task data access.

    Implementation Notes:
    - Methods raise GardenHubException subclasses classified at the gateway seam
    - ``list_tasks`` is the only read the board relies on for reconciliation
    """

    @abstractmethod
    async def list_tasks(self) -> List[Task]:
        """
        Full authoritative snapshot ordered by ``created_at`` descending.
        """
        pass

    @abstractmethod
    async def get_task(self, task_id: str) -> Optional[Task]:
        pass

    @abstractmethod
    async def update_task(
        self,
        task_id: str,
        fields: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Apply a partial update to one task.

        Args:
            task_id: Task to update
            fields: Columns to set
            match: Extra equality filters the row must satisfy
        """
        pass

    @abstractmethod
    async def create_task(self, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_task(self, task_id: str) -> None:
        pass

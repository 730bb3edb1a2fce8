# 📄 File: gardenhub/modules/task_board/infrastructure/supabase_task_repository.py
# 🧭 Purpose (Layman Explanation):
# Reads and writes volunteer tasks in the hosted garden database.
# 🧪 Purpose (Technical Summary):
# TaskRepository implementation over the SupabaseGateway. Embeds creator, assignee,
# assigner and plot in every snapshot and maps rows to Task domain models.
# 🔗 Dependencies:
# gardenhub.shared.infrastructure.database.gateway, task_board.domain
# 🔄 Connected Modules / Calls From:
# Registered through FastAPI dependency_overrides in gardenhub.main

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends

from gardenhub.shared.core.dependencies import get_gateway
from gardenhub.shared.infrastructure.database.gateway import SupabaseGateway

from ..domain.models.task import TASK_SELECT, Task
from ..domain.repositories.task_repository import TaskRepository

logger = logging.getLogger(__name__)

TABLE = "tasks"


class SupabaseTaskRepository(TaskRepository):
    """
    Supabase implementation of the TaskRepository interface.
    """

    def __init__(self, gateway: SupabaseGateway = Depends(get_gateway)):
        self._gateway = gateway

    async def list_tasks(self) -> List[Task]:
        query = (
            self._gateway.table(TABLE)
            .select(TASK_SELECT)
            .order("created_at", desc=True)
        )
        rows = await self._gateway.execute(query, "list_tasks", TABLE)
        logger.debug(f"Fetched {len(rows)} tasks")
        return [Task.model_validate(row) for row in rows]

    async def get_task(self, task_id: str) -> Optional[Task]:
        query = self._gateway.table(TABLE).select(TASK_SELECT).eq("id", task_id).limit(1)
        rows = await self._gateway.execute(query, "get_task", TABLE)
        return Task.model_validate(rows[0]) if rows else None

    async def update_task(
        self,
        task_id: str,
        fields: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None
    ) -> None:
        await self._gateway.update(TABLE, fields, {"id": task_id, **(match or {})})
        logger.debug(f"Updated task {task_id}: {sorted(fields)}")

    async def create_task(self, fields: Dict[str, Any]) -> None:
        await self._gateway.insert(TABLE, [fields])

    async def delete_task(self, task_id: str) -> None:
        await self._gateway.delete(TABLE, {"id": task_id})

"""
Supabase implementation of the ProfileRepository interface.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends

from gardenhub.modules.events.domain.models import Event
from gardenhub.modules.plots.domain.models import Plot
from gardenhub.modules.task_board.domain.models import Task
from gardenhub.shared.core.dependencies import PROFILE_COLUMNS, get_gateway
from gardenhub.shared.infrastructure.database.gateway import SupabaseGateway

from ..domain.models import Profile
from ..domain.repository import ProfileRepository

TABLE = "profiles"
PROFILE_SELECT = f"{PROFILE_COLUMNS}, created_at, updated_at"


class SupabaseProfileRepository(ProfileRepository):

    def __init__(self, gateway: SupabaseGateway = Depends(get_gateway)):
        self._gateway = gateway

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        row = await self._gateway.select_one(TABLE, PROFILE_SELECT, id=user_id)
        return Profile.model_validate(row) if row else None

    async def get_by_username(self, username: str) -> Optional[Profile]:
        row = await self._gateway.select_one(TABLE, PROFILE_SELECT, username=username)
        return Profile.model_validate(row) if row else None

    async def search_by_username(self, term: str, limit: int) -> List[Profile]:
        query = (
            self._gateway.table(TABLE)
            .select(PROFILE_SELECT)
            .ilike("username", f"%{term}%")
            .limit(limit)
        )
        rows = await self._gateway.execute(query, "search_profiles", TABLE)
        return [Profile.model_validate(row) for row in rows]

    async def username_taken(self, username: str, exclude_user_id: str) -> bool:
        query = (
            self._gateway.table(TABLE)
            .select("id")
            .eq("username", username)
            .neq("id", exclude_user_id)
            .limit(1)
        )
        rows = await self._gateway.execute(query, "check_username", TABLE)
        return bool(rows)

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        await self._gateway.update(TABLE, fields, {"id": user_id})

    async def list_assigned_plots(self, user_id: str) -> List[Plot]:
        rows = await self._gateway.select("plots", "*", eq={"assigned_to": user_id}, order="number")
        return [Plot.model_validate(row) for row in rows]

    async def list_recent_tasks(self, user_id: str, limit: int) -> List[Task]:
        rows = await self._gateway.select(
            "tasks", "*", eq={"assigned_to": user_id}, order="created_at", desc=True, limit=limit
        )
        return [Task.model_validate(row) for row in rows]

    async def list_upcoming_events(self, since: datetime, limit: int) -> List[Event]:
        query = (
            self._gateway.table("events")
            .select("*")
            .gte("start_date", since.isoformat())
            .order("start_date")
            .limit(limit)
        )
        rows = await self._gateway.execute(query, "list_upcoming_events", "events")
        return [Event.model_validate(row) for row in rows]

"""
Supabase implementation of the EventRepository interface.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends

from gardenhub.shared.core.dependencies import get_gateway
from gardenhub.shared.infrastructure.database.gateway import SupabaseGateway

from ..domain.models import EVENT_SELECT, Event
from ..domain.repository import EventRepository

TABLE = "events"


class SupabaseEventRepository(EventRepository):

    def __init__(self, gateway: SupabaseGateway = Depends(get_gateway)):
        self._gateway = gateway

    async def list_events(self) -> List[Event]:
        query = self._gateway.table(TABLE).select(EVENT_SELECT).order("start_date")
        rows = await self._gateway.execute(query, "list_events", TABLE)
        return [Event.model_validate(row) for row in rows]

    async def list_upcoming(self, since: datetime, limit: Optional[int] = None) -> List[Event]:
        query = (
            self._gateway.table(TABLE)
            .select(EVENT_SELECT)
            .gte("start_date", since.isoformat())
            .order("start_date")
        )
        if limit is not None:
            query = query.limit(limit)
        rows = await self._gateway.execute(query, "list_upcoming_events", TABLE)
        return [Event.model_validate(row) for row in rows]

    async def create_event(self, fields: Dict[str, Any]) -> None:
        await self._gateway.insert(TABLE, [fields])

    async def update_event(self, event_id: str, fields: Dict[str, Any]) -> None:
        await self._gateway.update(TABLE, fields, {"id": event_id})

    async def delete_event(self, event_id: str) -> None:
        await self._gateway.delete(TABLE, {"id": event_id})

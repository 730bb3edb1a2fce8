"""
Event use cases. Members read the calendar; admins and moderators manage it.
"""

from datetime import datetime, timezone
from typing import List

from fastapi import Depends

from gardenhub.shared.core.dependencies import CurrentUser
from gardenhub.shared.core.exceptions import AuthorizationError
from gardenhub.shared.utils.logging import get_logger

from ..domain.models import Event, EventDTO
from ..domain.repository import EventRepository

logger = get_logger(__name__)


class EventService:

    def __init__(self, repository: EventRepository = Depends()):
        self.repository = repository

    def _require_privileged(self, user: CurrentUser) -> None:
        if not user.is_privileged():
            raise AuthorizationError(
                "Only admins and moderators can manage events",
                resource_type="event",
                required_permission="privileged",
                user_id=user.user_id,
            )

    async def list_events(self) -> List[Event]:
        return await self.repository.list_events()

    async def upcoming_events(self, limit: int = 5) -> List[Event]:
        return await self.repository.list_upcoming(datetime.now(timezone.utc), limit=limit)

    async def create_event(self, user: CurrentUser, data: EventDTO) -> List[Event]:
        self._require_privileged(user)
        await self.repository.create_event({**data.to_fields(), "created_by": user.user_id})
        logger.log_business_event("event_created", f"Event '{data.title}' created", entity_type="event")
        return await self.repository.list_events()

    async def update_event(self, user: CurrentUser, event_id: str, data: EventDTO) -> List[Event]:
        self._require_privileged(user)
        await self.repository.update_event(event_id, data.to_fields())
        return await self.repository.list_events()

    async def delete_event(self, user: CurrentUser, event_id: str) -> List[Event]:
        self._require_privileged(user)
        await self.repository.delete_event(event_id)
        logger.log_user_action("delete_event", user.user_id, resource=f"event:{event_id}")
        return await self.repository.list_events()

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from .models import Event


class EventRepository(ABC):

    @abstractmethod
    async def list_events(self) -> List[Event]:
        """All events ordered by start date ascending."""
        pass

    @abstractmethod
    async def list_upcoming(self, since: datetime, limit: Optional[int] = None) -> List[Event]:
        pass

    @abstractmethod
    async def create_event(self, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def update_event(self, event_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_event(self, event_id: str) -> None:
        pass

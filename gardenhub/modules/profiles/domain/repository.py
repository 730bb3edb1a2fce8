from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from gardenhub.modules.events.domain.models import Event
from gardenhub.modules.plots.domain.models import Plot
from gardenhub.modules.task_board.domain.models import Task

from .models import Profile


class ProfileRepository(ABC):
    """Profile reads/writes plus the per-user slices shown on a dashboard."""

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[Profile]:
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[Profile]:
        pass

    @abstractmethod
    async def search_by_username(self, term: str, limit: int) -> List[Profile]:
        pass

    @abstractmethod
    async def username_taken(self, username: str, exclude_user_id: str) -> bool:
        pass

    @abstractmethod
    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def list_assigned_plots(self, user_id: str) -> List[Plot]:
        pass

    @abstractmethod
    async def list_recent_tasks(self, user_id: str, limit: int) -> List[Task]:
        pass

    @abstractmethod
    async def list_upcoming_events(self, since: datetime, limit: int) -> List[Event]:
        pass

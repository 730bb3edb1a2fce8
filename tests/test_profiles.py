"""
Tests for profile dashboards, achievements and username changes.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest

from gardenhub.modules.events.domain.models import Event
from gardenhub.modules.plots.domain.models import Plot
from gardenhub.modules.profiles.application.profile_service import ProfileService
from gardenhub.modules.profiles.domain.models import (
    ACHIEVEMENT_CATALOGUE,
    Profile,
    ProfileStats,
    ProfileUpdateDTO,
    compute_achievements,
)
from gardenhub.modules.profiles.domain.repository import ProfileRepository
from gardenhub.modules.task_board.domain.models import Task, TaskStatus
from gardenhub.shared.core.exceptions import ConflictError, NotFoundError

from conftest import FIXED_NOW, MEMBER_ID, make_task


class FakeProfileRepository(ProfileRepository):

    def __init__(self):
        self.profiles = {
            MEMBER_ID: Profile(id=MEMBER_ID, email="fern@garden.org", username="fern"),
            "u2": Profile(id="u2", username="basil"),
        }
        self.tasks: List[Task] = []
        self.updated: Optional[Dict[str, Any]] = None

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.profiles.get(user_id)

    async def get_by_username(self, username: str) -> Optional[Profile]:
        return next((p for p in self.profiles.values() if p.username == username), None)

    async def search_by_username(self, term: str, limit: int) -> List[Profile]:
        return [p for p in self.profiles.values() if term.lower() in (p.username or "").lower()][:limit]

    async def username_taken(self, username: str, exclude_user_id: str) -> bool:
        return any(p.username == username and p.id != exclude_user_id for p in self.profiles.values())

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        self.updated = fields
        self.profiles[user_id] = self.profiles[user_id].model_copy(update=fields)

    async def list_assigned_plots(self, user_id: str) -> List[Plot]:
        return [Plot(id="p1", number="A1", assigned_to=user_id)]

    async def list_recent_tasks(self, user_id: str, limit: int) -> List[Task]:
        return self.tasks[:limit]

    async def list_upcoming_events(self, since: datetime, limit: int) -> List[Event]:
        return [Event(id="e1", title="Spring workday", start_date=FIXED_NOW)]


def test_green_thumb_after_five_completed_tasks():
    achievements = compute_achievements(ProfileStats(completed_tasks=5))
    assert len(achievements) == len(ACHIEVEMENT_CATALOGUE)
    assert achievements[0].title == "Green Thumb"
    assert achievements[0].achieved
    assert not any(a.achieved for a in achievements[1:])
    assert not compute_achievements(ProfileStats(completed_tasks=4))[0].achieved


async def test_dashboard_stats(member):
    repository = FakeProfileRepository()
    repository.tasks = [
        make_task("a", TaskStatus.COMPLETED, assigned_to=MEMBER_ID),
        make_task("b", TaskStatus.ASSIGNED, assigned_to=MEMBER_ID),
    ]
    dashboard = await ProfileService(repository).get_dashboard(member)

    assert dashboard.profile.username == "fern"
    assert dashboard.stats.total_plots == 1
    assert dashboard.stats.completed_tasks == 1
    assert dashboard.stats.upcoming_events == 1


async def test_username_must_be_unique(member):
    with pytest.raises(ConflictError):
        await ProfileService(FakeProfileRepository()).update_profile(member, ProfileUpdateDTO(username="basil"))


async def test_update_profile_trims_username(member):
    repository = FakeProfileRepository()
    profile = await ProfileService(repository).update_profile(member, ProfileUpdateDTO(username="  fern2 "))
    assert profile.username == "fern2"
    assert repository.updated == {"username": "fern2"}


async def test_public_profile_unknown_username():
    with pytest.raises(NotFoundError):
        await ProfileService(FakeProfileRepository()).get_public_profile("nobody")


async def test_search_ignores_blank_term():
    service = ProfileService(FakeProfileRepository())
    assert await service.search("   ") == []
    assert [p.username for p in await service.search("BAS")] == ["basil"]

# 📄 File: gardenhub/modules/profiles/application/profile_service.py
# 🧭 Purpose (Layman Explanation):
# Builds each gardener's personal page: their plots, recent tasks, upcoming events and
# badges. Also lets people change their username and find other members by name.
# 🧪 Purpose (Technical Summary):
# Profile use cases over ProfileRepository: dashboard aggregation, public profile by
# username, username search and profile edits guarded by a uniqueness check.
# 🔗 Dependencies:
# profiles.domain, gardenhub.shared.core, gardenhub.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# profiles.presentation.api.v1.profiles

from datetime import datetime, timezone
from typing import List

from fastapi import Depends

from gardenhub.shared.core.dependencies import CurrentUser
from gardenhub.shared.core.exceptions import ConflictError, NotFoundError
from gardenhub.shared.utils.logging import get_logger

from ..domain.models import (
    RECENT_TASK_LIMIT,
    SEARCH_LIMIT,
    UPCOMING_EVENT_LIMIT,
    Profile,
    ProfileDashboard,
    ProfileUpdateDTO,
    PublicProfile,
    compute_achievements,
    compute_stats,
)
from ..domain.repository import ProfileRepository

logger = get_logger(__name__)


class ProfileService:

    def __init__(self, repository: ProfileRepository = Depends()):
        self.repository = repository

    async def get_profile(self, user_id: str) -> Profile:
        profile = await self.repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile not found", resource_type="profile", resource_id=user_id)
        return profile

    async def get_dashboard(self, user: CurrentUser) -> ProfileDashboard:
        profile = await self.get_profile(user.user_id)
        plots = await self.repository.list_assigned_plots(user.user_id)
        tasks = await self.repository.list_recent_tasks(user.user_id, RECENT_TASK_LIMIT)
        events = await self.repository.list_upcoming_events(datetime.now(timezone.utc), UPCOMING_EVENT_LIMIT)

        stats = compute_stats(plots, tasks, events)
        return ProfileDashboard(
            profile=profile,
            stats=stats,
            plots=plots,
            recent_tasks=tasks,
            upcoming_events=events,
            achievements=compute_achievements(stats),
        )

    async def get_public_profile(self, username: str) -> PublicProfile:
        profile = await self.repository.get_by_username(username)
        if profile is None:
            raise NotFoundError("Profile not found", resource_type="profile", resource_id=username)
        plots = await self.repository.list_assigned_plots(profile.id)
        tasks = await self.repository.list_recent_tasks(profile.id, RECENT_TASK_LIMIT)
        stats = compute_stats(plots, tasks, [])
        return PublicProfile(profile=profile, plots=plots, achievements=compute_achievements(stats))

    async def search(self, term: str) -> List[Profile]:
        term = (term or "").strip()
        if not term:
            return []
        return await self.repository.search_by_username(term, SEARCH_LIMIT)

    async def update_profile(self, user: CurrentUser, data: ProfileUpdateDTO) -> Profile:
        if await self.repository.username_taken(data.username, user.user_id):
            raise ConflictError("This username is already taken", field="username")

        fields = {"username": data.username}
        if data.email:
            fields["email"] = data.email
        await self.repository.update_profile(user.user_id, fields)
        logger.log_user_action("update_profile", user.user_id, resource=f"profile:{user.user_id}")
        return await self.get_profile(user.user_id)

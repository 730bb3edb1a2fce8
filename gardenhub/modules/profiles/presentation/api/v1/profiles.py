"""
Profile endpoints: own dashboard, edits, member search and public profiles.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from gardenhub.shared.core.dependencies import CurrentUser, get_current_user

from ....application.profile_service import ProfileService
from ....domain.models import Profile, ProfileDashboard, ProfileUpdateDTO, PublicProfile

profiles_router = APIRouter()


@profiles_router.get("/me", response_model=ProfileDashboard, summary="My profile dashboard")
async def get_my_dashboard(
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(),
) -> ProfileDashboard:
    return await service.get_dashboard(current_user)


@profiles_router.put("/me", response_model=Profile, summary="Update my username or email")
async def update_my_profile(
    data: ProfileUpdateDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(),
) -> Profile:
    return await service.update_profile(current_user, data)


@profiles_router.get("/search", response_model=List[Profile], summary="Find members by username")
async def search_profiles(
    q: str = Query("", description="Part of a username"),
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(),
) -> List[Profile]:
    return await service.search(q)


@profiles_router.get("/{username}", response_model=PublicProfile, summary="Public profile")
async def get_public_profile(
    username: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(),
) -> PublicProfile:
    return await service.get_public_profile(username)

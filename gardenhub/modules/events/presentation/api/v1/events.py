"""
Garden event endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from gardenhub.shared.core.dependencies import CurrentUser, get_current_user

from ....application.event_service import EventService
from ....domain.models import Event, EventDTO

events_router = APIRouter()


@events_router.get("/", response_model=List[Event], summary="List events by start date")
async def list_events(
    current_user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(),
) -> List[Event]:
    return await service.list_events()


@events_router.get("/upcoming", response_model=List[Event], summary="Next upcoming events")
async def upcoming_events(
    limit: int = Query(5, ge=1, le=50),
    current_user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(),
) -> List[Event]:
    return await service.upcoming_events(limit)


@events_router.post(
    "/", response_model=List[Event], status_code=status.HTTP_201_CREATED, summary="Create an event"
)
async def create_event(
    data: EventDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(),
) -> List[Event]:
    return await service.create_event(current_user, data)


@events_router.put("/{event_id}", response_model=List[Event], summary="Update an event")
async def update_event(
    event_id: str,
    data: EventDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(),
) -> List[Event]:
    return await service.update_event(current_user, event_id, data)


@events_router.delete("/{event_id}", response_model=List[Event], summary="Delete an event")
async def delete_event(
    event_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(),
) -> List[Event]:
    return await service.delete_event(current_user, event_id)

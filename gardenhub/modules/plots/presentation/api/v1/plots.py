"""
Garden plot endpoints. Reads are open to every member; changes need admin or mod.
Every change responds with the refetched plot list.
"""

from typing import List

from fastapi import APIRouter, Depends

from gardenhub.shared.core.dependencies import CurrentUser, get_current_user

from ....application.plot_service import PlotService
from ....domain.models import AssignmentDTO, PlantDTO, Plot, PlotUpdateDTO

plots_router = APIRouter()


@plots_router.get("/", response_model=List[Plot], summary="List plots by number")
async def list_plots(
    current_user: CurrentUser = Depends(get_current_user),
    service: PlotService = Depends(),
) -> List[Plot]:
    return await service.list_plots()


@plots_router.patch("/{plot_id}", response_model=List[Plot], summary="Update plot details")
async def update_plot(
    plot_id: str,
    data: PlotUpdateDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: PlotService = Depends(),
) -> List[Plot]:
    return await service.update_plot(current_user, plot_id, data)


@plots_router.post("/{plot_id}/plants", response_model=List[Plot], summary="Add a plant")
async def add_plant(
    plot_id: str,
    data: PlantDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: PlotService = Depends(),
) -> List[Plot]:
    return await service.add_plant(current_user, plot_id, data)


@plots_router.put("/plants/{plant_id}", response_model=List[Plot], summary="Update a plant")
async def update_plant(
    plant_id: str,
    data: PlantDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: PlotService = Depends(),
) -> List[Plot]:
    return await service.update_plant(current_user, plant_id, data)


@plots_router.delete("/plants/{plant_id}", response_model=List[Plot], summary="Remove a plant")
async def delete_plant(
    plant_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PlotService = Depends(),
) -> List[Plot]:
    return await service.delete_plant(current_user, plant_id)


@plots_router.post("/{plot_id}/assignments", response_model=List[Plot], summary="Assign a member")
async def assign_user(
    plot_id: str,
    data: AssignmentDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: PlotService = Depends(),
) -> List[Plot]:
    return await service.assign_user(current_user, plot_id, data)


@plots_router.delete("/assignments/{assignment_id}", response_model=List[Plot], summary="Remove an assignment")
async def remove_assignment(
    assignment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PlotService = Depends(),
) -> List[Plot]:
    return await service.remove_assignment(current_user, assignment_id)

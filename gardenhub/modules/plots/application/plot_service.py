# 📄 File: gardenhub/modules/plots/application/plot_service.py
# 🧭 Purpose (Layman Explanation):
# Lets admins and moderators keep the plot map up to date: plot details, what is growing
# and who tends each plot. Everyone can look.
# 🧪 Purpose (Technical Summary):
# Plot use cases. Mutations require a privileged member and always return a freshly
# fetched plot list so callers never render stale data.
# 🔗 Dependencies:
# FastAPI Depends, plots.domain, gardenhub.shared.core
# 🔄 Connected Modules / Calls From:
# plots.presentation.api.v1.plots

from typing import List

from fastapi import Depends

from gardenhub.shared.core.dependencies import CurrentUser
from gardenhub.shared.core.exceptions import AuthorizationError, ValidationError
from gardenhub.shared.utils.logging import get_logger

from ..domain.models import AssignmentDTO, PlantDTO, Plot, PlotUpdateDTO
from ..domain.repository import PlotRepository

logger = get_logger(__name__)


class PlotService:

    def __init__(self, repository: PlotRepository = Depends()):
        self.repository = repository

    def _require_privileged(self, user: CurrentUser) -> None:
        if not user.is_privileged():
            raise AuthorizationError(
                "Only admins and moderators can manage plots",
                resource_type="plot",
                required_permission="privileged",
                user_id=user.user_id,
            )

    async def list_plots(self) -> List[Plot]:
        return await self.repository.list_plots()

    async def update_plot(self, user: CurrentUser, plot_id: str, data: PlotUpdateDTO) -> List[Plot]:
        self._require_privileged(user)
        fields = data.to_fields()
        if not fields:
            raise ValidationError("No plot fields to update")
        await self.repository.update_plot(plot_id, fields)
        logger.log_user_action("update_plot", user.user_id, resource=f"plot:{plot_id}")
        return await self.repository.list_plots()

    async def add_plant(self, user: CurrentUser, plot_id: str, data: PlantDTO) -> List[Plot]:
        self._require_privileged(user)
        await self.repository.add_plant(plot_id, data.to_fields())
        logger.log_user_action("add_plant", user.user_id, resource=f"plot:{plot_id}")
        return await self.repository.list_plots()

    async def update_plant(self, user: CurrentUser, plant_id: str, data: PlantDTO) -> List[Plot]:
        self._require_privileged(user)
        await self.repository.update_plant(plant_id, data.to_fields())
        return await self.repository.list_plots()

    async def delete_plant(self, user: CurrentUser, plant_id: str) -> List[Plot]:
        self._require_privileged(user)
        await self.repository.delete_plant(plant_id)
        logger.log_user_action("delete_plant", user.user_id, resource=f"plant:{plant_id}")
        return await self.repository.list_plots()

    async def assign_user(self, user: CurrentUser, plot_id: str, data: AssignmentDTO) -> List[Plot]:
        self._require_privileged(user)
        await self.repository.add_assignment(plot_id, data.user_id, data.role.value)
        logger.log_user_action(
            "assign_plot", user.user_id, resource=f"plot:{plot_id}",
            extra={"assignee": data.user_id, "role": data.role.value},
        )
        return await self.repository.list_plots()

    async def remove_assignment(self, user: CurrentUser, assignment_id: str) -> List[Plot]:
        self._require_privileged(user)
        await self.repository.delete_assignment(assignment_id)
        return await self.repository.list_plots()

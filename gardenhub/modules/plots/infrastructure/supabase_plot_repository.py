"""
Supabase implementation of the PlotRepository interface.
"""

import logging
from typing import Any, Dict, List

from fastapi import Depends

from gardenhub.shared.core.dependencies import get_gateway
from gardenhub.shared.infrastructure.database.gateway import SupabaseGateway

from ..domain.models import PLOT_SELECT, Plot
from ..domain.repository import PlotRepository

logger = logging.getLogger(__name__)


class SupabasePlotRepository(PlotRepository):

    def __init__(self, gateway: SupabaseGateway = Depends(get_gateway)):
        self._gateway = gateway

    async def list_plots(self) -> List[Plot]:
        query = self._gateway.table("plots").select(PLOT_SELECT).order("number")
        rows = await self._gateway.execute(query, "list_plots", "plots")
        return [Plot.model_validate(row) for row in rows]

    async def update_plot(self, plot_id: str, fields: Dict[str, Any]) -> None:
        await self._gateway.update("plots", fields, {"id": plot_id})

    async def add_plant(self, plot_id: str, fields: Dict[str, Any]) -> None:
        await self._gateway.insert("plot_plants", [{**fields, "plot_id": plot_id}])

    async def update_plant(self, plant_id: str, fields: Dict[str, Any]) -> None:
        await self._gateway.update("plot_plants", fields, {"id": plant_id})

    async def delete_plant(self, plant_id: str) -> None:
        await self._gateway.delete("plot_plants", {"id": plant_id})

    async def add_assignment(self, plot_id: str, user_id: str, role: str) -> None:
        await self._gateway.insert(
            "plot_assignments", [{"plot_id": plot_id, "user_id": user_id, "role": role}]
        )
        logger.debug(f"Assigned user {user_id} to plot {plot_id} as {role}")

    async def delete_assignment(self, assignment_id: str) -> None:
        await self._gateway.delete("plot_assignments", {"id": assignment_id})

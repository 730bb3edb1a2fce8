from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .models import Plot


class PlotRepository(ABC):
    """
    Repository interface for plots and their plants and assignments.
    """

    @abstractmethod
    async def list_plots(self) -> List[Plot]:
        """All plots ordered by number, with plants, tasks and assignments embedded."""
        pass

    @abstractmethod
    async def update_plot(self, plot_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def add_plant(self, plot_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def update_plant(self, plant_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_plant(self, plant_id: str) -> None:
        pass

    @abstractmethod
    async def add_assignment(self, plot_id: str, user_id: str, role: str) -> None:
        pass

    @abstractmethod
    async def delete_assignment(self, assignment_id: str) -> None:
        pass

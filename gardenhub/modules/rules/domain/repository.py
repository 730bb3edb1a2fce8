from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .models import Rule


class RuleRepository(ABC):

    @abstractmethod
    async def list_rules(self) -> List[Rule]:
        """All rules ordered by ``order`` ascending."""
        pass

    @abstractmethod
    async def create_rule(self, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def update_rule(self, rule_id: str, fields: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_rule(self, rule_id: str) -> None:
        pass

    @abstractmethod
    async def save_order(self, rules: List[Rule]) -> None:
        """Persist the ``order`` column of every given rule in one upsert."""
        pass

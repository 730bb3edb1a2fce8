"""
Supabase implementation of the RuleRepository interface.
"""

from typing import Any, Dict, List

from fastapi import Depends

from gardenhub.shared.core.dependencies import get_gateway
from gardenhub.shared.infrastructure.database.gateway import SupabaseGateway

from ..domain.models import Rule
from ..domain.repository import RuleRepository

TABLE = "rules"


class SupabaseRuleRepository(RuleRepository):

    def __init__(self, gateway: SupabaseGateway = Depends(get_gateway)):
        self._gateway = gateway

    async def list_rules(self) -> List[Rule]:
        rows = await self._gateway.select(TABLE, order="order")
        return [Rule.model_validate(row) for row in rows]

    async def create_rule(self, fields: Dict[str, Any]) -> None:
        await self._gateway.insert(TABLE, [fields])

    async def update_rule(self, rule_id: str, fields: Dict[str, Any]) -> None:
        await self._gateway.update(TABLE, fields, {"id": rule_id})

    async def delete_rule(self, rule_id: str) -> None:
        await self._gateway.delete(TABLE, {"id": rule_id})

    async def save_order(self, rules: List[Rule]) -> None:
        # Whole rows: an upsert is an INSERT first, so NOT NULL columns must be present.
        rows = [
            rule.model_dump(mode="json", include={"id", "title", "description", "category", "order", "created_by"})
            for rule in rules
        ]
        await self._gateway.upsert(TABLE, rows)

"""
Garden rule use cases, including drag-to-reorder.
"""

from typing import Dict, List, Optional

from fastapi import Depends
from pydantic import BaseModel

from gardenhub.shared.core.dependencies import CurrentUser
from gardenhub.shared.core.error_classification import handle_error
from gardenhub.shared.core.exceptions import AuthorizationError, NotFoundError
from gardenhub.shared.utils.logging import get_logger

from ..domain.models import ReorderDTO, Rule, RuleDTO, array_move
from ..domain.repository import RuleRepository

logger = get_logger(__name__)

REORDER_FAILED_MESSAGE = "Failed to update rule order. Please try again."


class ReorderResult(BaseModel):
    rules: List[Rule]
    error: Optional[str] = None


class RuleService:

    def __init__(self, repository: RuleRepository = Depends()):
        self.repository = repository

    def _require_privileged(self, user: CurrentUser) -> None:
        if not user.is_privileged():
            raise AuthorizationError(
                "Only admins and moderators can manage rules",
                resource_type="rule",
                required_permission="privileged",
                user_id=user.user_id,
            )

    async def list_rules(self) -> List[Rule]:
        return await self.repository.list_rules()

    async def create_rule(self, user: CurrentUser, data: RuleDTO) -> List[Rule]:
        """New rules go to the end of the list."""
        self._require_privileged(user)
        rules = await self.repository.list_rules()
        await self.repository.create_rule({
            **data.to_fields(),
            "order": len(rules),
            "created_by": user.user_id,
        })
        return await self.repository.list_rules()

    async def update_rule(self, user: CurrentUser, rule_id: str, data: RuleDTO) -> List[Rule]:
        self._require_privileged(user)
        await self.repository.update_rule(rule_id, data.to_fields())
        return await self.repository.list_rules()

    async def delete_rule(self, user: CurrentUser, rule_id: str) -> List[Rule]:
        self._require_privileged(user)
        await self.repository.delete_rule(rule_id)
        logger.log_user_action("delete_rule", user.user_id, resource=f"rule:{rule_id}")
        return await self.repository.list_rules()

    async def reorder(self, user: CurrentUser, data: ReorderDTO) -> ReorderResult:
        """
        Move ``active_id`` to the position of ``over_id`` and persist every order.

        On failure the persisted order is refetched and returned with a banner.
        """
        self._require_privileged(user)
        rules = await self.repository.list_rules()
        if data.active_id == data.over_id:
            return ReorderResult(rules=rules)

        positions: Dict[str, int] = {rule.id: i for i, rule in enumerate(rules)}
        for rule_id in (data.active_id, data.over_id):
            if rule_id not in positions:
                raise NotFoundError("Rule not found", resource_type="rule", resource_id=rule_id)

        moved = array_move(rules, positions[data.active_id], positions[data.over_id])
        reordered = [rule.model_copy(update={"order": i}) for i, rule in enumerate(moved)]

        try:
            await self.repository.save_order(reordered)
        except Exception as e:
            app_error = handle_error(e, operation="reorder_rules", table="rules")
            logger.error(f"Error updating rule order: {app_error.message}")
            return ReorderResult(rules=await self.repository.list_rules(), error=REORDER_FAILED_MESSAGE)

        return ReorderResult(rules=reordered)

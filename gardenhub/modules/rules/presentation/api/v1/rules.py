"""
Garden rule endpoints.
"""

from typing import Dict, List

from fastapi import APIRouter, Depends, status

from gardenhub.shared.core.dependencies import CurrentUser, get_current_user

from ....application.rule_service import ReorderResult, RuleService
from ....domain.models import ReorderDTO, Rule, RuleDTO, group_by_category

rules_router = APIRouter()


@rules_router.get("/", response_model=List[Rule], summary="List rules in display order")
async def list_rules(
    current_user: CurrentUser = Depends(get_current_user),
    service: RuleService = Depends(),
) -> List[Rule]:
    return await service.list_rules()


@rules_router.get("/by-category", response_model=Dict[str, List[Rule]], summary="Rules grouped by category")
async def rules_by_category(
    current_user: CurrentUser = Depends(get_current_user),
    service: RuleService = Depends(),
) -> Dict[str, List[Rule]]:
    return group_by_category(await service.list_rules())


@rules_router.post("/", response_model=List[Rule], status_code=status.HTTP_201_CREATED, summary="Add a rule")
async def create_rule(
    data: RuleDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: RuleService = Depends(),
) -> List[Rule]:
    return await service.create_rule(current_user, data)


@rules_router.post("/reorder", response_model=ReorderResult, summary="Move a rule")
async def reorder_rules(
    data: ReorderDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: RuleService = Depends(),
) -> ReorderResult:
    return await service.reorder(current_user, data)


@rules_router.put("/{rule_id}", response_model=List[Rule], summary="Update a rule")
async def update_rule(
    rule_id: str,
    data: RuleDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: RuleService = Depends(),
) -> List[Rule]:
    return await service.update_rule(current_user, rule_id, data)


@rules_router.delete("/{rule_id}", response_model=List[Rule], summary="Delete a rule")
async def delete_rule(
    rule_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: RuleService = Depends(),
) -> List[Rule]:
    return await service.delete_rule(current_user, rule_id)

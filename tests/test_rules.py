"""
Tests for garden rules: ordering, grouping and drag-to-reorder.
"""
from typing import Any, Dict, List, Optional

import pytest

from gardenhub.modules.rules.application.rule_service import REORDER_FAILED_MESSAGE, RuleService
from gardenhub.modules.rules.domain.models import (
    ReorderDTO,
    Rule,
    RuleCategory,
    RuleDTO,
    array_move,
    group_by_category,
)
from gardenhub.modules.rules.domain.repository import RuleRepository
from gardenhub.shared.core.exceptions import AuthorizationError, NotFoundError

from conftest import network_error


class FakeRuleRepository(RuleRepository):

    def __init__(self, rules: List[Rule]):
        self.rules = {rule.id: rule for rule in rules}
        self.saved: List[List[Rule]] = []
        self.fail_save: Optional[Exception] = None

    async def list_rules(self) -> List[Rule]:
        return sorted(self.rules.values(), key=lambda r: r.order)

    async def create_rule(self, fields: Dict[str, Any]) -> None:
        rule_id = f"r{len(self.rules) + 1}"
        self.rules[rule_id] = Rule.model_validate({"id": rule_id, **fields})

    async def update_rule(self, rule_id: str, fields: Dict[str, Any]) -> None:
        self.rules[rule_id] = self.rules[rule_id].model_copy(update=fields)

    async def delete_rule(self, rule_id: str) -> None:
        self.rules.pop(rule_id)

    async def save_order(self, rules: List[Rule]) -> None:
        if self.fail_save is not None:
            raise self.fail_save
        self.saved.append(rules)
        for rule in rules:
            self.rules[rule.id] = rule


def _rule(rule_id: str, order: int, category: RuleCategory = RuleCategory.GENERAL) -> Rule:
    return Rule(id=rule_id, title=f"Rule {rule_id}", description="Be kind", category=category, order=order)


@pytest.fixture
def repository() -> FakeRuleRepository:
    return FakeRuleRepository([
        _rule("a", 0),
        _rule("b", 1, RuleCategory.SAFETY),
        _rule("c", 2),
    ])


def test_array_move():
    assert array_move(["a", "b", "c"], 0, 2) == ["b", "c", "a"]
    assert array_move(["a", "b", "c"], 2, 0) == ["c", "a", "b"]


def test_group_by_category_lists_every_category():
    grouped = group_by_category([_rule("a", 0), _rule("b", 1, RuleCategory.SAFETY)])
    assert set(grouped) == {"general", "safety", "plots", "community"}
    assert [r.id for r in grouped["safety"]] == ["b"]
    assert grouped["plots"] == []


async def test_reorder_persists_every_order(repository, admin):
    result = await RuleService(repository).reorder(admin, ReorderDTO(active_id="a", over_id="c"))

    assert result.error is None
    assert [(r.id, r.order) for r in result.rules] == [("b", 0), ("c", 1), ("a", 2)]
    assert len(repository.saved) == 1


async def test_reorder_onto_itself_is_noop(repository, admin):
    result = await RuleService(repository).reorder(admin, ReorderDTO(active_id="b", over_id="b"))
    assert [r.id for r in result.rules] == ["a", "b", "c"]
    assert repository.saved == []


async def test_reorder_failure_refetches(repository, admin):
    repository.fail_save = network_error()
    result = await RuleService(repository).reorder(admin, ReorderDTO(active_id="a", over_id="c"))
    assert result.error == REORDER_FAILED_MESSAGE
    assert [r.id for r in result.rules] == ["a", "b", "c"]


async def test_reorder_unknown_rule(repository, admin):
    with pytest.raises(NotFoundError):
        await RuleService(repository).reorder(admin, ReorderDTO(active_id="a", over_id="zzz"))


async def test_create_appends_at_end(repository, admin):
    rules = await RuleService(repository).create_rule(admin, RuleDTO(title=" Close the gate ", description="Always"))
    assert rules[-1].title == "Close the gate"
    assert rules[-1].order == 3


async def test_members_cannot_manage_rules(repository, member):
    with pytest.raises(AuthorizationError):
        await RuleService(repository).delete_rule(member, "a")

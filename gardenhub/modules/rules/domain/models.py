# 📄 File: gardenhub/modules/rules/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the garden's house rules, the topic each belongs to and the order they are shown in.
# 🧪 Purpose (Technical Summary):
# Pydantic models for the rules table, the rule form DTO and the pure reorder helper.
# 🔗 Dependencies:
# pydantic, enum
# 🔄 Connected Modules / Calls From:
# rules.infrastructure, rules.application.rule_service

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class RuleCategory(str, Enum):
    GENERAL = "general"
    SAFETY = "safety"
    PLOTS = "plots"
    COMMUNITY = "community"


class Rule(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: str
    category: RuleCategory = RuleCategory.GENERAL
    order: int = 0
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RuleDTO(BaseModel):
    title: str = Field(..., max_length=200)
    description: str
    category: RuleCategory = RuleCategory.GENERAL

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ReorderDTO(BaseModel):
    """Drag of one rule onto the position of another."""

    active_id: str
    over_id: str


def array_move(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Return a copy of ``items`` with the element at ``old_index`` moved to ``new_index``."""
    result = list(items)
    result.insert(new_index, result.pop(old_index))
    return result


def group_by_category(rules: Sequence[Rule]) -> Dict[str, List[Rule]]:
    grouped: Dict[str, List[Rule]] = {category.value: [] for category in RuleCategory}
    for rule in rules:
        grouped[rule.category.value].append(rule)
    return grouped

# 📄 File: gardenhub/modules/plots/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Describes garden plots, what is planted in them and which members look after them.
# 🧪 Purpose (Technical Summary):
# Pydantic models for the plots, plot_plants and plot_assignments tables, plus the
# write DTOs used by plot management.
# 🔗 Dependencies:
# pydantic, datetime, enum
# 🔄 Connected Modules / Calls From:
# plots.infrastructure, plots.application.plot_service, plots API router

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlotType(str, Enum):
    GROUND_PLANTED = "Ground Planted"
    RAISED_BED = "Raised Bed"
    PATHWAY = "Pathway"
    SITTING_AREA = "Sitting Area"
    AVAILABLE = "Available"


class PlantStatus(str, Enum):
    SEEDED = "seeded"
    SPROUTING = "sprouting"
    GROWING = "growing"
    HARVESTING = "harvesting"
    FINISHED = "finished"


class AssignmentRole(str, Enum):
    PRIMARY = "primary"
    HELPER = "helper"


class AssignedUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    username: Optional[str] = None
    email: Optional[str] = None


class PlotAssignment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    role: AssignmentRole
    plot_id: Optional[str] = None
    user_id: Optional[str] = None
    user: Optional[AssignedUser] = None


class PlotPlant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    plot_id: str
    plant_name: str
    status: PlantStatus = PlantStatus.SEEDED
    planted_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlotTaskSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    status: str


class Plot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    number: str
    size: Optional[str] = None
    soil_ph: Optional[float] = None
    sunlight: Optional[str] = None
    soil_type: Optional[str] = None
    irrigation: Optional[str] = None
    plot_type: Optional[PlotType] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    plants: List[PlotPlant] = Field(default_factory=list)
    tasks: List[PlotTaskSummary] = Field(default_factory=list)
    assignments: List[PlotAssignment] = Field(default_factory=list)


PLOT_SELECT = (
    "*, "
    "plants:plot_plants(*), "
    "tasks(*), "
    "assignments:plot_assignments(id, role, user:user_id(id, username, email))"
)


# =============================================================================
# WRITE MODELS
# =============================================================================

class PlotUpdateDTO(BaseModel):
    size: Optional[str] = None
    soil_ph: Optional[float] = Field(None, ge=0, le=14)
    sunlight: Optional[str] = None
    soil_type: Optional[str] = None
    irrigation: Optional[str] = None
    plot_type: Optional[PlotType] = None
    notes: Optional[str] = None

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class PlantDTO(BaseModel):
    plant_name: str
    status: PlantStatus = PlantStatus.SEEDED
    planted_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("plant_name")
    @classmethod
    def validate_plant_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Plant name is required")
        return v

    def to_fields(self) -> Dict[str, Any]:
        fields = self.model_dump(mode="json")
        fields["notes"] = (self.notes or "").strip() or None
        return fields


class AssignmentDTO(BaseModel):
    user_id: str
    role: AssignmentRole = AssignmentRole.HELPER

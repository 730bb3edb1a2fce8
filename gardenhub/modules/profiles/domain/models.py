# 📄 File: gardenhub/modules/profiles/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Describes a gardener's profile, their personal dashboard numbers and the badges
# they can earn by helping out in the garden.
# 🧪 Purpose (Technical Summary):
# Profile and dashboard models, the achievement catalogue with its one computed badge,
# and the profile edit DTO with trimmed username/email validation.
# 🔗 Dependencies:
# pydantic, task_board/plots/events domain models
# 🔄 Connected Modules / Calls From:
# profiles.application.profile_service, profiles API router

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gardenhub.modules.events.domain.models import Event
from gardenhub.modules.plots.domain.models import Plot
from gardenhub.modules.task_board.domain.models import Task, TaskStatus

GREEN_THUMB_THRESHOLD = 5
RECENT_TASK_LIMIT = 5
UPCOMING_EVENT_LIMIT = 5
SEARCH_LIMIT = 5


class UserRole(str, Enum):
    ADMIN = "admin"
    MOD = "mod"
    RUSER = "ruser"


class Profile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    role: UserRole = UserRole.RUSER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileStats(BaseModel):
    total_plots: int = 0
    completed_tasks: int = 0
    upcoming_events: int = 0


class Achievement(BaseModel):
    title: str
    description: str
    achieved: bool = False


# (title, description); only "Green Thumb" is computed today
ACHIEVEMENT_CATALOGUE = [
    ("Green Thumb", "Completed 5 garden tasks"),
    ("Event Enthusiast", "Attended 3 garden events"),
    ("Master Gardener", "Managed a plot for 6 months"),
    ("Cleanup Champion", "Completed 10 cleanup sessions"),
    ("Weed Warrior", "Removed weeds from 7 sections"),
    ("Soil Tester", "Performed 5 soil quality tests"),
    ("Soil Steward", "Amended soil in 4 garden beds"),
    ("Irrigation Inspector", "Inspected watering systems 3 times"),
    ("Tool Master", "Organized and maintained tools on 4 occasions"),
    ("Infrastructure Inspector", "Repaired 3 walkways or borders"),
    ("Pest Patrol", "Conducted 4 pest monitoring rounds"),
    ("Harvest Hero", "Collected produce during 3 harvests"),
    ("Planting Pro", "Planted seeds in 5 sessions"),
    ("Transplant Expert", "Transplanted seedlings 4 times"),
    ("Mulching Maestro", "Applied mulch in 6 garden areas"),
    ("Event Organizer", "Coordinated 2 community events"),
    ("Community Champion", "Led 5 volunteer meetings"),
    ("Innovation Award", "Submitted 3 creative ideas"),
    ("Safety Sentinel", "Performed 4 safety inspections"),
    ("Feedback Facilitator", "Gathered feedback from 10 volunteers"),
    ("Team Player", "Collaborated on 10 group projects"),
    ("Resource Recycler", "Recycled 50 lbs of garden waste"),
    ("Water Wizard", "Optimized watering schedules 4 times"),
    ("Plot Protector", "Maintained an assigned plot for 8 months"),
    ("Garden Guardian", "Ensured garden security for 6 months"),
]


def compute_achievements(stats: ProfileStats) -> List[Achievement]:
    achieved = {"Green Thumb": stats.completed_tasks >= GREEN_THUMB_THRESHOLD}
    return [
        Achievement(title=title, description=description, achieved=achieved.get(title, False))
        for title, description in ACHIEVEMENT_CATALOGUE
    ]


def compute_stats(plots: List[Plot], recent_tasks: List[Task], events: List[Event]) -> ProfileStats:
    """
    Dashboard counters.

    ``completed_tasks`` counts only within the recent task window, matching what
    the dashboard lists.
    """
    return ProfileStats(
        total_plots=len(plots),
        completed_tasks=sum(1 for task in recent_tasks if task.status == TaskStatus.COMPLETED),
        upcoming_events=len(events),
    )


class ProfileDashboard(BaseModel):
    profile: Profile
    stats: ProfileStats
    plots: List[Plot] = Field(default_factory=list)
    recent_tasks: List[Task] = Field(default_factory=list)
    upcoming_events: List[Event] = Field(default_factory=list)
    achievements: List[Achievement] = Field(default_factory=list)


class PublicProfile(BaseModel):
    profile: Profile
    plots: List[Plot] = Field(default_factory=list)
    achievements: List[Achievement] = Field(default_factory=list)


class ProfileUpdateDTO(BaseModel):
    username: str
    email: Optional[str] = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if v and "@" not in v:
            raise ValueError("Invalid email address")
        return v or None

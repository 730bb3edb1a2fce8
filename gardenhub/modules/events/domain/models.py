# 📄 File: gardenhub/modules/events/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Describes garden events such as workdays and workshops: when, where and how many can join.
# 🧪 Purpose (Technical Summary):
# Pydantic models for the events table and the event form DTO with date-range validation.
# 🔗 Dependencies:
# pydantic, datetime
# 🔄 Connected Modules / Calls From:
# events.infrastructure, events.application.event_service, profiles dashboard

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EventCreator(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    username: Optional[str] = None


class Event(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    max_participants: Optional[int] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    creator: Optional[EventCreator] = None


EVENT_SELECT = "*, creator:created_by(email, username)"


class EventDTO(BaseModel):
    """Values from the event form."""

    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    location: Optional[str] = None
    max_participants: Optional[int] = Field(None, ge=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @model_validator(mode="after")
    def validate_dates(self) -> "EventDTO":
        if self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self

    def to_fields(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": (self.description or "").strip() or None,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "location": (self.location or "").strip() or None,
            "max_participants": self.max_participants,
        }

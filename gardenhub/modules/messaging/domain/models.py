# 📄 File: gardenhub/modules/messaging/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Describes private conversations between members and the messages inside them.
# 🧪 Purpose (Technical Summary):
# Pydantic models for conversations, participants and messages, including the mapping
# from the raw embedded select (participant rows, message arrays) to render-ready shapes.
# 🔗 Dependencies:
# pydantic, datetime
# 🔄 Connected Modules / Calls From:
# messaging.infrastructure, messaging.application.messaging_service

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Participant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    username: Optional[str] = None
    role: Optional[str] = None


class LastMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    content: str
    sender_id: str
    read: bool = False
    created_at: datetime


class Conversation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    participants: List[Participant] = Field(default_factory=list)
    last_message: Optional[LastMessage] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Conversation":
        """
        Flatten ``participants:[{user: {...}}]`` and pick the newest entry of
        the embedded ``last_message`` array.
        """
        participants = [p["user"] for p in row.get("participants") or [] if p.get("user")]
        messages = row.get("last_message") or []
        if isinstance(messages, dict):
            messages = [messages]
        last = None
        if messages:
            last = max(
                (LastMessage.model_validate(m) for m in messages),
                key=lambda m: m.created_at,
            )
        return cls.model_validate({
            **{k: v for k, v in row.items() if k not in ("participants", "last_message")},
            "participants": participants,
            "last_message": last,
        })


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    conversation_id: str
    sender_id: str
    content: str
    read: bool = False
    created_at: Optional[datetime] = None
    sender: Optional[Participant] = None


CONVERSATION_SELECT = (
    "*, "
    "participants:conversation_participants(user:profiles(id, username, role)), "
    "last_message:messages(id, content, sender_id, read, created_at)"
)
MESSAGE_SELECT = "*, sender:profiles(id, username, role)"


class SendMessageDTO(BaseModel):
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v


class MarkReadDTO(BaseModel):
    message_ids: List[str] = Field(..., min_length=1)


class CreateConversationDTO(BaseModel):
    participant_ids: List[str] = Field(..., min_length=1)

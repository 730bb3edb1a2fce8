from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .models import Conversation, Message, Participant

RecordCallback = Callable[[Dict[str, Any]], Awaitable[None]]


class MessageRepository(ABC):
    """
    Repository interface for conversations, messages and the realtime feed.
    """

    @abstractmethod
    async def list_conversations(self) -> List[Conversation]:
        """Conversations visible to the caller, most recently updated first."""
        pass

    @abstractmethod
    async def list_messages(self, conversation_id: str) -> List[Message]:
        """Messages oldest first, each with its sender embedded."""
        pass

    @abstractmethod
    async def send_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        pass

    @abstractmethod
    async def mark_read(self, message_ids: List[str]) -> None:
        pass

    @abstractmethod
    async def create_conversation(self, participant_ids: List[str]) -> Conversation:
        pass

    @abstractmethod
    async def list_users(self, exclude_user_id: str) -> List[Participant]:
        pass

    @abstractmethod
    async def get_participant(self, user_id: str) -> Optional[Participant]:
        pass

    @abstractmethod
    async def subscribe_to_messages(self, conversation_id: str, on_record: RecordCallback):
        """
        Subscribe to new rows in ``messages`` for one conversation.

        Returns:
            A handle with an async ``unsubscribe()`` that is safe to call twice.
        """
        pass

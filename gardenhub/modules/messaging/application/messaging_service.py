# 📄 File: gardenhub/modules/messaging/application/messaging_service.py
# 🧭 Purpose (Layman Explanation):
# Lets members start conversations, send and read messages, and see new messages
# appear the moment they are written.
# 🧪 Purpose (Technical Summary):
# Messaging use cases over MessageRepository. The realtime subscription enriches each
# inserted row with its sender's profile before handing it to the caller's callback;
# the returned handle must be unsubscribed by the caller.
# 🔗 Dependencies:
# FastAPI Depends, messaging.domain, gardenhub.shared.core
# 🔄 Connected Modules / Calls From:
# messaging.presentation.api.v1.messages (HTTP and WebSocket endpoints)

from typing import Any, Awaitable, Callable, Dict, List

from fastapi import Depends

from gardenhub.shared.core.dependencies import CurrentUser
from gardenhub.shared.core.error_classification import handle_error
from gardenhub.shared.utils.logging import get_logger

from ..domain.models import Conversation, Message, Participant
from ..domain.repository import MessageRepository

logger = get_logger(__name__)

MessageCallback = Callable[[Message], Awaitable[None]]


class MessagingService:

    def __init__(self, repository: MessageRepository = Depends()):
        self.repository = repository

    async def list_conversations(self) -> List[Conversation]:
        return await self.repository.list_conversations()

    async def list_messages(self, conversation_id: str) -> List[Message]:
        return await self.repository.list_messages(conversation_id)

    async def send_message(self, user: CurrentUser, conversation_id: str, content: str) -> Message:
        message = await self.repository.send_message(conversation_id, user.user_id, content)
        logger.log_business_event(
            "message_sent", "Message sent", entity_id=message.id, entity_type="message",
            extra={"conversation_id": conversation_id},
        )
        return message

    async def mark_read(self, message_ids: List[str]) -> None:
        await self.repository.mark_read(message_ids)

    async def create_conversation(self, user: CurrentUser, participant_ids: List[str]) -> Conversation:
        """The caller is always a participant."""
        ids = list(dict.fromkeys(participant_ids))
        if user.user_id not in ids:
            ids.append(user.user_id)
        return await self.repository.create_conversation(ids)

    async def list_users(self, user: CurrentUser) -> List[Participant]:
        return await self.repository.list_users(user.user_id)

    async def subscribe(self, conversation_id: str, on_message: MessageCallback):
        """
        Deliver every new message in ``conversation_id`` to ``on_message``.

        Returns:
            Subscription handle; call ``unsubscribe()`` on teardown.
        """

        async def handle_record(record: Dict[str, Any]) -> None:
            sender = None
            try:
                sender = await self.repository.get_participant(record.get("sender_id"))
            except Exception as e:
                app_error = handle_error(e, operation="get_participant", table="profiles")
                logger.warning(f"Could not load sender for realtime message: {app_error.message}")
            message = Message.model_validate({**record, "sender": sender.model_dump() if sender else None})
            await on_message(message)

        return await self.repository.subscribe_to_messages(conversation_id, handle_record)

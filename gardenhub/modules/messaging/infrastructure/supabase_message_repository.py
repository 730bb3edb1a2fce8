# 📄 File: gardenhub/modules/messaging/infrastructure/supabase_message_repository.py
# 🧭 Purpose (Layman Explanation):
# Reads and writes member conversations in the hosted database and listens for new messages.
# 🧪 Purpose (Technical Summary):
# MessageRepository over the SupabaseGateway: embedded selects for conversations and
# messages, two-step conversation creation, and a postgres_changes INSERT channel per
# conversation wrapped in a Subscription handle.
# 🔗 Dependencies:
# gardenhub.shared.infrastructure.database.gateway, messaging.domain
# 🔄 Connected Modules / Calls From:
# gardenhub.main (dependency override), messaging WebSocket stream (get_stream_repository)

import logging
from typing import List, Optional

from fastapi import Depends

from gardenhub.shared.core.dependencies import (
    WebSocketSession,
    get_gateway,
    get_websocket_session,
)
from gardenhub.shared.core.exceptions import GatewayError
from gardenhub.shared.infrastructure.database.gateway import Subscription, SupabaseGateway

from ..domain.models import (
    CONVERSATION_SELECT,
    MESSAGE_SELECT,
    Conversation,
    Message,
    Participant,
)
from ..domain.repository import MessageRepository, RecordCallback

logger = logging.getLogger(__name__)


class SupabaseMessageRepository(MessageRepository):

    def __init__(self, gateway: SupabaseGateway = Depends(get_gateway)):
        self._gateway = gateway

    async def list_conversations(self) -> List[Conversation]:
        query = (
            self._gateway.table("conversations")
            .select(CONVERSATION_SELECT)
            .order("updated_at", desc=True)
        )
        rows = await self._gateway.execute(query, "list_conversations", "conversations")
        return [Conversation.from_row(row) for row in rows]

    async def list_messages(self, conversation_id: str) -> List[Message]:
        query = (
            self._gateway.table("messages")
            .select(MESSAGE_SELECT)
            .eq("conversation_id", conversation_id)
            .order("created_at")
        )
        rows = await self._gateway.execute(query, "list_messages", "messages")
        return [Message.model_validate(row) for row in rows]

    async def send_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        rows = await self._gateway.insert("messages", {
            "conversation_id": conversation_id,
            "sender_id": sender_id,
            "content": content,
            "read": False,
        })
        if not rows:
            raise GatewayError("Message was not stored", operation="send_message", table="messages")
        message = Message.model_validate(rows[0])
        sender = await self.get_participant(sender_id)
        return message.model_copy(update={"sender": sender})

    async def mark_read(self, message_ids: List[str]) -> None:
        query = self._gateway.table("messages").update({"read": True}).in_("id", message_ids)
        await self._gateway.execute(query, "mark_read", "messages")

    async def create_conversation(self, participant_ids: List[str]) -> Conversation:
        rows = await self._gateway.insert("conversations", {})
        if not rows:
            raise GatewayError(
                "Conversation was not created", operation="create_conversation", table="conversations"
            )
        conversation_id = rows[0]["id"]

        await self._gateway.insert("conversation_participants", [
            {"conversation_id": conversation_id, "user_id": user_id}
            for user_id in participant_ids
        ])

        query = (
            self._gateway.table("conversations")
            .select(CONVERSATION_SELECT)
            .eq("id", conversation_id)
            .limit(1)
        )
        created = await self._gateway.execute(query, "get_conversation", "conversations")
        logger.info(f"Conversation {conversation_id} created with {len(participant_ids)} participants")
        return Conversation.from_row(created[0] if created else rows[0])

    async def list_users(self, exclude_user_id: str) -> List[Participant]:
        query = self._gateway.table("profiles").select("id, username, role").neq("id", exclude_user_id)
        rows = await self._gateway.execute(query, "list_users", "profiles")
        return [Participant.model_validate(row) for row in rows]

    async def get_participant(self, user_id: str) -> Optional[Participant]:
        row = await self._gateway.select_one("profiles", "id, username, role", id=user_id)
        return Participant.model_validate(row) if row else None

    async def subscribe_to_messages(self, conversation_id: str, on_record: RecordCallback) -> Subscription:
        return await self._gateway.subscribe(
            f"messages:{conversation_id}",
            "messages",
            on_record,
            event="INSERT",
            filter=f"conversation_id=eq.{conversation_id}",
        )


async def get_stream_repository(
    session: WebSocketSession = Depends(get_websocket_session),
) -> MessageRepository:
    """Repository for WebSocket handlers, bound to the socket's access token."""
    return SupabaseMessageRepository(session.gateway)

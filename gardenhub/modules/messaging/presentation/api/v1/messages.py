"""
Messaging endpoints.

- GET /conversations, POST /conversations
- GET /conversations/{id}/messages, POST /conversations/{id}/messages
- POST /read
- GET /users
- WS /conversations/{id}/stream: pushes new messages, accepts {"content": ...} to send
"""

import asyncio
import json
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError as PydanticValidationError

from gardenhub.shared.core.dependencies import (
    CurrentUser,
    WebSocketSession,
    get_current_user,
    get_websocket_session,
)
from gardenhub.shared.core.error_classification import get_user_friendly_message
from gardenhub.shared.core.exceptions import GardenHubException

from ....application.messaging_service import MessagingService
from ....domain.models import (
    Conversation,
    CreateConversationDTO,
    MarkReadDTO,
    Message,
    Participant,
    SendMessageDTO,
)
from ....domain.repository import MessageRepository
from ....infrastructure.supabase_message_repository import get_stream_repository

logger = logging.getLogger(__name__)

messages_router = APIRouter()


@messages_router.get("/conversations", response_model=List[Conversation], summary="List conversations")
async def list_conversations(
    current_user: CurrentUser = Depends(get_current_user),
    service: MessagingService = Depends(),
) -> List[Conversation]:
    return await service.list_conversations()


@messages_router.post(
    "/conversations",
    response_model=Conversation,
    status_code=status.HTTP_201_CREATED,
    summary="Start a conversation",
)
async def create_conversation(
    data: CreateConversationDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: MessagingService = Depends(),
) -> Conversation:
    return await service.create_conversation(current_user, data.participant_ids)


@messages_router.get(
    "/conversations/{conversation_id}/messages",
    response_model=List[Message],
    summary="Messages in a conversation, oldest first",
)
async def list_messages(
    conversation_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MessagingService = Depends(),
) -> List[Message]:
    return await service.list_messages(conversation_id)


@messages_router.post(
    "/conversations/{conversation_id}/messages",
    response_model=Message,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def send_message(
    conversation_id: str,
    data: SendMessageDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: MessagingService = Depends(),
) -> Message:
    return await service.send_message(current_user, conversation_id, data.content)


@messages_router.post("/read", status_code=status.HTTP_204_NO_CONTENT, summary="Mark messages read")
async def mark_read(
    data: MarkReadDTO,
    current_user: CurrentUser = Depends(get_current_user),
    service: MessagingService = Depends(),
) -> Response:
    await service.mark_read(data.message_ids)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@messages_router.get("/users", response_model=List[Participant], summary="Members to message")
async def list_users(
    current_user: CurrentUser = Depends(get_current_user),
    service: MessagingService = Depends(),
) -> List[Participant]:
    return await service.list_users(current_user)


@messages_router.websocket("/conversations/{conversation_id}/stream")
async def stream_messages(
    websocket: WebSocket,
    conversation_id: str,
    session: WebSocketSession = Depends(get_websocket_session),
    repository: MessageRepository = Depends(get_stream_repository),
):
    """
    Push new messages of one conversation to the socket.

    The realtime channel lives exactly as long as the socket.
    """
    service = MessagingService(repository)
    outgoing: asyncio.Queue = asyncio.Queue()

    async def on_message(message: Message) -> None:
        await outgoing.put(message)

    await websocket.accept()
    subscription = await service.subscribe(conversation_id, on_message)
    logger.info(f"Message stream opened for conversation {conversation_id}")

    async def pump() -> None:
        try:
            while True:
                message = await outgoing.get()
                await websocket.send_text(message.model_dump_json())
        except Exception as e:
            logger.error(f"Message stream for conversation {conversation_id} failed: {e}", exc_info=e)
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)

    sender = asyncio.create_task(pump())
    try:
        while not sender.done():
            raw = await websocket.receive_text()
            try:
                data = SendMessageDTO.model_validate(json.loads(raw))
                await service.send_message(session.user, conversation_id, data.content)
            except (ValueError, PydanticValidationError):
                await websocket.send_json({"error": "Invalid message payload"})
            except GardenHubException as e:
                await websocket.send_json({"error": get_user_friendly_message(e)})
    except WebSocketDisconnect:
        logger.info(f"Message stream closed for conversation {conversation_id}")
    finally:
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning(f"Message stream for conversation {conversation_id} closed uncleanly: {e}")
        await subscription.unsubscribe()

"""
Tests for conversations, messages and the realtime message feed.
"""
import json
from typing import Any, Dict, List, Optional

from gardenhub.modules.messaging.application.messaging_service import MessagingService
from gardenhub.modules.messaging.domain.models import Conversation, Message, Participant
from gardenhub.modules.messaging.domain.repository import MessageRepository
from gardenhub.modules.messaging.infrastructure.supabase_message_repository import get_stream_repository
from gardenhub.shared.core.dependencies import WebSocketSession, get_websocket_session

from conftest import MEMBER_ID, OTHER_ID, network_error


class FakeSubscription:
    def __init__(self):
        self.unsubscribed = 0

    async def unsubscribe(self):
        self.unsubscribed += 1


class FakeMessageRepository(MessageRepository):

    def __init__(self):
        self.messages: List[Message] = []
        self.created_with: Optional[List[str]] = None
        self.on_record = None
        self.subscription = FakeSubscription()
        self.fail_participant: Optional[Exception] = None
        self.read: List[str] = []

    async def list_conversations(self) -> List[Conversation]:
        return []

    async def list_messages(self, conversation_id: str) -> List[Message]:
        return [m for m in self.messages if m.conversation_id == conversation_id]

    async def send_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        message = Message(
            id=f"m{len(self.messages) + 1}",
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
        )
        self.messages.append(message)
        return message

    async def mark_read(self, message_ids: List[str]) -> None:
        self.read.extend(message_ids)

    async def create_conversation(self, participant_ids: List[str]) -> Conversation:
        self.created_with = participant_ids
        return Conversation(id="c1", participants=[Participant(id=p) for p in participant_ids])

    async def list_users(self, exclude_user_id: str) -> List[Participant]:
        return [p for p in (Participant(id=MEMBER_ID), Participant(id=OTHER_ID)) if p.id != exclude_user_id]

    async def get_participant(self, user_id: str) -> Optional[Participant]:
        if self.fail_participant is not None:
            raise self.fail_participant
        return Participant(id=user_id, username="basil")

    async def subscribe_to_messages(self, conversation_id: str, on_record):
        self.on_record = on_record
        return self.subscription


def test_conversation_from_row_flattens_and_picks_latest():
    row: Dict[str, Any] = {
        "id": "c1",
        "participants": [{"user": {"id": "u1", "username": "fern"}}, {"user": None}],
        "last_message": [
            {"id": "m1", "content": "hi", "sender_id": "u1", "created_at": "2024-05-01T09:00:00Z"},
            {"id": "m2", "content": "hello", "sender_id": "u2", "created_at": "2024-05-01T10:00:00Z"},
        ],
    }
    conversation = Conversation.from_row(row)
    assert [p.id for p in conversation.participants] == ["u1"]
    assert conversation.last_message.id == "m2"


def test_conversation_without_messages():
    conversation = Conversation.from_row({"id": "c2", "participants": [], "last_message": []})
    assert conversation.last_message is None


async def test_create_conversation_always_includes_caller(member):
    repository = FakeMessageRepository()
    await MessagingService(repository).create_conversation(member, [OTHER_ID, OTHER_ID])
    assert repository.created_with == [OTHER_ID, MEMBER_ID]


async def test_list_users_excludes_caller(member):
    users = await MessagingService(FakeMessageRepository()).list_users(member)
    assert [u.id for u in users] == [OTHER_ID]


async def test_subscription_enriches_sender():
    repository = FakeMessageRepository()
    received: List[Message] = []

    async def on_message(message: Message) -> None:
        received.append(message)

    subscription = await MessagingService(repository).subscribe("c1", on_message)
    await repository.on_record({"id": "m9", "conversation_id": "c1", "sender_id": OTHER_ID, "content": "ripe!"})

    assert received[0].content == "ripe!"
    assert received[0].sender.username == "basil"

    await subscription.unsubscribe()
    assert repository.subscription.unsubscribed == 1


async def test_subscription_delivers_when_sender_lookup_fails():
    repository = FakeMessageRepository()
    repository.fail_participant = network_error()
    received: List[Message] = []

    async def on_message(message: Message) -> None:
        received.append(message)

    await MessagingService(repository).subscribe("c1", on_message)
    await repository.on_record({"id": "m9", "conversation_id": "c1", "sender_id": OTHER_ID, "content": "hi"})

    assert received[0].sender is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP and WebSocket endpoints
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _bind(app, repository, member):
    app.dependency_overrides[MessageRepository] = lambda: repository
    app.dependency_overrides[get_stream_repository] = lambda: repository
    app.dependency_overrides[get_websocket_session] = lambda: WebSocketSession(user=member, gateway=None)


def test_send_message_endpoint(app, client, member):
    repository = FakeMessageRepository()
    _bind(app, repository, member)

    response = client.post("/api/v1/messages/conversations/c1/messages", json={"content": "Tomatoes are in"})

    assert response.status_code == 201
    assert response.json()["sender_id"] == MEMBER_ID


def test_blank_message_rejected(app, client, member):
    _bind(app, FakeMessageRepository(), member)
    response = client.post("/api/v1/messages/conversations/c1/messages", json={"content": "   "})
    assert response.status_code == 422


def test_stream_sends_and_unsubscribes_on_close(app, client, member):
    repository = FakeMessageRepository()
    _bind(app, repository, member)

    with client.websocket_connect("/api/v1/messages/conversations/c1/stream") as websocket:
        websocket.send_text(json.dumps({"content": "hello"}))
        websocket.send_text("not json")
        assert websocket.receive_json() == {"error": "Invalid message payload"}

    assert [m.content for m in repository.messages] == ["hello"]
    assert repository.subscription.unsubscribed == 1

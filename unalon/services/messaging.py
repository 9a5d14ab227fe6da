"""Direct messages, threads and conversation summaries."""
import logging

from sqlalchemy import and_, or_

from unalon.core.errors import ValidationError
from unalon.core.store import EntityStore
from unalon.models import Message, MessageUpdate, User
from unalon.schemas import ConversationRead, MessageRead, UserRead

logger = logging.getLogger(__name__)


class MessagingService:
    """Messages between pairs of users."""

    def __init__(self, store: EntityStore):
        self.store = store

    def send_message(self, sender_id: str, receiver_id: str, content: str) -> MessageRead:
        """Create an unread message. Content is stored trimmed and must not be empty."""
        content = content.strip() if content else ""
        if not content:
            raise ValidationError("Message content cannot be empty")
        if receiver_id == sender_id:
            raise ValidationError("Cannot send a message to yourself")
        if self.store.get(User, receiver_id) is None:
            raise ValidationError("Unknown receiver")

        message = self.store.insert(Message, Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            is_read=False,
        ))
        logger.debug(f"Message {message.id} sent from {sender_id} to {receiver_id}")
        return MessageRead.model_validate(message)

    def get_thread(self, user_a: str, user_b: str) -> list[MessageRead]:
        """Every message exchanged between the two users, oldest first."""
        messages = self.store.list(
            Message,
            or_(
                and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                and_(Message.sender_id == user_b, Message.receiver_id == user_a),
            ),
            order_by=Message.timestamp,
        )
        return [MessageRead.model_validate(m) for m in messages]

    def mark_thread_read(self, reader_id: str, from_id: str) -> int:
        """Mark everything ``from_id`` sent to ``reader_id`` as read.

        Returns how many messages changed; calling it again returns 0.
        """
        changed = self.store.update_where(
            Message,
            MessageUpdate(is_read=True),
            Message.sender_id == from_id,
            Message.receiver_id == reader_id,
            Message.is_read == False,  # noqa: E712
        )
        if changed:
            logger.debug(f"Marked {changed} messages from {from_id} to {reader_id} read")
        return changed

    def list_conversations(self, user_id: str) -> list[ConversationRead]:
        """
        One entry per counterpart the user has exchanged messages with.

        Each entry carries the counterpart's profile, the latest message in
        either direction and how many of the counterpart's messages are
        still unread. Newest conversation first. Counterparts that no longer
        resolve to a user are left out.
        """
        messages = self.store.list(
            Message,
            or_(Message.sender_id == user_id, Message.receiver_id == user_id),
            order_by=Message.timestamp,
        )

        last_message: dict[str, Message] = {}
        unread: dict[str, int] = {}
        for message in messages:
            other_id = message.receiver_id if message.sender_id == user_id else message.sender_id
            # Ascending order, so the last assignment wins
            last_message[other_id] = message
            unread.setdefault(other_id, 0)
            if message.sender_id == other_id and not message.is_read:
                unread[other_id] += 1

        conversations = []
        for other_id, message in last_message.items():
            user = self.store.get(User, other_id)
            if user is None:
                continue
            conversations.append(ConversationRead(
                user=UserRead.model_validate(user),
                last_message=MessageRead.model_validate(message),
                unread_count=unread[other_id],
            ))

        conversations.sort(key=lambda c: c.last_message.timestamp, reverse=True)
        return conversations

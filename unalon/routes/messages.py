"""Chat routes: conversation list, threads and sending."""
from fastapi import APIRouter, Depends

from unalon.routes.deps import get_current_user_id, get_messaging_service
from unalon.schemas import ConversationRead, MessageCreate, MessageRead
from unalon.services.messaging import MessagingService

router = APIRouter(prefix="/api", tags=["messages"])


@router.get("/conversations", response_model=list[ConversationRead])
async def list_conversations(
    user_id: str = Depends(get_current_user_id),
    messaging: MessagingService = Depends(get_messaging_service),
):
    """Conversations of the current user, most recent first."""
    return messaging.list_conversations(user_id)


@router.get("/messages/{other_user_id}", response_model=list[MessageRead])
async def get_thread(
    other_user_id: str,
    user_id: str = Depends(get_current_user_id),
    messaging: MessagingService = Depends(get_messaging_service),
):
    """
    Fetch the thread with another user.

    Everything the other user sent is marked read first, so the returned
    thread already reflects the read state.
    """
    messaging.mark_thread_read(reader_id=user_id, from_id=other_user_id)
    return messaging.get_thread(user_id, other_user_id)


@router.post("/messages", response_model=MessageRead)
async def send_message(
    body: MessageCreate,
    user_id: str = Depends(get_current_user_id),
    messaging: MessagingService = Depends(get_messaging_service),
):
    """Send a message from the current user. 400 on empty content."""
    return messaging.send_message(user_id, body.receiver_id, body.content)

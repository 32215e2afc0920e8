from typing import List, Optional
from fastapi import APIRouter, Depends, Response
from sqlmodel import Session
from app.config import settings
from app.database import get_session
from app.schemas.identity_schemas import Identity
from app.schemas.message_schemas import ConversationView, MessageCreate, MessageView
from app.services.conversation_service import get_thread, list_conversations, send_message
from app.utils.token import get_current_identity

router = APIRouter()


@router.get("", response_model=List[ConversationView])
def conversations(
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return list_conversations(session=session, identity=identity)


@router.get("/{other_id}", response_model=List[MessageView])
def thread(
    other_id: int,
    response: Response,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    messages = get_thread(session=session, identity=identity, other_id=other_id)

    # clients poll this endpoint for new messages
    response.headers["X-Poll-Interval"] = str(settings.THREAD_POLL_INTERVAL_SECONDS)
    return messages


@router.post("", response_model=MessageView)
def post_message(
    data: MessageCreate,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return send_message(
        session=session,
        identity=identity,
        receiver_id=data.receiver_id,
        content=data.content,
        listing_id=data.listing_id,
    )

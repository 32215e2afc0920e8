import logging
from typing import Dict, List, Optional

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.errors import StoreWriteError, ValidationError
from app.models.message import Message
from app.schemas.identity_schemas import Identity
from app.schemas.message_schemas import ConversationView, MessageView
from app.services.profile_service import ensure_profile, profiles_by_id, to_summary
from app.utils.token import require_identity

logger = logging.getLogger(__name__)


def list_conversations(*, session: Session, identity: Optional[Identity]) -> List[ConversationView]:
    """One entry per counterpart, most recently active first."""
    caller = require_identity(identity)
    me = caller.user_id

    messages = session.exec(
        select(Message)
        .where(or_(Message.sender_id == me, Message.receiver_id == me))
        .order_by(Message.created_at.desc(), Message.id.desc())
    ).all()

    # dicts keep insertion order, so groups come out newest first
    groups: Dict[int, List[Message]] = {}
    for msg in messages:
        other = msg.receiver_id if msg.sender_id == me else msg.sender_id
        groups.setdefault(other, []).append(msg)

    profiles = profiles_by_id(session, groups)

    conversations = []
    for other, thread in groups.items():
        conversations.append(
            ConversationView(
                user_id=other,
                profile=to_summary(profiles.get(other)),
                last_message=MessageView.model_validate(thread[0]),
                unread_count=sum(1 for m in thread if m.receiver_id == me and not m.read),
                messages=[MessageView.model_validate(m) for m in thread],
            )
        )

    return conversations


def get_thread(*, session: Session, identity: Optional[Identity], other_id: int) -> List[Message]:
    """Two-party thread, oldest first. Everything addressed to the caller is marked read."""
    caller = require_identity(identity)
    me = caller.user_id

    try:
        session.execute(
            update(Message)
            .where(
                Message.receiver_id == me,
                Message.sender_id == other_id,
                Message.read == False,  # noqa: E712
            )
            .values(read=True)
        )
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Failed to mark thread {other_id} read for {me}")
        raise StoreWriteError("Failed to update messages") from e

    return session.exec(
        select(Message)
        .where(
            or_(
                and_(Message.sender_id == me, Message.receiver_id == other_id),
                and_(Message.sender_id == other_id, Message.receiver_id == me),
            )
        )
        .order_by(Message.created_at.asc(), Message.id.asc())
    ).all()


def send_message(
    *,
    session: Session,
    identity: Optional[Identity],
    receiver_id: Optional[int],
    content: Optional[str],
    listing_id: Optional[int] = None,
) -> Message:
    caller = require_identity(identity)

    if not receiver_id or not content or not content.strip():
        raise ValidationError("Missing required fields")

    message = Message(
        sender_id=caller.user_id,
        receiver_id=receiver_id,
        content=content,
        listing_id=listing_id,
        read=False,
    )

    try:
        ensure_profile(session, caller)
        session.add(message)
        session.commit()
        session.refresh(message)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Failed to send message from {caller.user_id} to {receiver_id}")
        raise StoreWriteError("Failed to send message") from e

    return message

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from app.schemas.identity_schemas import ProfileSummary


class MessageCreate(BaseModel):
    # presence and emptiness are checked by the service so both paths fail the same way
    receiver_id: Optional[int] = None
    content: Optional[str] = None
    listing_id: Optional[int] = None


class MessageView(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    listing_id: Optional[int] = None
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationView(BaseModel):
    user_id: int
    profile: Optional[ProfileSummary] = None
    last_message: MessageView
    unread_count: int
    messages: List[MessageView] = []

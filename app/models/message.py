from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Message(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    # identity-provider user ids; a profile row may not exist yet
    sender_id: int = Field(index=True)
    receiver_id: int = Field(index=True)
    listing_id: Optional[int] = Field(default=None, foreign_key="listing.id")

    content: str
    read: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

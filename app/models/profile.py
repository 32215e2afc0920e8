from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Profile(SQLModel, table=True):
    # same id as the identity's user id
    id: int = Field(primary_key=True)
    full_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

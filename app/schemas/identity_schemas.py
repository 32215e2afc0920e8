from pydantic import BaseModel
from typing import Optional


class Identity(BaseModel):
    """Caller resolved once per request from the bearer token."""
    user_id: int
    email: Optional[str] = None


class ProfileSummary(BaseModel):
    id: int
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

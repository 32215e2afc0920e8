from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class ListingStatus(str, Enum):
    available = "available"
    sold = "sold"
    removed = "removed"


class Listing(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    seller_id: int = Field(foreign_key="profile.id", index=True)
    book_id: int = Field(foreign_key="book.id")

    price: float
    image_url: Optional[str] = None

    # available -> sold happens once, at checkout finalization
    status: ListingStatus = Field(default=ListingStatus.available, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime

class CartItem(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("buyer_id", "listing_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    buyer_id: int = Field(foreign_key="profile.id", index=True)
    listing_id: int = Field(foreign_key="listing.id")
    quantity: int = Field(default=1, gt=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

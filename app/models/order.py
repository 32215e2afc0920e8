from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    cancelled = "cancelled"


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    buyer_id: int = Field(foreign_key="profile.id", index=True)
    seller_id: int = Field(foreign_key="profile.id", index=True)

    # one order per listing, a listing is only ever sold once
    listing_id: int = Field(foreign_key="listing.id", unique=True)

    total_amount: float
    status: OrderStatus = Field(default=OrderStatus.pending, index=True)
    payment_id: Optional[str] = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

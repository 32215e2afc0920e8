from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.order import OrderStatus
from app.schemas.identity_schemas import ProfileSummary


class OrderView(BaseModel):
    id: int
    listing_id: int
    book_title: Optional[str] = None
    image_url: Optional[str] = None
    total_amount: float
    status: OrderStatus
    payment_id: Optional[str] = None
    created_at: datetime
    counterpart: Optional[ProfileSummary] = None


class BuyerStats(BaseModel):
    total_orders: int
    total_spent: float
    pending_orders: int

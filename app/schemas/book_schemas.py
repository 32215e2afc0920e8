from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.book import BookCondition
from app.models.listing import ListingStatus
from app.schemas.identity_schemas import ProfileSummary


class ListingCreate(BaseModel):
    # book
    title: str = Field(..., min_length=1, max_length=200)
    author: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    isbn: Optional[str] = None
    category: Optional[str] = None
    condition: BookCondition = BookCondition.good

    # listing
    price: float = Field(..., gt=0)
    image_url: Optional[str] = None


class BookView(BaseModel):
    id: int
    title: str
    author: str
    description: Optional[str] = None
    condition: BookCondition


class ListingView(BaseModel):
    id: int
    price: float
    image_url: Optional[str] = None
    status: ListingStatus
    created_at: datetime
    seller_id: int
    book: BookView
    seller: Optional[ProfileSummary] = None


class ListingPage(BaseModel):
    total_items: int
    total_pages: int
    current_page: int
    limit: int
    results: List[ListingView]
